"""
Dataset Generation CLI
======================

Generate synthetic DL/ID records and compile them into documents.

Usage:
    python -m tools.synthetic_records.generate_dataset \\
        --output data/synthetic \\
        --num-records 100 \\
        --seed 42

Output structure:
    data/synthetic/
    ├── documents/
    │   ├── 000001_DL.json
    │   ├── 000002_ID.json
    │   └── ...
    └── manifest.csv
"""

import argparse
import json
from datetime import datetime, time
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd
from tqdm import tqdm

from apps.common.settings import load_settings
from services.pipeline import DocumentPipeline, GenerationResult, PipelineConfig, ValidationFailed

from .config import GeneratorConfig
from .utils import generate_record


def save_sample(
    result: GenerationResult,
    output_id: str,
    documents_dir: Path,
) -> Dict[str, Any]:
    """
    Save the compiled document as JSON.

    Returns manifest row dict.
    """
    record = result.record
    doc_type = record.document_type_or_default

    filename = f"{output_id}_{doc_type}.json"
    with open(documents_dir / filename, "w", encoding="utf-8") as f:
        json.dump(result.document.to_dict(), f, indent=2, ensure_ascii=False)

    return {
        "id": output_id,
        "document_id": result.document.document_id,
        "document_type": doc_type,
        "card_format": result.layout.format,
        "filename": filename,
        "real_id": result.document.compliance["realId"],
        "data_length": result.payload.data_length,
        "warnings": len(result.validation.warnings),
        "family_name": record.family_name,
        "given_names": record.given_names,
        "date_of_birth": record.date_of_birth,
        "customer_identifier": record.customer_identifier,
    }


def generate_dataset(
    num_records: int = 100,
    output_dir: Path = Path("data/synthetic"),
    seed: Optional[int] = None,
    pipeline: Optional[DocumentPipeline] = None,
) -> pd.DataFrame:
    """
    Generate records, run each through the document pipeline and write the results.

    Args:
        num_records: Number of documents to generate
        output_dir: Root output directory
        seed: Random seed for reproducibility (record i uses seed + i)
        pipeline: Pipeline to compile with; built from settings if omitted
    """
    config = GeneratorConfig(output_dir=Path(output_dir))
    documents_dir = config.output_dir / config.documents_dirname
    documents_dir.mkdir(parents=True, exist_ok=True)

    if pipeline is None:
        settings = load_settings()
        pipeline = DocumentPipeline(PipelineConfig(
            normalize_input=settings.normalize_input,
            default_orientation=settings.default_orientation,
            template=settings.template,
            jurisdiction=settings.jurisdiction,
        ))

    today = datetime.now().date()
    now = datetime.combine(today, time(12, 0))

    print(f"📁 Output directory: {config.output_dir.resolve()}")
    print(f"🎯 Target: {num_records} documents\n")

    manifest_rows = []
    failures = 0
    for i in tqdm(range(num_records), desc="Documents", unit="doc"):
        record_seed = None if seed is None else seed + i
        data = generate_record(seed=record_seed, config=config, today=today)
        try:
            result = pipeline.generate(data, now=now)
        except ValidationFailed as exc:
            failures += 1
            tqdm.write(f"⚠️  Record {i + 1} rejected: {'; '.join(exc.result.errors)}")
            continue
        manifest_rows.append(save_sample(result, f"{i + 1:06d}", documents_dir))

    print("\n📋 Saving manifest...")
    manifest_path = config.output_dir / config.manifest_name
    df = pd.DataFrame(manifest_rows)
    df.to_csv(manifest_path, index=False, encoding="utf-8")

    print(f"\n✅ Dataset generation complete!")
    print(f"   Documents: {len(list(documents_dir.glob('*.json')))}")
    print(f"   Rejected:  {failures}")
    print(f"   Manifest:  {manifest_path}")

    if not df.empty:
        print("\n📊 Document types:")
        print(df["document_type"].value_counts())
        print("\n🪪 Card formats:")
        print(df["card_format"].value_counts())

    return df


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate synthetic AAMVA DL/ID documents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--output",
        type=Path,
        default=Path("data/synthetic"),
        help="Output directory for generated dataset",
    )

    parser.add_argument(
        "--num-records",
        type=int,
        default=100,
        help="Number of documents to generate",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )

    args = parser.parse_args()

    generate_dataset(
        num_records=args.num_records,
        output_dir=args.output,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
