"""Configuration dataclasses for synthetic record generation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple


@dataclass
class GeneratorConfig:
    """Main configuration for the sample dataset pipeline."""

    # Output paths
    output_dir: Path = Path("data/synthetic")
    documents_dirname: str = "documents"
    manifest_name: str = "manifest.csv"

    # Faker locale (US addresses/names match the AAMVA field formats)
    locale: str = "en_US"

    # Holder age range in years
    min_age: int = 16
    max_age: int = 85

    # Document validity
    max_issue_age_days: int = 4 * 365
    validity_years: int = 8

    # Sampling weights
    real_id_ratio: float = 0.8
    document_type_weights: Tuple[float, float, float, float] = (0.7, 0.15, 0.1, 0.05)  # DL, ID, CDL, EDL
    metric_ratio: float = 0.1  # share of records with cm/kg measurements

    vehicle_classes: Tuple[str, ...] = field(
        default_factory=lambda: ("D", "C", "DM", "CM", "B", "A")
    )
