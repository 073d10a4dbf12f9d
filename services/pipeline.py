# services/pipeline.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from services.common.jurisdiction import DEFAULT_JURISDICTION, Jurisdiction
from services.document.compiler import STANDARD_NAME, Document, compile_document
from services.encoding.aamva import EncodedPayload, encode
from services.layout.builder import LayoutModel, build_layout
from services.records.normalize import normalize_record_input
from services.records.record import Record
from services.validation.schema_validation import validate_with_schema
from services.validation.validator import ValidationResult, validate

logger = logging.getLogger(__name__)


class PipelineError(RuntimeError):
    """Non-HTTP error for pipeline failures."""


class ValidationFailed(PipelineError):
    """Record failed validation; no document was produced."""

    def __init__(self, result: ValidationResult) -> None:
        self.result = result
        super().__init__("Validation failed: " + ", ".join(result.errors))


@dataclass(frozen=True)
class PipelineConfig:
    normalize_input: bool = True
    default_orientation: str = "horizontal"
    template: str = "dl"
    jurisdiction: Jurisdiction = field(default=DEFAULT_JURISDICTION)


@dataclass(frozen=True)
class GenerationResult:
    record: Record
    validation: ValidationResult
    layout: LayoutModel
    payload: EncodedPayload
    document: Document


class DocumentPipeline:
    """raw mapping -> Record -> validate -> (encode, layout) -> compile."""

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self.config = config or PipelineConfig()

    def prepare(self, data: Mapping[str, Any]) -> Record:
        """Shape-check and (optionally) normalize a raw mapping into a Record."""
        if not isinstance(data, Mapping):
            raise PipelineError(f"Record input must be a JSON object, got {type(data).__name__}")

        raw = normalize_record_input(data) if self.config.normalize_input else dict(data)
        ok, msg = validate_with_schema(raw, "record")
        if not ok:
            raise PipelineError(f"Malformed record input: {msg}")
        return Record.from_mapping(raw)

    def validate(self, data: Mapping[str, Any], now: Optional[datetime] = None) -> ValidationResult:
        return validate(self.prepare(data), now=now)

    def encode(self, data: Mapping[str, Any], now: Optional[datetime] = None) -> EncodedPayload:
        record = self._validated(self.prepare(data), now)[0]
        return encode(record, self.config.jurisdiction)

    def generate(
        self,
        data: Mapping[str, Any],
        orientation: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> GenerationResult:
        """
        Run the full pipeline. Raises ValidationFailed (carrying every error)
        instead of returning a partial document.
        """
        now = now or datetime.now(timezone.utc)
        record = self.prepare(data)
        record, result = self._validated(record, now)

        orientation = orientation or record.card_format or self.config.default_orientation
        jurisdiction = self.config.jurisdiction

        layout = build_layout(record, orientation, jurisdiction)
        logger.info("Layout %s built with %d zones", layout.format, len(layout.zones))

        payload = encode(record, jurisdiction)
        logger.info("Encoded payload: %d bytes", payload.data_length)

        meta: Dict[str, Any] = {
            "generatedAt": now.isoformat(),
            "standard": STANDARD_NAME,
            "template": self.config.template,
            "format": orientation,
            **dict(metadata or {}),
        }
        document = compile_document(
            record=record,
            layout=layout,
            payload=payload,
            metadata=meta,
            jurisdiction=jurisdiction,
        )
        logger.info("Compiled document %s", document.document_id)

        return GenerationResult(
            record=record,
            validation=result,
            layout=layout,
            payload=payload,
            document=document,
        )

    @staticmethod
    def _validated(record: Record, now: Optional[datetime]) -> Tuple[Record, ValidationResult]:
        result = validate(record, now=now)
        if not result.is_valid:
            logger.warning("Validation failed with %d error(s)", len(result.errors))
            raise ValidationFailed(result)
        logger.info("Validated %d fields (%d warnings)", result.validated_fields, len(result.warnings))
        return record, result
