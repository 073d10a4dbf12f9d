from __future__ import annotations

import pytest

import services.pipeline as pipeline_mod
from services.common.jurisdiction import Jurisdiction
from services.pipeline import (
    DocumentPipeline,
    PipelineConfig,
    PipelineError,
    ValidationFailed,
)


def test_generate_runs_every_stage(record_data, now):
    result = DocumentPipeline().generate(record_data, now=now)

    assert result.validation.is_valid
    assert result.layout.format == "horizontal"
    assert result.payload.data.startswith("@")
    assert result.document.machine_readable["zoneV"]["aamvaString"] == result.payload.data
    assert result.document.header["generatedAt"] == now.isoformat()
    assert result.document.metadata["template"] == "dl"


def test_orientation_precedence(record_data, now):
    pipe = DocumentPipeline(PipelineConfig(default_orientation="vertical"))
    assert pipe.generate(record_data, now=now).layout.format == "vertical"

    record_data["cardFormat"] = "horizontal"
    assert pipe.generate(record_data, now=now).layout.format == "horizontal"
    assert pipe.generate(record_data, orientation="vertical", now=now).document.header["format"] == "vertical"


def test_unknown_orientation_raises_value_error(record_data, now):
    with pytest.raises(ValueError):
        DocumentPipeline().generate(record_data, orientation="diagonal", now=now)


def test_input_is_normalized_before_validation(record_data, now):
    record_data.update({"sex": "female", "familyName": " sample ", "dateOfBirth": "3-15-1985"})
    record = DocumentPipeline().generate(record_data, now=now).record
    assert record.sex == "F"
    assert record.family_name == "SAMPLE"
    assert record.date_of_birth == "03/15/1985"


def test_normalization_can_be_disabled(record_data, now):
    record_data["sex"] = "female"
    pipe = DocumentPipeline(PipelineConfig(normalize_input=False))
    assert not pipe.validate(record_data, now=now).is_valid


def test_validation_failure_carries_every_error(record_data, now):
    record_data.update({"familyName": "", "vehicleClassifications": "Q"})
    with pytest.raises(ValidationFailed) as exc:
        DocumentPipeline().generate(record_data, now=now)

    errors = exc.value.result.errors
    assert "Required field 'familyName' is missing or empty" in errors
    assert "Invalid vehicle classification 'Q'" in errors
    assert str(exc.value).startswith("Validation failed: ")


def test_no_document_after_failed_validation(record_data, now, monkeypatch):
    calls = []
    monkeypatch.setattr(pipeline_mod, "compile_document", lambda **kw: calls.append(kw))
    record_data["sex"] = "Q"

    with pytest.raises(ValidationFailed):
        DocumentPipeline().generate(record_data, now=now)
    assert calls == []


def test_non_mapping_input():
    with pytest.raises(PipelineError, match="JSON object"):
        DocumentPipeline().prepare(["not", "a", "record"])


def test_malformed_input_fails_schema_check(record_data):
    record_data["organDonor"] = "yes"
    with pytest.raises(PipelineError, match="Malformed record input: organDonor"):
        DocumentPipeline().prepare(record_data)


def test_encode_uses_configured_jurisdiction(record_data, now):
    nevada = Jurisdiction(name="NEVADA", code="NV", iin="636049")
    payload = DocumentPipeline(PipelineConfig(jurisdiction=nevada)).encode(record_data, now=now)
    assert "ANSI 636049" in payload.data


def test_caller_metadata_is_merged(record_data, now):
    doc = DocumentPipeline().generate(record_data, metadata={"requestId": "r-1"}, now=now).document
    assert doc.metadata["requestId"] == "r-1"
    assert doc.metadata["documentId"]


def test_warnings_do_not_block_generation(record_data, now):
    record_data["cardFormat"] = "vertical"
    result = DocumentPipeline().generate(record_data, now=now)
    assert result.validation.warnings == ("Vertical format recommended for under 21",)
    assert result.layout.format == "vertical"
