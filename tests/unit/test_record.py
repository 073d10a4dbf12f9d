from __future__ import annotations

import pytest

from services.records.record import Compliance, Record


def test_from_mapping_accepts_camel_and_snake_keys():
    camel = Record.from_mapping({"familyName": "SAMPLE", "dateOfBirth": "03/15/1985"})
    snake = Record.from_mapping({"family_name": "SAMPLE", "date_of_birth": "03/15/1985"})
    assert camel == snake
    assert camel.get("familyName") == "SAMPLE"


def test_scalar_coercion():
    record = Record.from_mapping({"customerIdentifier": 123456789, "organDonor": 1, "unknownKey": "x"})
    assert record.customer_identifier == "123456789"
    assert record.organ_donor is True
    assert record.veteran is False


def test_compliance_block_keeps_raw_real_id():
    record = Record.from_mapping({"compliance": {"realId": "yes", "limitedDuration": True}})
    assert record.compliance == Compliance(real_id="yes", limited_duration=True)


def test_bad_input_types():
    with pytest.raises(TypeError):
        Record.from_mapping(["familyName", "SAMPLE"])
    with pytest.raises(TypeError):
        Record.from_mapping({"compliance": "yes"})


def test_to_mapping_omits_absent_fields(record_data):
    out = Record.from_mapping(record_data).to_mapping()
    assert out["familyName"] == "SAMPLE"
    assert out["compliance"] == {"realId": True}
    assert out["organDonor"] is False
    assert "suffix" not in out
    assert Record.from_mapping(out) == Record.from_mapping(record_data)


def test_defaults():
    record = Record()
    assert record.document_type_or_default == "DL"
    assert record.card_format_or_default == "horizontal"


def test_compliance_ignores_version_keys():
    # versions come from the encoder constants and the jurisdiction profile
    compliance = Compliance.from_mapping({"realId": True, "aamvaVersion": "10", "jurisdictionVersion": "02"})
    assert compliance == Compliance(real_id=True)
    assert compliance.to_mapping() == {"realId": True}
