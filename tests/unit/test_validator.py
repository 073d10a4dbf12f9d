from __future__ import annotations

from datetime import date, datetime

import pytest

from services.records.record import Record
from services.validation.validator import age_on, parse_date, validate


def make(data, **overrides):
    return Record.from_mapping({**data, **overrides})


def test_valid_record_has_no_errors_or_warnings(record_data, now):
    result = validate(make(record_data), now=now)
    assert result.is_valid
    assert result.errors == ()
    assert result.warnings == ()
    # 14 mandatory + hairColor + weight
    assert result.validated_fields == 16


def test_absent_optional_fields_are_not_counted(record_data, now):
    record_data.pop("hairColor")
    record_data.pop("weight")
    assert validate(make(record_data), now=now).validated_fields == 14


def test_empty_record_reports_every_mandatory_field(now):
    result = validate(Record(), now=now)
    assert not result.is_valid
    assert result.validated_fields == 14
    assert len(result.errors) == 14
    assert result.errors[0] == "Required field 'familyName' is missing or empty"
    assert result.errors[-1] == "Required field 'eyeColor' is missing or empty"


def test_empty_string_counts_as_missing(record_data, now):
    result = validate(make(record_data, familyName=""), now=now)
    assert result.errors == ("Required field 'familyName' is missing or empty",)


def test_bad_date_format_reported_once(record_data, now):
    result = validate(make(record_data, dateOfBirth="1985-03-15"), now=now)
    assert result.errors == ("Field 'dateOfBirth' must be in MM/DD/CCYY format",)


def test_impossible_calendar_date(record_data, now):
    result = validate(make(record_data, dateOfIssue="02/30/2025"), now=now)
    assert result.errors == ("Field 'dateOfIssue' contains an invalid date",)


@pytest.mark.parametrize("dob", ["01/01/2030", "12/31/1899"])
def test_birth_date_outside_range(record_data, now, dob):
    result = validate(make(record_data, dateOfBirth=dob), now=now)
    assert "Field 'dateOfBirth' is outside valid date range" in result.errors


def test_expiry_must_follow_issue(record_data, now):
    result = validate(make(record_data, dateOfIssue="09/26/2025", dateOfExpiry="09/25/2025"), now=now)
    assert result.errors == ("Date of expiry must be after date of issue",)

    same_day = validate(make(record_data, dateOfExpiry="09/26/2025"), now=now)
    assert "Date of expiry must be after date of issue" in same_day.errors


def test_sex_allowed_values(record_data, now):
    result = validate(make(record_data, sex="Q"), now=now)
    assert result.errors == ("Field 'sex' has invalid value 'Q'. Allowed values: M, F, X",)


def test_length_and_charset(record_data, now):
    too_long = validate(make(record_data, familyName="A" * 41), now=now)
    assert too_long.errors == ("Field 'familyName' exceeds maximum length of 40 characters",)

    bad_chars = validate(make(record_data, familyName="SMITH@"), now=now)
    assert bad_chars.errors == ("Field 'familyName' contains invalid characters for type 'ANS'",)

    digits_in_alpha = validate(make(record_data, eyeColor="BR0"), now=now)
    assert digits_in_alpha.errors == ("Field 'eyeColor' contains invalid characters for type 'A'",)


def test_height_and_weight_formats(record_data, now):
    assert validate(make(record_data, height="180 cm"), now=now).is_valid
    assert validate(make(record_data, weight="80 kg"), now=now).is_valid

    result = validate(make(record_data, height="70 inches", weight="180"), now=now)
    assert len(result.errors) == 2
    assert result.errors[0].startswith("Field 'height' must be in format")
    assert result.errors[1].startswith("Field 'weight' must be in format")


def test_vehicle_class_and_endorsement_codes(record_data, now):
    result = validate(make(record_data, vehicleClassifications="DQ", endorsements="HZ"), now=now)
    assert result.errors == (
        "Invalid vehicle classification 'Q'",
        "Invalid endorsement 'Z'",
    )


def test_none_endorsement_sentinel_is_accepted(record_data, now):
    assert validate(make(record_data, endorsements="NONE"), now=now).is_valid


def test_non_boolean_real_id_is_a_warning(record_data, now):
    record_data["compliance"] = {"realId": "yes"}
    result = validate(make(record_data), now=now)
    assert result.is_valid
    assert result.warnings == ("REAL ID compliance flag should be boolean",)


def test_unknown_document_type_and_card_format(record_data, now):
    result = validate(make(record_data, documentType="XX", cardFormat="square"), now=now)
    assert result.errors == ("Invalid document type 'XX'", "Invalid card format 'square'")


def test_orientation_warnings_follow_age(record_data, now):
    minor = validate(make(record_data, dateOfBirth="01/01/2010", cardFormat="horizontal"), now=now)
    assert minor.warnings == ("Horizontal format recommended for ages 21 and over",)

    # turns 21 on the reference date
    adult = validate(make(record_data, dateOfBirth="10/01/2004", cardFormat="vertical"), now=now)
    assert adult.warnings == ("Vertical format recommended for under 21",)

    almost = validate(make(record_data, dateOfBirth="10/02/2004", cardFormat="vertical"), now=now)
    assert almost.warnings == ()


def test_to_dict_uses_interchange_keys(record_data, now):
    out = validate(make(record_data, sex="Q"), now=now).to_dict()
    assert out["isValid"] is False
    assert out["validatedFields"] == 16
    assert isinstance(out["errors"], list)
    assert out["warnings"] == []


def test_parse_date_and_age_helpers():
    assert parse_date("03/15/1985") == date(1985, 3, 15)
    assert parse_date("13/01/2020") is None
    assert parse_date("02/29/2023") is None
    assert parse_date(None) is None

    assert age_on(date(1985, 3, 15), date(2025, 3, 14)) == 39
    assert age_on(date(1985, 3, 15), date(2025, 3, 15)) == 40


def test_now_defaults_to_current_time(record_data):
    # dates in the sample are far from any boundary
    assert validate(make(record_data)).is_valid
    assert validate(make(record_data), now=datetime(2025, 10, 1)).is_valid


@pytest.mark.parametrize("field,value", [
    ("familyName", "SMITH\nDDD1"),
    ("familyName", "SMITH\n"),
    ("address", "123 MAIN STREET,\rANYTOWN, ST 12345"),
    ("eyeColor", "BRO\t"),
])
def test_line_breaks_and_tabs_are_not_valid_characters(record_data, now, field, value):
    result = validate(make(record_data, **{field: value}), now=now)
    assert not result.is_valid
    assert result.errors[0].startswith(f"Field '{field}' contains invalid characters")


@pytest.mark.parametrize("field,value", [
    ("dateOfBirth", "03/15/1985\n"),
    ("height", "5'-10\"\n"),
    ("weight", "180 lb\n"),
])
def test_formatted_fields_reject_trailing_newline(record_data, now, field, value):
    result = validate(make(record_data, **{field: value}), now=now)
    assert not result.is_valid
    assert result.errors[0].startswith(f"Field '{field}' must be in")


def test_validation_is_idempotent(record_data, now):
    record = make(record_data, sex="Q", cardFormat="vertical")
    first = validate(record, now=now)
    second = validate(record, now=now)
    assert first == second
    assert first.errors and first.warnings
    assert validate(make(record_data), now=now) == validate(make(record_data), now=now)
