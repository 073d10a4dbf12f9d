from __future__ import annotations

import pytest

from services.records.normalize import normalize_date, normalize_record_input, normalize_sex


@pytest.mark.parametrize("raw,expected", [
    ("03/15/1985", "03/15/1985"),
    ("3/5/1985", "03/05/1985"),
    ("03-15-1985", "03/15/1985"),
    ("03.15.1985", "03/15/1985"),
    ("03151985", "03/15/1985"),
    (" 03/15/1985 ", "03/15/1985"),
    ("1985-03-15", None),
    ("", None),
])
def test_normalize_date(raw, expected):
    assert normalize_date(raw) == expected


@pytest.mark.parametrize("raw,expected", [
    ("m", "M"),
    ("Male", "M"),
    ("female", "F"),
    ("Non-Binary", "X"),
    ("not specified", "X"),
    ("?", None),
])
def test_normalize_sex(raw, expected):
    assert normalize_sex(raw) == expected


def test_normalize_record_input_canonicalizes_text():
    raw = {
        "familyName": "  sample ",
        "givenNames": "john    michael",
        "dateOfBirth": "3-15-1985",
        "sex": "male",
        "eyeColor": "bro",
        "cardFormat": "VERTICAL",
        "photo": " data:image/png;base64,AAAA ",
        "organDonor": True,
    }
    out = normalize_record_input(raw)
    assert out["familyName"] == "SAMPLE"
    assert out["givenNames"] == "JOHN MICHAEL"
    assert out["dateOfBirth"] == "03/15/1985"
    assert out["sex"] == "M"
    assert out["eyeColor"] == "BRO"
    assert out["cardFormat"] == "vertical"
    assert out["photo"] == " data:image/png;base64,AAAA "
    assert out["organDonor"] is True


def test_unrecognized_values_are_left_for_the_validator():
    out = normalize_record_input({"dateOfBirth": "1985-03-15", "sex": "?"})
    assert out["dateOfBirth"] == "1985-03-15"
    assert out["sex"] == "?"


def test_input_is_not_mutated():
    raw = {"familyName": " sample ", "compliance": {"realId": True}}
    out = normalize_record_input(raw)
    out["compliance"]["realId"] = False
    assert raw == {"familyName": " sample ", "compliance": {"realId": True}}
