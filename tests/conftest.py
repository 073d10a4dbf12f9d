from __future__ import annotations

from datetime import datetime

import pytest


SAMPLE_RECORD = {
    "familyName": "SAMPLE",
    "givenNames": "JOHN MICHAEL",
    "dateOfBirth": "03/15/1985",
    "dateOfIssue": "09/26/2025",
    "dateOfExpiry": "03/15/2033",
    "customerIdentifier": "D123456789",
    "documentDiscriminator": "1234567890123",
    "address": "123 MAIN STREET, ANYTOWN, ST 12345",
    "vehicleClassifications": "D",
    "endorsements": "NONE",
    "restrictions": "NONE",
    "sex": "M",
    "height": "5'-10\"",
    "eyeColor": "BRO",
    "hairColor": "BRO",
    "weight": "180 lb",
    "compliance": {"realId": True},
}


@pytest.fixture
def record_data():
    """Fresh copy of a complete, valid record mapping (camelCase keys)."""
    data = dict(SAMPLE_RECORD)
    data["compliance"] = dict(SAMPLE_RECORD["compliance"])
    return data


@pytest.fixture
def now():
    return datetime(2025, 10, 1, 12, 0, 0)
