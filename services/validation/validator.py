# services/validation/validator.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from services.common.codes import (
    CARD_FORMATS,
    DOCUMENT_TYPES,
    ENDORSEMENTS,
    NONE_CODE,
    VEHICLE_CLASSES,
)
from services.records.record import Record


@dataclass(frozen=True)
class FieldRule:
    name: str
    required: bool = False
    max_length: Optional[int] = None
    charset: Optional[str] = None  # "A" | "N" | "ANS"
    allowed: Optional[Tuple[str, ...]] = None
    format: Optional[str] = None  # "date" | "height" | "weight"


# Table 1: mandatory data elements, in check order
MANDATORY_RULES: Tuple[FieldRule, ...] = (
    FieldRule("familyName", required=True, max_length=40, charset="ANS"),
    FieldRule("givenNames", required=True, max_length=80, charset="ANS"),
    FieldRule("dateOfBirth", required=True, format="date"),
    FieldRule("dateOfIssue", required=True, format="date"),
    FieldRule("dateOfExpiry", required=True, format="date"),
    FieldRule("customerIdentifier", required=True, max_length=25, charset="ANS"),
    FieldRule("documentDiscriminator", required=True, max_length=25, charset="ANS"),
    FieldRule("address", required=True, max_length=108, charset="ANS"),
    FieldRule("vehicleClassifications", required=True, max_length=6, charset="ANS"),
    FieldRule("endorsements", required=True, max_length=5, charset="ANS"),
    FieldRule("restrictions", required=True, max_length=12, charset="ANS"),
    FieldRule("sex", required=True, allowed=("M", "F", "X")),
    FieldRule("height", required=True, format="height"),
    FieldRule("eyeColor", required=True, max_length=12, charset="A"),
)

# Table 2: optional data elements
OPTIONAL_RULES: Tuple[FieldRule, ...] = (
    FieldRule("hairColor", max_length=12, charset="A"),
    FieldRule("weight", format="weight"),
    FieldRule("suffix", max_length=5, charset="ANS"),
    FieldRule("placeOfBirth", max_length=33, charset="A"),
    FieldRule("auditInformation", max_length=25, charset="ANS"),
)

CHARSETS: Dict[str, re.Pattern] = {
    "A": re.compile(r"[A-Za-z \-'.]*"),
    "N": re.compile(r"[0-9]*"),
    "ANS": re.compile(r"[A-Za-z0-9 \-'./,#&()+*]*"),
}

_DATE_RE = re.compile(r"(0[1-9]|1[0-2])/(0[1-9]|[12][0-9]|3[01])/([12][0-9]{3})")
_HEIGHT_RE = re.compile(r"\d'-\d{2}\"|\d{3} cm")
_WEIGHT_RE = re.compile(r"\d{1,3} (lb|kg)")

MIN_BIRTH_DATE = date(1900, 1, 1)
ADULT_AGE = 21


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    validated_fields: int
    errors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "validatedFields": self.validated_fields,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse MM/DD/CCYY into a date; None if the pattern or the calendar date is invalid."""
    if not value:
        return None
    m = _DATE_RE.fullmatch(value)
    if not m:
        return None
    try:
        return date(int(m.group(3)), int(m.group(1)), int(m.group(2)))
    except ValueError:
        # e.g. 02/30/2020
        return None


def age_on(birth: date, today: date) -> int:
    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1
    return years


def _is_empty(v: Any) -> bool:
    return v is None or v == ""


def _check_format(name: str, value: str, fmt: str, errors: List[str]) -> None:
    if fmt == "date":
        if not _DATE_RE.fullmatch(value):
            errors.append(f"Field '{name}' must be in MM/DD/CCYY format")
        elif parse_date(value) is None:
            errors.append(f"Field '{name}' contains an invalid date")
    elif fmt == "height":
        if not _HEIGHT_RE.fullmatch(value):
            errors.append(f"Field '{name}' must be in format \"5'-10\"\" or \"180 cm\"")
    elif fmt == "weight":
        if not _WEIGHT_RE.fullmatch(value):
            errors.append(f"Field '{name}' must be in format \"180 lb\" or \"80 kg\"")
    else:
        raise ValueError(f"Unknown format: {fmt}")


def _check_field(record: Record, rule: FieldRule, errors: List[str]) -> None:
    value = record.get(rule.name)

    if _is_empty(value):
        if rule.required:
            errors.append(f"Required field '{rule.name}' is missing or empty")
        return

    if rule.format:
        _check_format(rule.name, value, rule.format, errors)

    if rule.charset and not CHARSETS[rule.charset].fullmatch(value):
        errors.append(f"Field '{rule.name}' contains invalid characters for type '{rule.charset}'")

    if rule.max_length is not None and len(value) > rule.max_length:
        errors.append(f"Field '{rule.name}' exceeds maximum length of {rule.max_length} characters")

    if rule.allowed is not None and value not in rule.allowed:
        errors.append(
            f"Field '{rule.name}' has invalid value '{value}'. Allowed values: {', '.join(rule.allowed)}"
        )


def _check_cross_field(record: Record, today: date, errors: List[str]) -> None:
    birth = parse_date(record.date_of_birth)
    if birth is not None and not (MIN_BIRTH_DATE <= birth <= today):
        errors.append("Field 'dateOfBirth' is outside valid date range")

    issue = parse_date(record.date_of_issue)
    expiry = parse_date(record.date_of_expiry)
    if issue is not None and expiry is not None and expiry <= issue:
        errors.append("Date of expiry must be after date of issue")

    for code in record.vehicle_classifications or "":
        if code not in VEHICLE_CLASSES:
            errors.append(f"Invalid vehicle classification '{code}'")

    if record.endorsements and record.endorsements != NONE_CODE:
        for code in record.endorsements:
            if code not in ENDORSEMENTS:
                errors.append(f"Invalid endorsement '{code}'")


def _check_compliance(record: Record, today: date, errors: List[str], warnings: List[str]) -> None:
    if record.document_type and record.document_type not in DOCUMENT_TYPES:
        errors.append(f"Invalid document type '{record.document_type}'")

    if record.card_format and record.card_format not in CARD_FORMATS:
        errors.append(f"Invalid card format '{record.card_format}'")

    if record.compliance is not None:
        real_id = record.compliance.real_id
        if real_id is not None and not isinstance(real_id, bool):
            warnings.append("REAL ID compliance flag should be boolean")

    birth = parse_date(record.date_of_birth)
    if birth is not None:
        age = age_on(birth, today)
        if age < ADULT_AGE and record.card_format == "horizontal":
            warnings.append("Horizontal format recommended for ages 21 and over")
        if age >= ADULT_AGE and record.card_format == "vertical":
            warnings.append("Vertical format recommended for under 21")


def validate(record: Record, now: Optional[datetime] = None) -> ValidationResult:
    """
    Check a record against the AAMVA data element rules.

    Checks run in phases: mandatory fields (Table 1 order), optional fields,
    cross-field/format constraints, compliance advisories. `now` is sampled
    once if not given; it only drives the birth-date range and the
    orientation warnings.
    """
    today = (now or datetime.now()).date()
    errors: List[str] = []
    warnings: List[str] = []
    validated = 0

    for rule in MANDATORY_RULES:
        validated += 1
        _check_field(record, rule, errors)

    for rule in OPTIONAL_RULES:
        if record.get(rule.name) is None:
            continue
        validated += 1
        _check_field(record, rule, errors)

    _check_cross_field(record, today, errors)
    _check_compliance(record, today, errors, warnings)

    return ValidationResult(
        is_valid=not errors,
        validated_fields=validated,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )
