# services/encoding/aamva.py
"""
AAMVA tagged-field payload (the text that would go into the PDF417 symbol).

Only the data string is produced. Symbol dimensions are estimated from the
string length; no codewords, rows or error correction are computed.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from services.common.codes import NONE_CODE, eye_color_code, hair_color_code
from services.common.jurisdiction import DEFAULT_JURISDICTION, Jurisdiction
from services.records.record import Record


COMPLIANCE_INDICATOR = "@"
DATA_ELEMENT_SEPARATOR = "\n"
RECORD_SEPARATOR = "\x1e"
SEGMENT_TERMINATOR = "\r"
FILE_TYPE = "ANSI "
AAMVA_VERSION = "11"
NUMBER_OF_ENTRIES = "01"

SUBFILE_TYPE = "DL"
SUBFILE_OFFSET = "0041"

SYMBOL_STANDARD = "ISO/IEC 15438"
SYMBOL_FORMAT = "PDF417"

ERROR_CORRECTION_LEVEL = 5
X_DIMENSION_MM = 0.250
MODULES_PER_COLUMN = 17
MAX_SYMBOL_MM = (75.565, 38.1)
MIN_SYMBOL_MM = (20.0, 10.0)

MISSING_DATE = "00000000"

# fields the payload can't be built without (dates fall back to MISSING_DATE)
REQUIRED_FIELDS = (
    "familyName",
    "givenNames",
    "address",
    "customerIdentifier",
    "documentDiscriminator",
)

_DATE_RE = re.compile(r"\d{2}/\d{2}/\d{4}")
_FEET_INCHES_RE = re.compile(r"(\d+)'-?(\d{1,2})\"?")
_WEIGHT_RE = re.compile(r"(\d{1,3}) (lb|kg)")
_TAG_RE = re.compile(r"^[A-Z]{3}")


class EncodingError(ValueError):
    """Record does not meet the encoder's preconditions."""


@dataclass(frozen=True)
class EncodedPayload:
    data: str
    data_length: int
    specifications: Dict[str, Any] = field(default_factory=dict)
    standard: str = SYMBOL_STANDARD
    aamva_version: str = AAMVA_VERSION
    compliance: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": self.data,
            "dataLength": self.data_length,
            "specifications": _deep_copy(self.specifications),
            "standard": self.standard,
            "aamvaVersion": self.aamva_version,
            "compliance": _deep_copy(self.compliance),
        }


def _deep_copy(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: (_deep_copy(v) if isinstance(v, dict) else v) for k, v in d.items()}


def format_date(value: Optional[str]) -> str:
    """MM/DD/CCYY -> MMDDCCYY. Missing dates become 00000000."""
    if not value:
        return MISSING_DATE
    return value.replace("/", "")


def format_height(value: Optional[str]) -> str:
    """Feet/inches heights are converted to total inches ('070 in'); cm heights pass through."""
    if not value:
        return "000 in"
    m = _FEET_INCHES_RE.fullmatch(value)
    if m:
        total = int(m.group(1)) * 12 + int(m.group(2))
        return f"{total:03d} in"
    return value


def split_given_names(given_names: str) -> Tuple[str, str]:
    parts = given_names.split(" ")
    return parts[0], " ".join(parts[1:])


def split_address(address: str, default_jurisdiction: str) -> Dict[str, str]:
    """
    'STREET, CITY, JJ POSTAL' -> street / city / jurisdiction / postal (postal right-padded to 9 with '0').
    """
    parts = address.split(",")
    street = parts[0].strip()
    city = parts[1].strip() if len(parts) > 1 and parts[1].strip() else "UNKNOWN"

    tokens = parts[2].strip().split(" ") if len(parts) > 2 else []
    state = tokens[0] if tokens and tokens[0] else default_jurisdiction
    postal = tokens[1] if len(tokens) > 1 and tokens[1] else "00000"

    return {
        "street": street,
        "city": city,
        "jurisdiction": state,
        "postal": postal.ljust(9, "0"),
    }


def check_encodable(record: Record) -> None:
    missing = [k for k in REQUIRED_FIELDS if not record.get(k)]
    if missing:
        raise EncodingError(f"Missing required fields for PDF417: {', '.join(missing)}")

    for k in ("dateOfBirth", "dateOfIssue", "dateOfExpiry"):
        v = record.get(k)
        if v and not _DATE_RE.fullmatch(v):
            raise EncodingError(f"Invalid date format for {k}. Use MM/DD/CCYY")


def build_header(jurisdiction: Jurisdiction) -> str:
    return (
        COMPLIANCE_INDICATOR
        + DATA_ELEMENT_SEPARATOR
        + RECORD_SEPARATOR
        + SEGMENT_TERMINATOR
        + FILE_TYPE
        + jurisdiction.iin
        + AAMVA_VERSION
        + jurisdiction.jurisdiction_version
        + NUMBER_OF_ENTRIES
    )


def build_elements(record: Record, jurisdiction: Jurisdiction) -> List[Tuple[str, str]]:
    """Ordered (tag, value) pairs: Table D.3 mandatory elements, then present Table D.4 ones."""
    first, middle = split_given_names(record.given_names)
    addr = split_address(record.address, jurisdiction.code)
    sex_code = {"M": "1", "F": "2"}.get(record.sex or "", "9")

    elements: List[Tuple[str, str]] = [
        ("DCA", record.vehicle_classifications or jurisdiction.default_vehicle_class),
        ("DCB", record.restrictions or NONE_CODE),
        ("DCD", record.endorsements or NONE_CODE),
        ("DBA", format_date(record.date_of_expiry)),
        ("DCS", record.family_name),
        ("DAC", first),
        ("DAD", middle),
        ("DBD", format_date(record.date_of_issue)),
        ("DBB", format_date(record.date_of_birth)),
        ("DBC", sex_code),
        ("DAY", eye_color_code(record.eye_color)),
        ("DAU", format_height(record.height)),
        ("DAG", addr["street"]),
        ("DAI", addr["city"]),
        ("DAJ", addr["jurisdiction"]),
        ("DAK", addr["postal"]),
        ("DAQ", record.customer_identifier),
        ("DCF", record.document_discriminator),
        ("DCG", jurisdiction.country),
        # truncation indicators: family / first / middle not truncated
        ("DDE", "N"),
        ("DDF", "N"),
        ("DDG", "N"),
    ]

    if record.hair_color:
        elements.append(("DAZ", hair_color_code(record.hair_color)))

    if record.suffix:
        elements.append(("DCU", record.suffix))

    if record.weight:
        m = _WEIGHT_RE.fullmatch(record.weight)
        if m:
            tag = "DAW" if m.group(2) == "lb" else "DAX"
            elements.append((tag, m.group(1).zfill(3)))

    if record.compliance is not None:
        elements.append(("DDA", "F" if record.compliance.real_id else "N"))
        elements.append(("DDB", format_date(record.date_of_issue)))
        if record.compliance.limited_duration:
            elements.append(("DDD", "1"))

    return elements


def serialize_elements(elements: List[Tuple[str, str]]) -> str:
    for tag, value in elements:
        if DATA_ELEMENT_SEPARATOR in value or SEGMENT_TERMINATOR in value:
            raise EncodingError(f"Value for {tag} contains a line or segment separator")
    return "".join(f"{tag}{value}{DATA_ELEMENT_SEPARATOR}" for tag, value in elements)


def build_subfile(elements_text: str) -> str:
    # length counts the repeated subfile type in front of the elements
    length = str(len(elements_text) + len(SUBFILE_TYPE)).zfill(4)
    return SUBFILE_TYPE + SUBFILE_OFFSET + length + SUBFILE_TYPE + elements_text + SEGMENT_TERMINATOR


def estimate_symbol(data_length: int) -> Dict[str, Any]:
    """Rough PDF417 footprint from the payload length (3 characters per codeword column)."""
    columns = max(1, math.ceil(math.sqrt(data_length / 3)))
    rows = math.ceil(data_length / (columns * 3))
    width = columns * MODULES_PER_COLUMN * X_DIMENSION_MM
    height = rows * 3 * X_DIMENSION_MM
    max_w, max_h = MAX_SYMBOL_MM
    min_w, min_h = MIN_SYMBOL_MM

    return {
        "dataLength": data_length,
        "estimatedDimensions": {
            "columns": columns,
            "rows": rows,
            "width": min(width, max_w),
            "height": min(height, max_h),
        },
        "specifications": {
            "xDimension": X_DIMENSION_MM,
            "rowHeight": 3 * X_DIMENSION_MM,
            "quietZone": X_DIMENSION_MM,
            "errorCorrectionLevel": ERROR_CORRECTION_LEVEL,
        },
        "minimumSize": {"width": min_w, "height": min_h},
        "maximumSize": {"width": max_w, "height": max_h},
    }


def encode(record: Record, jurisdiction: Jurisdiction = DEFAULT_JURISDICTION) -> EncodedPayload:
    """
    Serialize a validated record into the AAMVA header + DL subfile text.

    Raises EncodingError when a field the payload depends on is missing, or
    when a value would break the element framing.
    """
    check_encodable(record)

    elements_text = serialize_elements(build_elements(record, jurisdiction))
    data = build_header(jurisdiction) + build_subfile(elements_text)
    specs = estimate_symbol(len(data))

    return EncodedPayload(
        data=data,
        data_length=len(data),
        specifications=specs,
        compliance={
            "aamvaCompliant": True,
            "errorCorrectionLevel": ERROR_CORRECTION_LEVEL,
            "minimumSize": dict(specs["minimumSize"]),
        },
    )


def parse_elements(data: str) -> Dict[str, str]:
    """
    Read the tagged elements back out of a payload string.

    The first element follows the subfile designator on the header line; every
    other line is '<TAG><value>'. The trailing segment terminator is dropped.
    """
    if not data.startswith(COMPLIANCE_INDICATOR):
        raise ValueError("Payload does not start with the compliance indicator")

    marker = SUBFILE_TYPE + SUBFILE_OFFSET
    start = data.find(marker)
    if start < 0:
        raise ValueError("Payload has no DL subfile designator")

    # designator is type(2) + offset(4) + length(4), followed by the repeated type
    body = data[start + len(marker) + 4 + len(SUBFILE_TYPE):]
    body = body.rstrip(SEGMENT_TERMINATOR)

    out: Dict[str, str] = {}
    for line in body.split(DATA_ELEMENT_SEPARATOR):
        if not line:
            continue
        if not _TAG_RE.match(line):
            raise ValueError(f"Malformed data element: {line!r}")
        out[line[:3]] = line[3:]
    return out
