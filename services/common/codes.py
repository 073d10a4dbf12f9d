# services/common/codes.py
"""Static AAMVA code tables shared by the encoder, layout builder and compiler."""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping


DOCUMENT_TYPES: Mapping[str, str] = MappingProxyType({
    "DL": "DRIVER LICENSE",
    "ID": "IDENTIFICATION CARD",
    "CDL": "COMMERCIAL DRIVER LICENSE",
    "EDL": "ENHANCED DRIVER LICENSE",
})

CARD_FORMATS = ("horizontal", "vertical")

VEHICLE_CLASSES: Mapping[str, str] = MappingProxyType({
    "A": "Any combination of vehicles",
    "B": "Large trucks, buses, and tractor-trailers",
    "C": "Regular vehicles and small trucks",
    "D": "Regular operator license",
    "M": "Motorcycles",
})

ENDORSEMENTS: Mapping[str, str] = MappingProxyType({
    "H": "Hazardous materials",
    "N": "Tank vehicles",
    "P": "Passenger vehicles",
    "S": "School bus",
    "T": "Double/triple trailers",
    "X": "Combination of tank vehicle and hazardous materials",
})

RESTRICTIONS: Mapping[str, str] = MappingProxyType({
    "A": "Corrective lenses",
    "B": "Outside rearview mirror",
    "C": "Prosthetic aid",
    "D": "Automatic transmission",
    "E": "No manual transmission equipped CMV",
    "F": "Outside rearview mirror and/or signal",
    "G": "Limit to daylight driving only",
    "H": "Limit to employment",
    "I": "Limited other",
    "J": "Other adaptive devices",
    "K": "CDL Intrastate only",
    "L": "Vehicles without air brakes",
})

# D20 physical description codes
EYE_COLORS: Mapping[str, str] = MappingProxyType({
    "BLK": "Black",
    "BLU": "Blue",
    "BRO": "Brown",
    "DIC": "Dichromatic",
    "GRY": "Gray",
    "GRN": "Green",
    "HAZ": "Hazel",
    "MAR": "Maroon",
    "PNK": "Pink",
})

HAIR_COLORS: Mapping[str, str] = MappingProxyType({
    "BLD": "Bald",
    "BLK": "Black",
    "BLN": "Blond",
    "BRO": "Brown",
    "BRN": "Brown",
    "GRY": "Gray",
    "RED": "Red/Auburn",
    "SDY": "Sandy",
    "WHI": "White",
    "UNK": "Unknown",
})

UNKNOWN_COLOR = "UNK"

# sentinel used by the endorsement and restriction fields
NONE_CODE = "NONE"

_TABLES: Dict[str, Mapping[str, str]] = {
    "classification": VEHICLE_CLASSES,
    "endorsement": ENDORSEMENTS,
    "restriction": RESTRICTIONS,
}


def describe_codes(codes: str | None, kind: str) -> List[Dict[str, str]]:
    """
    Expand a code string character by character.

    kind is one of 'classification', 'endorsement', 'restriction'.
    The NONE sentinel (and an empty value) expands to an empty list.
    """
    table = _TABLES.get(kind)
    if table is None:
        raise ValueError(f"Unknown code kind: {kind}")
    if not codes or codes == NONE_CODE:
        return []
    return [
        {"code": code, "description": table.get(code, f"Unknown {kind}")}
        for code in codes
    ]


def eye_color_code(value: str | None) -> str:
    return value if value in EYE_COLORS else UNKNOWN_COLOR


def hair_color_code(value: str | None) -> str:
    return value if value in HAIR_COLORS else UNKNOWN_COLOR
