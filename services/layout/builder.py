# services/layout/builder.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from services.common.codes import DOCUMENT_TYPES, describe_codes
from services.common.jurisdiction import DEFAULT_JURISDICTION, Jurisdiction
from services.encoding.aamva import SYMBOL_FORMAT, SYMBOL_STANDARD
from services.layout.zones import (
    CARD_DIMENSIONS_MM,
    NON_PORTRAIT_SIDE_ZONES,
    PORTRAIT_SIDE_ZONES,
    ZoneGeometry,
    color_scheme,
    zones_for,
)
from services.records.record import Record


FONT_FAMILY = "Arial"

# Zone II personal data grid
LEFT_COLUMN_X = 2
RIGHT_COLUMN_X = 25
FIRST_LINE_Y = 2
LINE_HEIGHT = 3

# (label, record key); labels carry the AAMVA element number
LEFT_COLUMN_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("1", "familyName"),
    ("2", "givenNames"),
    ("3 DOB", "dateOfBirth"),
    ("4a Iss", "dateOfIssue"),
    ("4b Exp", "dateOfExpiry"),
    ("4d", "customerIdentifier"),
    ("5 DD", "documentDiscriminator"),
)
RIGHT_COLUMN_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("8", "address"),
    ("9", "vehicleClassifications"),
    ("12", "restrictions"),
    ("15 Sex", "sex"),
    ("16 Hgt", "height"),
    ("18 Eyes", "eyeColor"),
    ("19 Hair", "hairColor"),
)


@dataclass(frozen=True)
class LayoutElement:
    zone: str
    type: str  # text | symbol | portrait | signature | barcode
    content: str
    position: Tuple[float, float]
    dimensions: Optional[Tuple[float, float]] = None
    font: Optional[Tuple[Tuple[str, Any], ...]] = None
    color: Optional[str] = None
    extra: Tuple[Tuple[str, Any], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "zone": self.zone,
            "type": self.type,
            "content": self.content,
            "position": {"x": self.position[0], "y": self.position[1]},
        }
        if self.dimensions is not None:
            out["dimensions"] = {"width": self.dimensions[0], "height": self.dimensions[1]}
        if self.font is not None:
            out["font"] = dict(self.font)
        if self.color is not None:
            out["color"] = self.color
        for k, v in self.extra:
            out[k] = dict(v) if isinstance(v, tuple) else v
        return out


@dataclass(frozen=True)
class LayoutModel:
    format: str
    zones: Tuple[ZoneGeometry, ...]
    portrait_side: Tuple[LayoutElement, ...]
    non_portrait_side: Tuple[LayoutElement, ...]
    real_id_compliant: bool = False
    color_scheme: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def elements_in(self, zone: str) -> List[LayoutElement]:
        return [e for e in self.portrait_side + self.non_portrait_side if e.zone == zone]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "dimensions": dict(CARD_DIMENSIONS_MM),
            "zones": {z.zone: z.to_dict() for z in self.zones},
            "portraitSide": {
                "zones": list(PORTRAIT_SIDE_ZONES),
                "elements": [e.to_dict() for e in self.portrait_side],
            },
            "nonPortraitSide": {
                "zones": list(NON_PORTRAIT_SIDE_ZONES),
                "elements": [e.to_dict() for e in self.non_portrait_side],
            },
            "compliance": {
                "aamvaCompliant": True,
                "standard": "AAMVA DL/ID 2025 v1.0",
                "zoneBasedLayout": True,
                "iso7810Compliant": True,
                "realIdCompliant": self.real_id_compliant,
            },
            "colorScheme": dict(self.color_scheme),
        }


def _font(size: int, weight: Optional[str] = None, family: Optional[str] = FONT_FAMILY) -> Tuple[Tuple[str, Any], ...]:
    font: List[Tuple[str, Any]] = []
    if family:
        font.append(("family", family))
    font.append(("size", size))
    if weight:
        font.append(("weight", weight))
    return tuple(font)


def _text(zone: str, content: str, x: float, y: float, size: int, color: str, weight: Optional[str] = None) -> LayoutElement:
    return LayoutElement(zone=zone, type="text", content=content, position=(x, y), font=_font(size, weight), color=color)


def _is_real_id(record: Record) -> bool:
    # only an explicit True earns the star on the card face
    return record.compliance is not None and record.compliance.real_id is True


def _zone_i_elements(record: Record, jurisdiction: Jurisdiction) -> List[LayoutElement]:
    doc_label = DOCUMENT_TYPES.get(record.document_type_or_default, DOCUMENT_TYPES["DL"])
    out = [
        _text("I", doc_label, 5, 2, 14, "white", weight="bold"),
        _text("I", jurisdiction.name, 5, 5, 10, "white"),
        _text("I", jurisdiction.country, 75, 3, 12, "white", weight="bold"),
    ]
    if _is_real_id(record):
        out.append(LayoutElement(
            zone="I", type="symbol", content="★", position=(65, 2),
            font=_font(16, family=None), color="gold",
        ))
    else:
        out.append(_text("I", "NOT FOR REAL ID", 45, 5, 8, "white"))
    return out


def _personal_data_elements(record: Record) -> List[LayoutElement]:
    out: List[LayoutElement] = []
    for x, column in ((LEFT_COLUMN_X, LEFT_COLUMN_FIELDS), (RIGHT_COLUMN_X, RIGHT_COLUMN_FIELDS)):
        y = FIRST_LINE_Y
        for label, key in column:
            value = record.get(key)
            if not value:
                continue
            out.append(_text("II", f"{label}: {value}", x, y, 8, "black"))
            y += LINE_HEIGHT
    return out


def _zone_iii_elements(zone: ZoneGeometry) -> List[LayoutElement]:
    portrait = zone.portrait_area
    return [
        LayoutElement(
            zone="III", type="portrait", content="[PORTRAIT]",
            position=(portrait.x, portrait.y),
            dimensions=(portrait.width, portrait.height),
            extra=(("requirements", (
                ("format", "Color digital reproduction"),
                ("background", "Light blue or white"),
                ("pose", "Full-face frontal"),
            )),),
        ),
        LayoutElement(
            zone="III", type="signature", content="[SIGNATURE]",
            position=(2, 35), dimensions=(36, 8),
            extra=(("requirements", (
                ("format", "Digital reproduction"),
                ("color", "High contrast"),
            )),),
        ),
    ]


def _non_portrait_elements(record: Record, zone_v: ZoneGeometry) -> List[LayoutElement]:
    out = [_text("IV", "VEHICLE RESTRICTIONS", 5, 2, 10, "black", weight="bold")]

    for i, item in enumerate(describe_codes(record.vehicle_classifications, "classification")):
        out.append(_text("IV", f"{item['code']} - {item['description']}", 5, 5 + i * 3, 8, "black"))

    barcode = zone_v.barcode_area
    out.append(LayoutElement(
        zone="V", type="barcode", content=f"[{SYMBOL_FORMAT} BARCODE]",
        position=(barcode.x, barcode.y),
        dimensions=(barcode.width, barcode.height),
        extra=(("format", SYMBOL_FORMAT), ("standard", SYMBOL_STANDARD)),
    ))
    return out


def build_layout(
    record: Record,
    orientation: Optional[str] = None,
    jurisdiction: Jurisdiction = DEFAULT_JURISDICTION,
) -> LayoutModel:
    """
    Select the zone table for the orientation and place the record's elements.

    orientation defaults to the record's card format. Raises ValueError for
    anything other than 'horizontal' or 'vertical'.
    """
    if orientation is None:
        orientation = record.card_format_or_default
    zones = zones_for(orientation)

    portrait_side = _zone_i_elements(record, jurisdiction)
    portrait_side += _personal_data_elements(record)
    portrait_side += _zone_iii_elements(zones["III"])

    return LayoutModel(
        format=orientation,
        zones=tuple(zones.values()),
        portrait_side=tuple(portrait_side),
        non_portrait_side=tuple(_non_portrait_elements(record, zones["V"])),
        real_id_compliant=_is_real_id(record),
        color_scheme=tuple(color_scheme(record.document_type_or_default).items()),
    )
