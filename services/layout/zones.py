# services/layout/zones.py
"""Static card geometry (millimetres, ISO/IEC 7810 ID-1) per orientation."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

CARD_DIMENSIONS_MM = MappingProxyType({"width": 85.60, "height": 53.98, "cornerRadius": 3.18})

PORTRAIT_SIDE_ZONES = ("I", "II", "III")
NON_PORTRAIT_SIDE_ZONES = ("IV", "V")

# Pantone-ish colour schemes keyed by document type
COLOR_SCHEMES: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "DL": MappingProxyType({"primary": "#C41E3A", "primaryTint": "#E8C1CA", "secondary": "#FFFFFF", "text": "#000000"}),
    "ID": MappingProxyType({"primary": "#228B22", "primaryTint": "#B8D8B8", "secondary": "#FFFFFF", "text": "#000000"}),
    "CDL": MappingProxyType({"primary": "#C41E3A", "primaryTint": "#E8C1CA", "secondary": "#FFFFFF", "text": "#000000"}),
    "EDL": MappingProxyType({"primary": "#002868", "primaryTint": "#B3BFD1", "secondary": "#FFFFFF", "text": "#000000"}),
})


def color_scheme(document_type: Optional[str]) -> Dict[str, str]:
    return dict(COLOR_SCHEMES.get(document_type or "DL", COLOR_SCHEMES["DL"]))


@dataclass(frozen=True)
class Area:
    x: float
    y: float
    width: float
    height: float

    @property
    def position(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @property
    def dimensions(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class ZoneGeometry:
    zone: str
    area: Area
    description: str
    background_color: str = "white"
    text_color: Optional[str] = "black"
    portrait_area: Optional[Area] = None
    barcode_area: Optional[Area] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "position": self.area.position,
            "dimensions": self.area.dimensions,
            "description": self.description,
            "backgroundColor": self.background_color,
        }
        if self.text_color is not None:
            out["textColor"] = self.text_color
        if self.portrait_area is not None:
            out["portraitArea"] = {
                "position": self.portrait_area.position,
                "dimensions": self.portrait_area.dimensions,
            }
        if self.barcode_area is not None:
            out["barcodeArea"] = {
                "position": self.barcode_area.position,
                "maxDimensions": self.barcode_area.dimensions,
            }
        return out


_ZONE_I = ZoneGeometry(
    "I", Area(0, 0, 85.60, 8.00),
    "Document type indicator and issuing jurisdiction",
    background_color="variable",  # primary colour of the document type
    text_color="white",
)

# non-portrait side is identical for both orientations
_ZONE_IV = ZoneGeometry(
    "IV", Area(0, 0, 85.60, 35.00),
    "Vehicle class, endorsement, and restriction explanations",
)
_ZONE_V = ZoneGeometry(
    "V", Area(0, 35.00, 85.60, 18.98),
    "PDF417 barcode and other machine-readable technology",
    text_color=None,
    barcode_area=Area(5.00, 2.00, 75.60, 14.98),
)

HORIZONTAL_ZONES: Tuple[ZoneGeometry, ...] = (
    _ZONE_I,
    ZoneGeometry("II", Area(0, 8.00, 45.60, 45.98), "Personal and document information"),
    ZoneGeometry(
        "III", Area(45.60, 8.00, 40.00, 45.98),
        "Portrait image and signature",
        text_color=None,
        portrait_area=Area(2.00, 2.00, 36.00, 41.98),
    ),
    _ZONE_IV,
    _ZONE_V,
)

# under-21 cards
VERTICAL_ZONES: Tuple[ZoneGeometry, ...] = (
    _ZONE_I,
    ZoneGeometry("II", Area(0, 8.00, 85.60, 20.00), "Personal and document information"),
    ZoneGeometry(
        "III", Area(0, 28.00, 85.60, 25.98),
        "Portrait image and signature",
        text_color=None,
        portrait_area=Area(20.00, 2.00, 45.60, 21.98),
    ),
    _ZONE_IV,
    _ZONE_V,
)

ZONE_TABLES: Mapping[str, Tuple[ZoneGeometry, ...]] = MappingProxyType({
    "horizontal": HORIZONTAL_ZONES,
    "vertical": VERTICAL_ZONES,
})


def zones_for(orientation: str) -> Dict[str, ZoneGeometry]:
    try:
        table = ZONE_TABLES[orientation]
    except KeyError:
        raise ValueError(f"Unknown orientation: {orientation}") from None
    return {z.zone: z for z in table}
