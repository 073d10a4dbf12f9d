# services/common/jurisdiction.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class Jurisdiction:
    """Issuer constants that differ between jurisdictions."""

    name: str = "SAMPLE STATE"
    code: str = "ST"
    country: str = "USA"
    iin: str = "636000"
    jurisdiction_version: str = "00"
    compliance_version: str = "01"
    default_vehicle_class: str = "D"
    dl_number_length: int = 9

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Jurisdiction":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown jurisdiction keys: {', '.join(unknown)}")

        kwargs: Dict[str, Any] = {}
        for k, v in data.items():
            kwargs[k] = int(v) if k == "dl_number_length" else str(v)

        j = cls(**kwargs)
        if len(j.iin) != 6 or not j.iin.isdigit():
            raise ValueError(f"IIN must be 6 digits, got {j.iin!r}")
        if len(j.jurisdiction_version) != 2 or not j.jurisdiction_version.isdigit():
            raise ValueError(f"Jurisdiction version must be 2 digits, got {j.jurisdiction_version!r}")
        if j.dl_number_length < 1:
            raise ValueError("dl_number_length must be positive")
        return j


DEFAULT_JURISDICTION = Jurisdiction()
