# services/records/record.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional


def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    return v if isinstance(v, str) else str(v)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


@dataclass(frozen=True)
class Compliance:
    # real_id keeps the raw input value; the validator warns when it isn't a bool
    real_id: Any = None
    limited_duration: Any = None
    enhanced: Any = None
    non_domiciled: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Compliance":
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            key = _camel(f.name)
            if key in data:
                kwargs[f.name] = data[key]
            elif f.name in data:
                kwargs[f.name] = data[f.name]
        return cls(**kwargs)

    def to_mapping(self) -> Dict[str, Any]:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class Record:
    """
    One identity document's input fields.

    Attribute names are snake_case; the interchange (form / JSON) keys are the
    camelCase equivalents, e.g. family_name <-> familyName.
    """

    # mandatory data elements
    family_name: Optional[str] = None
    given_names: Optional[str] = None
    date_of_birth: Optional[str] = None
    date_of_issue: Optional[str] = None
    date_of_expiry: Optional[str] = None
    customer_identifier: Optional[str] = None
    document_discriminator: Optional[str] = None
    address: Optional[str] = None
    vehicle_classifications: Optional[str] = None
    endorsements: Optional[str] = None
    restrictions: Optional[str] = None
    sex: Optional[str] = None
    height: Optional[str] = None
    eye_color: Optional[str] = None

    # optional data elements
    hair_color: Optional[str] = None
    weight: Optional[str] = None
    suffix: Optional[str] = None
    place_of_birth: Optional[str] = None
    audit_information: Optional[str] = None
    date_of_first_issue: Optional[str] = None
    photo: Optional[str] = None
    signature: Optional[str] = None

    # document options
    document_type: Optional[str] = None
    card_format: Optional[str] = None
    organ_donor: bool = False
    veteran: bool = False
    compliance: Optional[Compliance] = None

    _BOOL_FIELDS = ("organ_donor", "veteran")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Record":
        """Build a Record from camelCase (or snake_case) keys. Unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise TypeError(f"Record input must be a mapping, got {type(data).__name__}")

        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            key = _camel(f.name)
            if key in data:
                raw = data[key]
            elif f.name in data:
                raw = data[f.name]
            else:
                continue

            if f.name == "compliance":
                if raw is None:
                    continue
                if isinstance(raw, Compliance):
                    kwargs[f.name] = raw
                elif isinstance(raw, Mapping):
                    kwargs[f.name] = Compliance.from_mapping(raw)
                else:
                    raise TypeError("compliance must be a mapping")
            elif f.name in cls._BOOL_FIELDS:
                kwargs[f.name] = bool(raw)
            else:
                kwargs[f.name] = _opt_str(raw)
        return cls(**kwargs)

    def get(self, key: str) -> Any:
        """Look up a field by its camelCase interchange key."""
        return getattr(self, _ATTR_BY_KEY[key])

    def to_mapping(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            if v is None:
                continue
            out[_camel(f.name)] = v.to_mapping() if isinstance(v, Compliance) else v
        return out

    @property
    def document_type_or_default(self) -> str:
        return self.document_type or "DL"

    @property
    def card_format_or_default(self) -> str:
        return self.card_format or "horizontal"


_ATTR_BY_KEY: Dict[str, str] = {_camel(f.name): f.name for f in fields(Record)}
