# services/document/compiler.py
from __future__ import annotations

import copy
from dataclasses import dataclass, fields
from datetime import date
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

from services.common.codes import DOCUMENT_TYPES, describe_codes
from services.common.jurisdiction import DEFAULT_JURISDICTION, Jurisdiction
from services.encoding.aamva import AAMVA_VERSION, SYMBOL_FORMAT, SYMBOL_STANDARD, EncodedPayload
from services.layout.builder import LayoutModel
from services.layout.zones import color_scheme
from services.records.record import Record
from services.validation.validator import parse_date


STANDARD_NAME = "AAMVA DL/ID 2025 v1.0"
GENERATOR_NAME = "AAMVA ID Maker v1.0.0"

AGE_THRESHOLDS = (18, 19, 21)

SECURITY_FEATURES: Dict[str, Any] = {
    "mandatory": (
        "UV-dull substrate material",
        "Security background printing with at least 2 special colors",
        "Guilloche design",
        "UV fluorescent ink",
        "Digital imaging for personalization",
        "Tamper-evident overlay/laminate",
        "Security background overlapping portrait",
    ),
    "optional": (
        "Optical Variable Element (OVE)",
        "Microprinting",
        "Rainbow printing",
        "Ghost image",
        "Tactile features",
    ),
    "implementation": "Security features implemented per AAMVA Annex B requirements",
}


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return copy.deepcopy(value)


@dataclass(frozen=True)
class Document:
    """
    Compiled document. Sections are read-only views (mappings and tuples all the
    way down); to_dict() hands out plain dict/list copies.
    """

    header: Mapping[str, Any]
    human_readable: Mapping[str, Any]
    machine_readable: Mapping[str, Any]
    layout: Mapping[str, Any]
    security: Mapping[str, Any]
    compliance: Mapping[str, Any]
    metadata: Mapping[str, Any]

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, _freeze(getattr(self, f.name)))

    @property
    def document_id(self) -> str:
        return self.metadata["documentId"]

    def to_dict(self) -> Dict[str, Any]:
        return _thaw({
            "header": self.header,
            "humanReadable": self.human_readable,
            "machineReadable": self.machine_readable,
            "layout": self.layout,
            "security": self.security,
            "compliance": self.compliance,
            "metadata": self.metadata,
        })


def add_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return date(d.year + years, 3, 1)


def age_threshold_date(date_of_birth: Optional[str], age: int) -> Optional[str]:
    """Date the holder turns `age`, as MM/DD/CCYY; None if the birth date doesn't parse."""
    birth = parse_date(date_of_birth)
    if birth is None:
        return None
    return add_years(birth, age).strftime("%m/%d/%Y")


def resolve_real_id(record: Record) -> bool:
    # absent flag counts as compliant; pending product-owner confirmation
    if record.compliance is None or record.compliance.real_id is None:
        return True
    return bool(record.compliance.real_id)


def build_header(metadata: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "standard": STANDARD_NAME,
        "version": AAMVA_VERSION,
        "generatedAt": metadata.get("generatedAt"),
        "template": metadata.get("template"),
        "format": metadata.get("format"),
    }


def build_zone_i(record: Record, jurisdiction: Jurisdiction) -> Dict[str, Any]:
    doc_type = record.document_type_or_default
    return {
        "documentType": DOCUMENT_TYPES.get(doc_type, DOCUMENT_TYPES["DL"]),
        "issuingJurisdiction": jurisdiction.name,
        "countryCode": jurisdiction.country,
        "backgroundDesign": color_scheme(doc_type),
    }


def build_zone_ii(record: Record, jurisdiction: Jurisdiction) -> Dict[str, Any]:
    customer_id = record.customer_identifier or ""
    zone: Dict[str, Any] = {
        "familyName": record.family_name,
        "givenNames": record.given_names,
        "fullName": f"{record.given_names} {record.family_name}".upper(),
        "suffix": record.suffix or None,
        "dateOfBirth": record.date_of_birth,
        "dateOfIssue": record.date_of_issue,
        "dateOfExpiry": record.date_of_expiry,
        "customerIdentifier": record.customer_identifier,
        "dlNo": customer_id[-jurisdiction.dl_number_length:],
        "documentDiscriminator": record.document_discriminator,
        "address": record.address,
        "vehicleClassifications": record.vehicle_classifications or jurisdiction.default_vehicle_class,
        "endorsements": record.endorsements,
        "restrictions": record.restrictions,
        "sex": record.sex,
        "height": record.height,
        "eyeColor": record.eye_color,
        "hairColor": record.hair_color or None,
        "weight": record.weight or None,
        "placeOfBirth": record.place_of_birth or None,
        "auditInformation": record.audit_information or None,
    }
    for age in AGE_THRESHOLDS:
        zone[f"under{age}Until"] = age_threshold_date(record.date_of_birth, age)
    zone["organDonor"] = record.organ_donor
    zone["veteran"] = record.veteran
    return zone


def build_zone_iii(record: Record) -> Dict[str, Any]:
    return {
        "portrait": {
            "present": bool(record.photo),
            "data": record.photo or None,
            "requirements": {
                "format": "Color digital reproduction",
                "pose": "Full-face frontal",
                "background": "Light blue or white",
                "size": "70-80% of zone height",
                "orientation": "Crown to top of zone",
            },
            "placeholder": "[PORTRAIT IMAGE PLACEHOLDER]",
        },
        "signature": {
            "present": bool(record.signature),
            "data": record.signature or None,
            "requirements": {
                "format": "Digital reproduction",
                "color": "High contrast",
                "placement": "Zone II or III",
            },
            "placeholder": "[SIGNATURE PLACEHOLDER]",
        },
    }


def build_zone_iv(record: Record) -> Dict[str, Any]:
    return {
        "codeExplanations": {
            "vehicleClassifications": describe_codes(record.vehicle_classifications, "classification"),
            "endorsements": describe_codes(record.endorsements, "endorsement"),
            "restrictions": describe_codes(record.restrictions, "restriction"),
        },
        "additionalInfo": {
            "dateOfFirstIssue": record.date_of_first_issue or None,
        },
    }


def build_zone_v(payload: EncodedPayload) -> Dict[str, Any]:
    return {
        "pdf417": payload.to_dict(),
        "aamvaString": payload.data,
        "dataLength": payload.data_length,
        "format": SYMBOL_FORMAT,
        "standard": SYMBOL_STANDARD,
    }


def build_compliance(record: Record, jurisdiction: Jurisdiction) -> Dict[str, Any]:
    c = record.compliance
    real_id = resolve_real_id(record)
    return {
        "aamvaCompliant": True,
        "aamvaVersion": AAMVA_VERSION,
        "realId": real_id,
        "realIdIndicator": "Gold Star" if real_id else "NOT FOR REAL ID",
        "limitedDuration": bool(c and c.limited_duration),
        "enhanced": bool(c and c.enhanced),
        "cdl": record.document_type == "CDL",
        "nonDomiciled": bool(c and c.non_domiciled),
        "jurisdictionSpecific": {
            "state": jurisdiction.code,
            "version": jurisdiction.compliance_version,
        },
    }


def compile_document(
    *,
    record: Record,
    layout: LayoutModel,
    payload: EncodedPayload,
    metadata: Optional[Mapping[str, Any]] = None,
    jurisdiction: Jurisdiction = DEFAULT_JURISDICTION,
) -> Document:
    """
    Merge an already-validated record with its layout and encoded payload.

    Inputs are taken as given; upstream failures must stop the caller before
    this point.
    """
    if record is None or layout is None or payload is None:
        raise ValueError("compile_document needs record, layout and payload")

    # caller keeps no handle on anything inside the document
    meta = copy.deepcopy(dict(metadata or {}))
    return Document(
        header=build_header(meta),
        human_readable={
            "zoneI": build_zone_i(record, jurisdiction),
            "zoneII": build_zone_ii(record, jurisdiction),
            "zoneIII": build_zone_iii(record),
            "zoneIV": build_zone_iv(record),
        },
        machine_readable={"zoneV": build_zone_v(payload)},
        layout=layout.to_dict(),
        security=SECURITY_FEATURES,
        compliance=build_compliance(record, jurisdiction),
        metadata={
            **meta,
            "documentId": str(uuid4()),
            "generatedBy": GENERATOR_NAME,
            "standard": STANDARD_NAME,
            "aamvaVersion": AAMVA_VERSION,
        },
    )
