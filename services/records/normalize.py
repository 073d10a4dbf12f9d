# services/records/normalize.py
from __future__ import annotations

import re
from copy import deepcopy
from typing import Any, Dict, Mapping, Optional


_DIGITS_RE = re.compile(r"\d+")
_NON_LETTERS_RE = re.compile(r"[^A-Za-z]+")

# keys whose values are upper-cased AAMVA codes or printed names
_UPPER_KEYS = (
    "familyName",
    "givenNames",
    "suffix",
    "address",
    "placeOfBirth",
    "customerIdentifier",
    "documentDiscriminator",
    "vehicleClassifications",
    "endorsements",
    "restrictions",
    "eyeColor",
    "hairColor",
    "documentType",
)

_DATE_KEYS = ("dateOfBirth", "dateOfIssue", "dateOfExpiry", "dateOfFirstIssue")

# opaque blobs are never touched
_BLOB_KEYS = ("photo", "signature")


def _safe_str(x: Any) -> str:
    if x is None:
        return ""
    if isinstance(x, str):
        return x.strip()
    return str(x).strip()


def normalize_record_input(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Canonicalize a raw form/JSON mapping *before* validation.

    Returns a deep-copied mapping. Values that can't be canonicalized safely
    are left as they are so the validator reports them.
    """
    out: Dict[str, Any] = deepcopy(dict(data or {}))

    for k, v in list(out.items()):
        if k in _BLOB_KEYS or not isinstance(v, str):
            continue
        out[k] = v.strip()

    for k in _UPPER_KEYS:
        if isinstance(out.get(k), str):
            out[k] = re.sub(r"\s+", " ", out[k]).upper()

    for k in _DATE_KEYS:
        if isinstance(out.get(k), str):
            nv = normalize_date(out[k])
            if nv is not None:
                out[k] = nv

    if isinstance(out.get("sex"), str):
        nv = normalize_sex(out["sex"])
        if nv is not None:
            out["sex"] = nv

    if isinstance(out.get("cardFormat"), str):
        out["cardFormat"] = out["cardFormat"].lower()

    return out


def normalize_sex(v: str) -> Optional[str]:
    """Map common spellings to one of 'M', 'F', 'X'."""
    s = _safe_str(v)
    if not s:
        return None

    letters = _NON_LETTERS_RE.sub("", s).upper()

    if letters in ("M", "F", "X"):
        return letters
    if letters.startswith("FEM"):
        return "F"
    if letters in ("MALE", "MAN"):
        return "M"
    if letters in ("NOTSPECIFIED", "UNSPECIFIED", "OTHER", "NONBINARY"):
        return "X"

    return None


def normalize_date(v: str) -> Optional[str]:
    """
    US document dates canonical: MM/DD/CCYY.

    Handles:
      - 'MM/DD/CCYY' -> unchanged
      - 'MM-DD-CCYY' / 'MM.DD.CCYY' -> 'MM/DD/CCYY'
      - 'MMDDCCYY' -> 'MM/DD/CCYY'
      - 'M/D/CCYY' -> zero-padded 'MM/DD/CCYY'
    """
    s = _safe_str(v)
    if not s:
        return None

    if re.fullmatch(r"\d{2}/\d{2}/\d{4}", s):
        return s

    m = re.fullmatch(r"(\d{1,2})[-./](\d{1,2})[-./](\d{4})", s)
    if m:
        mm, dd, yyyy = m.group(1), m.group(2), m.group(3)
        return f"{int(mm):02d}/{int(dd):02d}/{yyyy}"

    if re.fullmatch(r"\d{8}", s):
        digits = "".join(_DIGITS_RE.findall(s))
        return f"{digits[:2]}/{digits[2:4]}/{digits[4:]}"

    return None
