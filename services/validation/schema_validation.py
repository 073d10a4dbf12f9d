# services/validation/schema_validation.py
"""Boundary shape check for raw record mappings (JSON Schema draft-07)."""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Tuple

import jsonschema

REPO_ROOT = Path(__file__).resolve().parents[2]
SCHEMA_DIR = REPO_ROOT / "config" / "schemas"


@lru_cache(maxsize=None)
def get_validator(schema_name: str) -> jsonschema.Draft7Validator:
    schema_path = SCHEMA_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    jsonschema.Draft7Validator.check_schema(schema)
    return jsonschema.Draft7Validator(schema)


def _describe(error: jsonschema.ValidationError) -> str:
    where = "/".join(str(p) for p in error.absolute_path)
    return f"{where}: {error.message}" if where else error.message


def validate_with_schema(data: Mapping[str, Any], schema_name: str) -> Tuple[bool, str]:
    """
    Types of the input mapping only; field rules live in validator.py.

    Every violation is reported, ordered by path.
    """
    try:
        validator = get_validator(schema_name)
    except FileNotFoundError as e:
        return False, str(e)

    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return True, "Valid"
    return False, "; ".join(_describe(e) for e in errors)
