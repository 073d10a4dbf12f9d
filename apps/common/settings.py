# apps/common/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from services.common.codes import CARD_FORMATS
from services.common.jurisdiction import Jurisdiction

REPO_ROOT = Path(__file__).resolve().parents[2]


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    return data or {}


def _env(key: str) -> Optional[str]:
    v = os.getenv(key)
    return v.strip() if isinstance(v, str) and v.strip() else None


def _as_path(v: str) -> Path:
    p = Path(v).expanduser()
    return (p if p.is_absolute() else REPO_ROOT / p).resolve()


@dataclass(frozen=True)
class AppSettings:
    jurisdiction: Jurisdiction
    default_orientation: str
    template: str
    max_concurrency: int
    normalize_input: bool


def load_jurisdiction(path: Path, key: str) -> Jurisdiction:
    profiles = _read_yaml(path).get("jurisdictions") or {}
    if key not in profiles:
        known = ", ".join(sorted(profiles)) or "none"
        raise ValueError(f"Unknown jurisdiction '{key}' in {path} (known: {known})")
    return Jurisdiction.from_mapping(profiles[key] or {})


def load_settings(config_path: Optional[str] = None) -> AppSettings:
    """
    Resolution order (highest -> lowest):
      1) Explicit function argument
      2) AAMVA_CONFIG_PATH env var
      3) config/app.yaml
    Individual fields can be overridden via env vars:
      - AAMVA_JURISDICTION
      - AAMVA_JURISDICTIONS_PATH
      - AAMVA_DEFAULT_ORIENTATION
      - AAMVA_MAX_CONCURRENCY
    """
    cfg_path = (
        Path(config_path)
        if config_path
        else _as_path(_env("AAMVA_CONFIG_PATH") or "config/app.yaml")
    )
    cfg = _read_yaml(cfg_path)

    jurisdiction_key = _env("AAMVA_JURISDICTION") or cfg.get("jurisdiction")
    jurisdictions_path = _env("AAMVA_JURISDICTIONS_PATH") or cfg.get("jurisdictions_path")
    orientation = _env("AAMVA_DEFAULT_ORIENTATION") or cfg.get("default_orientation") or "horizontal"
    max_concurrency = _env("AAMVA_MAX_CONCURRENCY") or cfg.get("max_concurrency") or 4

    missing = []
    if not jurisdiction_key:
        missing.append("jurisdiction / AAMVA_JURISDICTION")
    if not jurisdictions_path:
        missing.append("jurisdictions_path / AAMVA_JURISDICTIONS_PATH")

    if missing:
        raise ValueError(
            "Missing required configuration: " + ", ".join(missing) +
            f". Config file used: {cfg_path}"
        )

    if orientation not in CARD_FORMATS:
        raise ValueError(f"default_orientation must be one of {', '.join(CARD_FORMATS)}, got {orientation!r}")

    return AppSettings(
        jurisdiction=load_jurisdiction(_as_path(str(jurisdictions_path)), str(jurisdiction_key)),
        default_orientation=str(orientation),
        template=str(cfg.get("template") or "dl"),
        max_concurrency=int(max_concurrency),
        normalize_input=bool(cfg.get("normalize_input", True)),
    )
