import os
from dataclasses import dataclass, field
from pathlib import Path

from chna_cra.domain.enums import SourceKind
from chna_cra.features.reference.catalog import DEFAULT_CATALOG_PATH

_FALSEY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class AppConfig:
    catalog_path: Path = DEFAULT_CATALOG_PATH
    log_level: str = "INFO"
    enforce_tier_gate: bool = True
    evidence_export_limit: int = 100
    evidence_view_limit: int = 25
    supported_kinds: frozenset[SourceKind] = field(default_factory=lambda: frozenset(SourceKind))


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def load_config() -> AppConfig:
    catalog = os.environ.get("CHNA_CRA_CATALOG")
    gate = os.environ.get("CHNA_CRA_ENFORCE_TIER_GATE", "1")
    return AppConfig(
        catalog_path=Path(catalog) if catalog else DEFAULT_CATALOG_PATH,
        log_level=os.environ.get("CHNA_CRA_LOG_LEVEL", "INFO").upper(),
        enforce_tier_gate=gate.strip().lower() not in _FALSEY,
        evidence_export_limit=_int_env("CHNA_CRA_EVIDENCE_EXPORT_LIMIT", 100),
    )
