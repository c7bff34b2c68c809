import logging
from pathlib import Path

import pytest

from chna_cra.config import load_config
from chna_cra.features.reference.catalog import DEFAULT_CATALOG_PATH
from chna_cra.logging_config import configure_logging


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CHNA_CRA_CATALOG", "CHNA_CRA_LOG_LEVEL", "CHNA_CRA_ENFORCE_TIER_GATE", "CHNA_CRA_EVIDENCE_EXPORT_LIMIT"):
        monkeypatch.delenv(name, raising=False)

    cfg = load_config()
    assert cfg.catalog_path == DEFAULT_CATALOG_PATH
    assert cfg.log_level == "INFO"
    assert cfg.enforce_tier_gate is True
    assert cfg.evidence_export_limit == 100
    assert cfg.evidence_view_limit == 25


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CHNA_CRA_CATALOG", str(tmp_path / "c.json"))
    monkeypatch.setenv("CHNA_CRA_LOG_LEVEL", "debug")
    monkeypatch.setenv("CHNA_CRA_ENFORCE_TIER_GATE", "false")
    monkeypatch.setenv("CHNA_CRA_EVIDENCE_EXPORT_LIMIT", "10")

    cfg = load_config()
    assert cfg.catalog_path == tmp_path / "c.json"
    assert cfg.log_level == "DEBUG"
    assert cfg.enforce_tier_gate is False
    assert cfg.evidence_export_limit == 10


def test_bad_integer_env_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHNA_CRA_EVIDENCE_EXPORT_LIMIT", "lots")
    with pytest.raises(ValueError):
        load_config()


def test_configure_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging(logging.DEBUG)
    configure_logging(logging.DEBUG)

    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
