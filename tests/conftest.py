from __future__ import annotations

from pathlib import Path

import pytest

FEE_ENV_VARS = ("FEEMAP_CONFIG", "FEEMAP_MINIMUM_FEES", "FEEMAP_RESPONDER_ID")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Strip FEEMAP_* variables so config tests only see what they set."""
    for name in FEE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def write_config(tmp_path: Path):
    """Write `text` to tmp_path/<name> and return the path."""

    def _write(name: str, text: str) -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _write
