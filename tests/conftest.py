"""Shared fixtures isolating tests from process-wide faultline settings."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from packages.faultline.config import loader


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point settings at an absent config file and drop cached startup settings."""
    monkeypatch.setattr(loader, "DEFAULT_CONFIG_PATH", tmp_path / "faultline.yaml")
    for name in ("FAULTLINE_ERRORS__CAPTURE_LOCATION", "FAULTLINE_ERRORS__VERBOSE"):
        monkeypatch.delenv(name, raising=False)
    loader.load_startup_settings.cache_clear()
    yield
    loader.load_startup_settings.cache_clear()
