"""Fixtures for CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from autossl.cli.runner import CLIRunner
from autossl.runtime.source import MemoryBundleSource


@pytest.fixture
def cache_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated cache root, with the user config directory emptied too."""
    root = tmp_path / "cache"
    monkeypatch.setenv("AUTOSSL_CACHE_DIR", str(root))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "xdg"))
    return root


@pytest.fixture
def runner(bundle: MemoryBundleSource, cache_root: Path) -> CLIRunner:
    """Runner over the synthetic bundle."""
    return CLIRunner(source=bundle, version="v1")
