"""Tests for runtime cache path management."""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from autossl.runtime import paths as paths_module
from autossl.runtime.paths import (
    AUTOSSL_CACHE_DIR_ENV,
    CACHE_DIR_NAME,
    LEDGER_NAME,
    MARKER_NAME,
    RuntimePaths,
    get_cache_root,
    user_cache_dir,
)


class TestUserCacheDir:
    """Tests for user_cache_dir."""

    @pytest.mark.skipif(sys.platform.startswith("win") or sys.platform == "darwin", reason="XDG layout")
    def test_respects_xdg_cache_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg"))
        assert user_cache_dir() == tmp_path / "xdg"

    @pytest.mark.skipif(sys.platform.startswith("win") or sys.platform == "darwin", reason="XDG layout")
    def test_ignores_relative_xdg_cache_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CACHE_HOME", "relative/dir")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert user_cache_dir() == tmp_path / ".cache"

    def test_windows_uses_localappdata(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(paths_module.sys, "platform", "win32")
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
        assert user_cache_dir() == tmp_path

    def test_darwin_uses_library_caches(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(paths_module.sys, "platform", "darwin")
        with patch.object(Path, "home", return_value=tmp_path):
            assert user_cache_dir() == tmp_path / "Library" / "Caches"


class TestGetCacheRoot:
    """Tests for get_cache_root."""

    def test_override_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(AUTOSSL_CACHE_DIR_ENV, str(tmp_path / "env"))
        assert get_cache_root(tmp_path / "explicit") == tmp_path / "explicit"

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(AUTOSSL_CACHE_DIR_ENV, str(tmp_path / "env"))
        assert get_cache_root() == tmp_path / "env"

    def test_user_cache_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(AUTOSSL_CACHE_DIR_ENV, raising=False)
        monkeypatch.setattr(paths_module, "user_cache_dir", lambda: tmp_path)
        assert get_cache_root() == tmp_path / CACHE_DIR_NAME

    def test_falls_back_to_temp_dir(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(AUTOSSL_CACHE_DIR_ENV, raising=False)
        monkeypatch.setattr(paths_module, "user_cache_dir", lambda: None)
        assert get_cache_root() == Path(tempfile.gettempdir()) / CACHE_DIR_NAME


class TestRuntimePaths:
    """Tests for RuntimePaths class."""

    def test_layout(self, tmp_path: Path) -> None:
        paths = RuntimePaths(tmp_path)
        assert paths.runtime_dir == tmp_path / "runtime"
        assert paths.ledger == tmp_path / "runtime" / LEDGER_NAME
        assert paths.generation_dir("v1.2.0") == tmp_path / "runtime" / "v1.2.0"
        assert paths.marker_path("v1.2.0") == tmp_path / "runtime" / "v1.2.0" / MARKER_NAME

    def test_generation_dir_is_sanitized(self, tmp_path: Path) -> None:
        paths = RuntimePaths(tmp_path)
        assert paths.generation_dir("release/1 rc") == tmp_path / "runtime" / "release-1-rc"
        assert paths.generation_dir("") == tmp_path / "runtime" / "dev"

    def test_ensure_directories(self, tmp_path: Path) -> None:
        paths = RuntimePaths(tmp_path / "root")
        assert not paths.home.exists()
        paths.ensure_directories()
        assert paths.runtime_dir.is_dir()

    def test_default_uses_override(self, tmp_path: Path) -> None:
        assert RuntimePaths.default(tmp_path).home == tmp_path
