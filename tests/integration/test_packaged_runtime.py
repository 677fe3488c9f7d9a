"""Integration tests against the bash runtime shipped with the package."""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from autossl.cli.runner import CLIRunner
from autossl.runtime.cache import CacheManager, GenerationState
from autossl.runtime.dumper import MANIFEST_NAME, verify_manifest
from autossl.runtime.hashing import content_hash
from autossl.runtime.invoker import Invoker
from autossl.runtime.paths import RuntimePaths
from autossl.runtime.source import PackageBundleSource

bash_available = pytest.mark.skipif(
    shutil.which("bash") is None,
    reason="bash not available",
)


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    cache = tmp_path / "cache"
    monkeypatch.setenv("AUTOSSL_CACHE_DIR", str(cache))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return cache


class TestPackagedBundle:
    """The packaged bundle survives extraction and export unchanged."""

    def test_dump_and_verify(self, tmp_path: Path, isolated_env: Path) -> None:
        runner = CLIRunner(version="0.0.0-test")
        out = tmp_path / "export"

        assert runner.run(["dump-bundle", "-o", str(out), "--checksum", "--print-path"]) == 0

        assert (out / "auto-ssl").is_file()
        assert (out / MANIFEST_NAME).is_file()
        assert verify_manifest(out) == []

    def test_extraction_matches_hash(self, tmp_path: Path) -> None:
        source = PackageBundleSource()
        manager = CacheManager(source, version="0.0.0-test", paths=RuntimePaths(tmp_path))

        root = manager.ensure_extracted()

        assert manager.state() is GenerationState.VALID
        assert (root / ".extracted").read_text().strip() == f"0.0.0-test|{content_hash(source)}"


@pytest.mark.posix
@bash_available
class TestPackagedEntryPoint:
    """The packaged entry point runs through the invoker."""

    def test_version(self, tmp_path: Path) -> None:
        manager = CacheManager(PackageBundleSource(), version="0.0.0-test", paths=RuntimePaths(tmp_path))
        result = Invoker(manager).run_captured(["version"])
        assert result.returncode == 0
        assert result.stdout.startswith("auto-ssl ")

    def test_unknown_command_exit_code(self, isolated_env: Path) -> None:
        runner = CLIRunner(version="0.0.0-test")
        assert runner.run(["exec", "--", "no-such-command"]) == 2

    def test_help_through_cli(self, isolated_env: Path, capfd) -> None:
        runner = CLIRunner(version="0.0.0-test")
        assert runner.run(["exec", "--", "help"]) == 0
        assert "auto-ssl <command>" in capfd.readouterr().out

    def test_module_entry_point(self, isolated_env: Path) -> None:
        result = subprocess.run(
            [sys.executable, "-m", "autossl", "exec", "--", "version"],
            capture_output=True,
            text=True,
            timeout=60,
        )
        assert result.returncode == 0
        assert result.stdout.startswith("auto-ssl ")
