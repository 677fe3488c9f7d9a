"""Tests for bundle sources."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict

import pytest

from autossl.runtime.source import (
    BundleEntry,
    DirectoryBundleSource,
    MemoryBundleSource,
    PackageBundleSource,
    check_relative_path,
)


class TestCheckRelativePath:
    """Tests for bundle path validation."""

    def test_accepts_nested_path(self) -> None:
        assert check_relative_path("lib/a.sh") == "lib/a.sh"

    def test_normalizes_backslashes(self) -> None:
        assert check_relative_path("lib\\a.sh") == "lib/a.sh"

    @pytest.mark.parametrize("path", ["", "/etc/passwd", "../x", "lib/../../x", "."])
    def test_rejects_unsafe_paths(self, path: str) -> None:
        with pytest.raises(ValueError, match="Unsafe path"):
            check_relative_path(path)


class TestMemoryBundleSource:
    """Tests for MemoryBundleSource."""

    def test_entries_sorted_with_implied_directories(self, bundle: MemoryBundleSource) -> None:
        entries = bundle.entries()
        assert [e.path for e in entries] == [
            "auto-ssl",
            "commands",
            "commands/ca.sh",
            "lib",
            "lib/a.sh",
            "lib/tool.sh",
        ]
        assert BundleEntry(path="lib", is_dir=True) in entries

    def test_executable_flag(self, bundle: MemoryBundleSource) -> None:
        flags = {e.path: e.executable for e in bundle.files()}
        assert flags["lib/tool.sh"] is True
        assert flags["lib/a.sh"] is False

    def test_files_excludes_directories(self, bundle: MemoryBundleSource) -> None:
        assert all(not e.is_dir for e in bundle.files())
        assert len(bundle.files()) == 4

    def test_read_returns_bytes(self, bundle: MemoryBundleSource, bundle_files: Dict[str, bytes]) -> None:
        assert bundle.read("lib/a.sh") == bundle_files["lib/a.sh"]

    def test_read_missing_raises(self, bundle: MemoryBundleSource) -> None:
        with pytest.raises(FileNotFoundError):
            bundle.read("nope")

    def test_explicit_empty_directory(self) -> None:
        source = MemoryBundleSource({"a": b"x"}, directories=["empty/dir"])
        dirs = [e.path for e in source.entries() if e.is_dir]
        assert dirs == ["empty", "empty/dir"]

    def test_unknown_executable_rejected(self) -> None:
        with pytest.raises(ValueError, match="not in bundle"):
            MemoryBundleSource({"a": b"x"}, executables=["b"])

    def test_file_directory_clash_rejected(self) -> None:
        with pytest.raises(ValueError, match="both file and directory"):
            MemoryBundleSource({"lib": b"x", "lib/a.sh": b"y"})

    def test_file_under_explicit_directory_clash_rejected(self) -> None:
        with pytest.raises(ValueError, match="both file and directory"):
            MemoryBundleSource({"a": b"x"}, directories=["a/b"])


class TestDirectoryBundleSource:
    """Tests for DirectoryBundleSource."""

    def test_reads_tree_and_modes(self, tmp_path: Path) -> None:
        root = tmp_path / "bundle"
        (root / "lib").mkdir(parents=True)
        (root / "lib" / "a.sh").write_bytes(b"a")
        entry = root / "auto-ssl"
        entry.write_bytes(b"#!/bin/sh\n")
        os.chmod(entry, 0o755)
        os.chmod(root / "lib" / "a.sh", 0o644)

        source = DirectoryBundleSource(root)
        entries = {e.path: e for e in source.entries()}

        assert set(entries) == {"auto-ssl", "lib", "lib/a.sh"}
        assert entries["lib"].is_dir
        assert entries["auto-ssl"].executable is True
        assert entries["lib/a.sh"].executable is False
        assert source.read("lib/a.sh") == b"a"

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            DirectoryBundleSource(tmp_path / "missing").entries()


class TestPackageBundleSource:
    """Tests for the packaged bash runtime."""

    def test_default_bundle_contains_entry_point(self) -> None:
        source = PackageBundleSource()
        paths = [e.path for e in source.files()]
        assert "auto-ssl" in paths
        assert "lib/common.sh" in paths
        assert source.read("auto-ssl").startswith(b"#!/usr/bin/env bash")

    def test_missing_subpath_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            PackageBundleSource(subpath="assets/does-not-exist").entries()
