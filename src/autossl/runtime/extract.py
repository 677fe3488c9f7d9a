"""Writing a bundle source onto disk."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from autossl.runtime.source import ENTRY_POINT_NAME, BundleSource

# Modes applied to extracted files
FILE_MODE = 0o644
EXECUTABLE_MODE = 0o755


def materialize_bundle(
    source: BundleSource, dest: Path, entry_point: str = ENTRY_POINT_NAME
) -> int:
    """Copy every bundle entry under ``dest``.

    Directory structure and executable bits are preserved; the entry point
    is always made executable.

    Args:
        source: Bundle to copy.
        dest: Existing or new destination directory.
        entry_point: Relative path forced executable.

    Returns:
        Number of files written.

    Raises:
        OSError: If any entry cannot be read or written.
    """
    dest.mkdir(parents=True, exist_ok=True)
    written = 0
    for entry in source.entries():
        target = dest.joinpath(*entry.path.split("/"))
        if entry.is_dir:
            target.mkdir(parents=True, exist_ok=True)
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(source.read(entry.path))
        executable = entry.executable or entry.path == entry_point
        os.chmod(target, EXECUTABLE_MODE if executable else FILE_MODE)
        written += 1
    return written


def remove_path(path: Path) -> None:
    """Remove a file, symlink or directory tree if it exists."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.is_symlink() or path.exists():
        path.unlink()
