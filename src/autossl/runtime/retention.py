"""Retention of old runtime generations.

Generations of previous versions are kept for a short rollback window and
then removed. Recency comes from the extraction-order ledger when it
exists, and from directory modification times otherwise.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from autossl.core.logging import get_logger
from autossl.runtime.errors import CleanupError

LOGGER = get_logger(__name__)

# Non-current generations kept by default
DEFAULT_RETENTION = 2

# Prefix of private extraction directories
TEMP_PREFIX = ".tmp-"

# Abandoned extraction directories older than this are removed
STALE_TEMP_SECONDS = 3600


def read_ledger(path: Path) -> Optional[List[str]]:
    """Read the ledger, oldest first.

    Returns:
        Tokens in extraction order, or None if the ledger is absent or unreadable.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        LOGGER.warning(f"Failed to read generation ledger {path}: {e}")
        return None
    return [line.strip() for line in text.splitlines() if line.strip()]


def append_ledger(path: Path, token: str) -> None:
    """Record that ``token`` was just extracted."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(token + "\n")


def write_ledger(path: Path, tokens: List[str]) -> None:
    """Atomically replace the ledger contents."""
    fd, tmp = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write("".join(token + "\n" for token in tokens))
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def _mtime(path: Path) -> Optional[float]:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def order_generations(
    candidates: List[Path], ledger: Optional[List[str]] = None
) -> List[Path]:
    """Order generation directories most recent first.

    Ledger members rank by their last position in the ledger. Directories
    missing from the ledger, or all of them when there is no ledger, follow
    by modification time. Ties and unreadable times fall back to the name.
    """
    rank: Dict[str, int] = {}
    for index, token in enumerate(ledger or []):
        rank[token] = index

    def key(path: Path) -> Tuple[int, float, str]:
        if path.name in rank:
            return (0, -float(rank[path.name]), path.name)
        mtime = _mtime(path)
        if mtime is None:
            return (2, 0.0, path.name)
        return (1, -mtime, path.name)

    return sorted(candidates, key=key)


def _remove_stale_temp_dirs(runtime_dir: Path, now: float) -> None:
    for entry in runtime_dir.iterdir():
        if not entry.name.startswith(TEMP_PREFIX) or not entry.is_dir():
            continue
        mtime = _mtime(entry)
        if mtime is not None and now - mtime > STALE_TEMP_SECONDS:
            LOGGER.debug(f"Removing abandoned extraction directory {entry}")
            shutil.rmtree(entry, ignore_errors=True)


def prune_generations(
    runtime_dir: Path,
    keep: str,
    retention: int = DEFAULT_RETENTION,
    ledger_path: Optional[Path] = None,
) -> List[Path]:
    """Remove old generations beyond the retention window.

    Args:
        runtime_dir: Directory holding the generations.
        keep: Name of the current generation, never removed.
        retention: Number of other generations to keep.
        ledger_path: Optional extraction-order ledger.

    Returns:
        Directories that were removed.

    Raises:
        CleanupError: If the directory cannot be listed or a removal fails.
            All removals are attempted before raising.
    """
    try:
        siblings = [
            entry
            for entry in runtime_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith(".") and entry.name != keep
        ]
    except OSError as e:
        raise CleanupError(f"Failed to list {runtime_dir}: {e}") from e

    ledger = read_ledger(ledger_path) if ledger_path is not None else None
    ordered = order_generations(siblings, ledger)

    removed: List[Path] = []
    failures: List[str] = []
    for stale in ordered[max(retention, 0):]:
        try:
            shutil.rmtree(stale)
            removed.append(stale)
            LOGGER.debug(f"Pruned old generation {stale}")
        except OSError as e:
            failures.append(f"{stale.name}: {e}")

    try:
        _remove_stale_temp_dirs(runtime_dir, time.time())
    except OSError as e:
        failures.append(f"temporary directories: {e}")

    if ledger is not None and ledger_path is not None:
        survivors = {p.name for p in ordered if p not in removed} | {keep}
        compacted: List[str] = []
        for token in reversed(ledger):
            if token in survivors and token not in compacted:
                compacted.append(token)
        compacted.reverse()
        if compacted != ledger:
            try:
                write_ledger(ledger_path, compacted)
            except OSError as e:
                failures.append(f"ledger: {e}")

    if failures:
        raise CleanupError("Failed to prune generations: " + "; ".join(failures))
    return removed
