"""Content-addressed cache of extracted runtime generations.

Handles:
- Staleness detection through the generation marker
- Extraction into a private directory, renamed into place once complete
- Pruning of generations left behind by other versions
"""

from __future__ import annotations

import os
import shutil
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import List, Optional

from autossl.core.logging import get_logger
from autossl.runtime.errors import CleanupError, ExtractionError, MarkerWriteError
from autossl.runtime.extract import EXECUTABLE_MODE, materialize_bundle, remove_path
from autossl.runtime.hashing import content_hash
from autossl.runtime.paths import MARKER_NAME, RuntimePaths
from autossl.runtime.retention import (
    DEFAULT_RETENTION,
    TEMP_PREFIX,
    append_ledger,
    order_generations,
    prune_generations,
    read_ledger,
)
from autossl.runtime.source import ENTRY_POINT_NAME, BundleSource
from autossl.runtime.versions import normalize_version

LOGGER = get_logger(__name__)

# Attempts at moving a finished extraction into place
_INSTALL_ATTEMPTS = 2


class GenerationState(str, Enum):
    """State of the generation for the current version."""

    ABSENT = "absent"
    STALE = "stale"
    VALID = "valid"


def read_marker(marker: Path) -> Optional[str]:
    """Return the stripped content of a marker file, or None if unreadable."""
    try:
        return marker.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None


class CacheManager:
    """Keeps one valid extracted generation of a bundle per version.

    Directory layout is described by :class:`RuntimePaths`. A generation is
    valid if and only if its marker equals ``"{version}|{content hash}"``.

    The first successful :meth:`ensure_extracted` call is memoised for the
    lifetime of the instance; concurrent callers block on a lock and reuse
    the result.
    """

    def __init__(
        self,
        source: BundleSource,
        version: Optional[str] = None,
        paths: Optional[RuntimePaths] = None,
        retention: int = DEFAULT_RETENTION,
        entry_point: str = ENTRY_POINT_NAME,
    ) -> None:
        """Initialize the cache manager.

        Args:
            source: Bundle to extract.
            version: Version token of the running program; empty means "dev".
            paths: Cache layout. Defaults to the per-user cache directory.
            retention: Number of other generations kept after extraction.
            entry_point: Bundle path made executable on extraction.
        """
        self.source = source
        self.version = normalize_version(version)
        self.paths = paths if paths is not None else RuntimePaths.default()
        self.retention = retention
        self.entry_point = entry_point

        self._lock = threading.Lock()
        self._extract_dir: Optional[Path] = None

    @property
    def generation_dir(self) -> Path:
        """Generation directory for this manager's version."""
        return self.paths.generation_dir(self.version)

    def marker_value(self) -> str:
        """Compute the marker a valid generation must carry.

        Raises:
            HashComputationError: If the bundle cannot be read.
        """
        return f"{self.version}|{content_hash(self.source)}"

    @property
    def marker_path(self) -> Path:
        """Marker file of this manager's generation."""
        return self.paths.marker_path(self.version)

    def state(self) -> GenerationState:
        """Inspect the current generation without modifying anything.

        Raises:
            HashComputationError: If the bundle cannot be read.
        """
        expected = self.marker_value()
        if not self.generation_dir.is_dir():
            return GenerationState.ABSENT
        if read_marker(self.marker_path) == expected:
            return GenerationState.VALID
        return GenerationState.STALE

    def is_valid(self) -> bool:
        """Return True if the current generation carries the expected marker."""
        return self.state() is GenerationState.VALID

    def list_generations(self) -> List[Path]:
        """Return generation directories on disk, most recent first."""
        runtime_dir = self.paths.runtime_dir
        if not runtime_dir.is_dir():
            return []
        generations = [
            entry
            for entry in runtime_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        ]
        return order_generations(generations, read_ledger(self.paths.ledger))

    def ensure_extracted(self) -> Path:
        """Return the root of a valid generation, extracting it if needed.

        Returns:
            Path to the generation directory.

        Raises:
            HashComputationError: If the bundle cannot be hashed.
            ExtractionError: If the generation cannot be created or populated.
        """
        with self._lock:
            if self._extract_dir is not None:
                return self._extract_dir

            marker_value = self.marker_value()
            root = self.generation_dir

            if read_marker(self.marker_path) == marker_value:
                LOGGER.debug(f"Runtime cache hit at {root}")
                self._extract_dir = root
                return root

            LOGGER.info(f"Extracting runtime bundle to {root}")
            self._extract(root, marker_value)
            self._record_and_prune(root)

            self._extract_dir = root
            return root

    def _extract(self, root: Path, marker_value: str) -> None:
        """Populate a private directory and move it to ``root``."""
        try:
            self.paths.ensure_directories()
            tmp = Path(
                tempfile.mkdtemp(prefix=f"{TEMP_PREFIX}{root.name}-", dir=self.paths.runtime_dir)
            )
        except OSError as e:
            raise ExtractionError(f"Failed to create runtime directory under {self.paths.runtime_dir}: {e}") from e

        try:
            try:
                os.chmod(tmp, EXECUTABLE_MODE)
                count = materialize_bundle(self.source, tmp, self.entry_point)
            except OSError as e:
                raise ExtractionError(f"Failed to extract runtime bundle: {e}") from e

            # The marker goes in last: its presence proves the copy is complete.
            try:
                (tmp / MARKER_NAME).write_text(marker_value + "\n", encoding="utf-8")
            except OSError as e:
                raise MarkerWriteError(f"Failed to write runtime marker: {e}") from e

            self._install(tmp, root, marker_value)
            LOGGER.info(f"Extracted {count} runtime file(s) to {root}")
        finally:
            if tmp.exists():
                shutil.rmtree(tmp, ignore_errors=True)

    def _install(self, tmp: Path, root: Path, marker_value: str) -> None:
        """Atomically rename a finished extraction onto ``root``.

        A valid generation placed by another process wins; ours is discarded.
        """
        marker = self.marker_path
        last_error: Optional[OSError] = None
        for attempt in range(_INSTALL_ATTEMPTS):
            if read_marker(marker) == marker_value:
                LOGGER.debug(f"Generation {root} completed by another process")
                return
            trash = tmp.with_name(f"{tmp.name}-stale{attempt}")
            try:
                os.rename(root, trash)
            except FileNotFoundError:
                pass
            except OSError as e:
                raise ExtractionError(f"Failed to move stale generation {root}: {e}") from e
            try:
                os.rename(tmp, root)
                return
            except OSError as e:
                last_error = e
            finally:
                if os.path.lexists(trash):
                    try:
                        remove_path(trash)
                    except OSError as e:
                        LOGGER.warning(f"Failed to remove stale generation {trash}: {e}")

        if read_marker(marker) == marker_value:
            return
        raise ExtractionError(f"Failed to install generation {root}: {last_error}") from last_error

    def _record_and_prune(self, root: Path) -> None:
        """Update the ledger and prune old generations; failures are only logged."""
        try:
            append_ledger(self.paths.ledger, root.name)
        except OSError as e:
            LOGGER.warning(f"Failed to update generation ledger: {e}")

        try:
            removed = prune_generations(
                self.paths.runtime_dir,
                keep=root.name,
                retention=self.retention,
                ledger_path=self.paths.ledger,
            )
        except CleanupError as e:
            LOGGER.warning(str(e))
            return
        if removed:
            LOGGER.info(f"Pruned {len(removed)} old runtime generation(s)")
