"""Running the bundled entry point.

The entry point is resolved inside a validated generation and started as a
child process. Standard streams are inherited, so the child talks to the
user's terminal directly.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from autossl.core.logging import get_logger
from autossl.runtime.cache import CacheManager
from autossl.runtime.errors import (
    EntryResolutionError,
    ExtractionError,
    HashComputationError,
    SpawnError,
)

LOGGER = get_logger(__name__)


class Invoker:
    """Resolves and runs the entry point of a cached bundle."""

    def __init__(self, cache: CacheManager) -> None:
        self.cache = cache

    def resolve_entry_path(self) -> Path:
        """Return the path of the entry point inside a valid generation.

        Raises:
            EntryResolutionError: If no valid generation can be produced.
        """
        try:
            root = self.cache.ensure_extracted()
        except (ExtractionError, HashComputationError) as e:
            raise EntryResolutionError(f"Failed to prepare bash runtime: {e}") from e
        return root / self.cache.entry_point

    def _command(self, args: Sequence[str]) -> List[str]:
        return [str(self.resolve_entry_path()), *args]

    def run(self, args: Sequence[str], cwd: Optional[Path] = None) -> int:
        """Run the entry point with inherited standard streams.

        Args:
            args: Arguments passed to the entry point.
            cwd: Optional working directory for the child.

        Returns:
            The child's return code, unchanged. Negative values follow
            subprocess conventions for termination by signal.

        Raises:
            EntryResolutionError: If no valid generation can be produced.
            SpawnError: If the operating system refuses to start the entry point.
        """
        cmd = self._command(args)
        LOGGER.debug(f"Running {cmd}")
        try:
            completed = subprocess.run(cmd, cwd=cwd)
        except OSError as e:
            raise SpawnError(f"Failed to start {cmd[0]}: {e}") from e
        return completed.returncode

    def run_captured(
        self,
        args: Sequence[str],
        timeout: int = 120,
        cwd: Optional[Path] = None,
    ) -> subprocess.CompletedProcess:
        """Run the entry point and capture stdout and stderr together.

        Args:
            args: Arguments passed to the entry point.
            timeout: Timeout in seconds (default: 120).
            cwd: Optional working directory for the child.

        Returns:
            CompletedProcess whose ``stdout`` holds the combined output.

        Raises:
            EntryResolutionError: If no valid generation can be produced.
            SpawnError: If the operating system refuses to start the entry point.
            subprocess.TimeoutExpired: If the command times out.
        """
        cmd = self._command(args)
        LOGGER.debug(f"Running {cmd} with captured output")
        try:
            return subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=cwd,
                timeout=timeout,
            )
        except OSError as e:
            raise SpawnError(f"Failed to start {cmd[0]}: {e}") from e
