"""Path management for the runtime cache.

Handles the cache root directory structure and path resolution.
Each program version gets one generation under <cache root>/runtime/{version}/.
"""

from __future__ import annotations

import os
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

from autossl.runtime.versions import sanitize_version

# Program-specific directory name under the user cache directory
CACHE_DIR_NAME = "autossl"

# Environment variable to override the cache root
AUTOSSL_CACHE_DIR_ENV = "AUTOSSL_CACHE_DIR"

# Marker written last into every complete generation
MARKER_NAME = ".extracted"

# Extraction-order ledger kept next to the generations
LEDGER_NAME = ".generations"


def user_cache_dir() -> Optional[Path]:
    """Return the platform's per-user cache directory, or None if unknown.

    - Linux and other Unix: $XDG_CACHE_HOME, else ~/.cache
    - macOS: ~/Library/Caches
    - Windows: %LOCALAPPDATA%
    """
    if sys.platform.startswith("win"):
        local = os.environ.get("LOCALAPPDATA")
        return Path(local) if local else None

    try:
        home = Path.home()
    except (RuntimeError, KeyError):
        home = None

    if sys.platform == "darwin":
        return home / "Library" / "Caches" if home else None

    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return home / ".cache" if home else None


def get_cache_root(override: Optional[Path] = None) -> Path:
    """Get the cache root directory path.

    Resolution order:
    1. Explicit override (from configuration)
    2. AUTOSSL_CACHE_DIR environment variable (if set)
    3. <user cache dir>/autossl
    4. <temp dir>/autossl

    Returns:
        Path to the cache root directory.
    """
    if override is not None:
        return Path(override).expanduser()
    env_root = os.environ.get(AUTOSSL_CACHE_DIR_ENV)
    if env_root:
        return Path(env_root).expanduser()
    base = user_cache_dir()
    if base is None:
        base = Path(tempfile.gettempdir())
    return base / CACHE_DIR_NAME


@dataclass
class RuntimePaths:
    """Manages paths within the cache root.

    Directory structure:
        <cache root>/
            runtime/
                .generations        - extraction-order ledger
                {version}/          - one generation per version token
                    .extracted      - marker: "{version}|{content hash}"
                    auto-ssl        - entry point
                    lib/ commands/ completions/
    """

    home: Path

    _RUNTIME_DIR: ClassVar[str] = "runtime"

    @classmethod
    def default(cls, override: Optional[Path] = None) -> "RuntimePaths":
        """Create paths from the default cache root."""
        return cls(get_cache_root(override))

    @property
    def runtime_dir(self) -> Path:
        """Directory containing all generations."""
        return self.home / self._RUNTIME_DIR

    @property
    def ledger(self) -> Path:
        """Path to the extraction-order ledger."""
        return self.runtime_dir / LEDGER_NAME

    def generation_dir(self, version: str) -> Path:
        """Get the generation directory for a version token.

        Args:
            version: Raw version token; sanitized before use.
        """
        return self.runtime_dir / sanitize_version(version)

    def marker_path(self, version: str) -> Path:
        """Get the marker file path for a version token."""
        return self.generation_dir(version) / MARKER_NAME

    def ensure_directories(self) -> None:
        """Create the cache root and runtime directory if they don't exist."""
        self.runtime_dir.mkdir(parents=True, exist_ok=True)
