"""Version tokens for runtime generations.

The version token names the build of the running program. It keys the
generation directory on disk, so it is sanitized into a single safe path
component before use.
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

# Token used when no version is known
DEFAULT_VERSION = "dev"

# Distribution name used for metadata lookup
DISTRIBUTION_NAME = "autossl"

_UNSAFE_CHARS = re.compile(r"[\s/\\\x00-\x1f\x7f]")
_LEADING_DOTS = re.compile(r"^\.+")


def normalize_version(value: Optional[str]) -> str:
    """Trim a version string, mapping empty input to DEFAULT_VERSION."""
    value = (value or "").strip()
    return value or DEFAULT_VERSION


def sanitize_version(value: Optional[str]) -> str:
    """Map any version string to a filesystem-safe directory name.

    Path separators, whitespace and control characters become ``-``.
    Leading dots become ``-`` so the token can never name the current or
    parent directory or a hidden entry.

    Examples:
        >>> sanitize_version("v1.2.0")
        'v1.2.0'
        >>> sanitize_version("feature/x y")
        'feature-x-y'
        >>> sanitize_version("")
        'dev'
    """
    token = (value or "").strip()
    if os.sep not in ("/", "\\"):
        token = token.replace(os.sep, "-")
    token = _UNSAFE_CHARS.sub("-", token)
    token = _LEADING_DOTS.sub(lambda m: "-" * len(m.group(0)), token)
    return token or DEFAULT_VERSION


@lru_cache(maxsize=1)
def get_program_version() -> str:
    """Return the version of the installed program.

    Resolution order:
    1. Installed distribution metadata
    2. ``autossl.__version__``
    3. DEFAULT_VERSION
    """
    try:
        return normalize_version(version(DISTRIBUTION_NAME))
    except PackageNotFoundError:
        # Fallback for source checkouts that have not built metadata.
        from autossl import __version__

        return normalize_version(__version__)
