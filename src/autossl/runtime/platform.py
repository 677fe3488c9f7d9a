"""Host description shown by ``status`` and ``doctor``."""

from __future__ import annotations

import platform
from dataclasses import dataclass

# platform.machine() spellings mapped to GOARCH-style names
_MACHINE_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
}


def normalize_arch(machine: str) -> str:
    """Map a raw machine string to a short architecture name.

    Unrecognised values are returned lowercased; an empty string becomes
    ``"unknown"``.
    """
    key = machine.lower()
    return _MACHINE_ALIASES.get(key, key or "unknown")


def detect_os() -> str:
    return platform.system().lower() or "unknown"


@dataclass(frozen=True)
class PlatformInfo:
    """Operating system and architecture pair, e.g. linux and amd64."""

    os: str
    arch: str

    @property
    def label(self) -> str:
        return f"{self.os}/{self.arch}"


def get_platform_info() -> PlatformInfo:
    """Describe the running host."""
    return PlatformInfo(os=detect_os(), arch=normalize_arch(platform.machine()))
