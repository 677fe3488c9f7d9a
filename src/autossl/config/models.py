"""Typed configuration models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from autossl.runtime.dumper import DEFAULT_DUMP_DIR
from autossl.runtime.retention import DEFAULT_RETENTION


@dataclass
class RuntimeConfig:
    """Runtime cache settings."""

    cache_dir: Optional[Path] = None
    retention: int = DEFAULT_RETENTION


@dataclass
class DumpConfig:
    """Defaults for the dump-bundle command."""

    output: str = DEFAULT_DUMP_DIR
    checksum: bool = False


@dataclass
class AutosslConfig:
    """Complete autossl configuration."""

    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    dump: DumpConfig = field(default_factory=DumpConfig)

    # Files the configuration was read from
    sources: List[str] = field(default_factory=list)
