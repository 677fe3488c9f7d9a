"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING, Optional

from autossl.runtime.cache import CacheManager
from autossl.runtime.paths import RuntimePaths
from autossl.runtime.source import BundleSource, default_bundle_source

if TYPE_CHECKING:
    from autossl.config.models import AutosslConfig


class Command(ABC):
    """Base class for CLI commands.

    All CLI commands should inherit from this class and implement
    the execute method.
    """

    def __init__(self, version: str, source: Optional[BundleSource] = None) -> None:
        """Initialize the command.

        Args:
            version: Version token of the running program.
            source: Bundle to operate on; defaults to the packaged bash runtime.
        """
        self._version = version
        self._source = source

    @property
    def source(self) -> BundleSource:
        if self._source is None:
            self._source = default_bundle_source()
        return self._source

    def cache_manager(self, config: "AutosslConfig") -> CacheManager:
        """Create a cache manager honouring the runtime configuration."""
        return CacheManager(
            self.source,
            version=self._version,
            paths=RuntimePaths.default(config.runtime.cache_dir),
            retention=config.runtime.retention,
        )

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier.

        Returns:
            String name of the command.
        """

    @abstractmethod
    def execute(self, args: Namespace, config: "AutosslConfig") -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: autossl configuration.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# Import command implementations for convenience
# ruff: noqa: E402
from autossl.cli.commands.doctor import DoctorCommand
from autossl.cli.commands.dump import DumpBundleCommand
from autossl.cli.commands.execute import ExecCommand
from autossl.cli.commands.status import StatusCommand

__all__ = [
    "Command",
    "DoctorCommand",
    "DumpBundleCommand",
    "ExecCommand",
    "StatusCommand",
]
