"""Status command implementation."""

from __future__ import annotations

import subprocess
from argparse import Namespace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from autossl.config.models import AutosslConfig

from autossl.cli.commands import Command
from autossl.cli.exit_codes import EXIT_FAILURE, EXIT_SUCCESS
from autossl.runtime.cache import CacheManager, GenerationState
from autossl.runtime.errors import BundleError
from autossl.runtime.invoker import Invoker
from autossl.runtime.platform import get_platform_info


class StatusCommand(Command):
    """Shows runtime cache status and environment information."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace, config: "AutosslConfig") -> int:
        """Execute the status command.

        Displays autossl version, platform and the state of the cached
        runtime. Never extracts anything.

        Args:
            args: Parsed command-line arguments.
            config: autossl configuration.

        Returns:
            Exit code (1 if the bundle cannot be read, 0 otherwise).
        """
        cache = self.cache_manager(config)
        platform_info = get_platform_info()

        print(f"autossl version: {self._version}")
        print(f"Platform: {platform_info.label}")
        print(f"Cache root: {cache.paths.home}")
        if config.sources:
            print(f"Config: {', '.join(config.sources)}")

        try:
            state = cache.state()
        except BundleError as e:
            print(f"Runtime: error reading bundle ({e})")
            return EXIT_FAILURE

        print(f"Runtime: {cache.generation_dir} ({state.value})")
        if state == GenerationState.VALID:
            script_version = self._script_version(cache)
            if script_version:
                print(f"Bundled script: {script_version}")

        generations = cache.list_generations()
        print()
        print("Generations on disk:")
        if generations:
            for generation in generations:
                suffix = " (current)" if generation == cache.generation_dir else ""
                print(f"  {generation.name}{suffix}")
        else:
            print("  none")

        if state != GenerationState.VALID:
            print()
            print("The bash runtime is extracted on the next 'autossl exec'.")

        return EXIT_SUCCESS

    @staticmethod
    def _script_version(cache: CacheManager) -> Optional[str]:
        """Ask the bundled entry point for its version, if it answers."""
        try:
            result = Invoker(cache).run_captured(["version"], timeout=10)
        except (BundleError, subprocess.TimeoutExpired):
            return None
        if result.returncode != 0 or not result.stdout.strip():
            return None
        return result.stdout.strip().splitlines()[0]
