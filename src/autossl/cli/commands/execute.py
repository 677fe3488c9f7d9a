"""Exec command implementation."""

from __future__ import annotations

import sys
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autossl.config.models import AutosslConfig

from autossl.cli.commands import Command
from autossl.cli.exit_codes import EXIT_FAILURE, EXIT_INVALID_USAGE, EXIT_SIGNAL_BASE
from autossl.core.logging import get_logger
from autossl.runtime.errors import BundleError
from autossl.runtime.invoker import Invoker

LOGGER = get_logger(__name__)

USAGE = "usage: autossl exec -- <args>"


def returncode_to_exit_code(returncode: int) -> int:
    """Translate a subprocess return code into a process exit code.

    Children killed by a signal report ``-signum``; shells report those as
    ``128 + signum``.
    """
    if returncode < 0:
        return EXIT_SIGNAL_BASE - returncode
    return returncode


class ExecCommand(Command):
    """Runs the bundled auto-ssl entry point."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "exec"

    def execute(self, args: Namespace, config: "AutosslConfig") -> int:
        """Execute the exec command.

        Args:
            args: Parsed command-line arguments; ``passthrough`` holds the
                arguments after ``--`` or None without a separator.
            config: autossl configuration.

        Returns:
            The entry point's exit code, 2 on usage errors, 1 if it could not
            be started.
        """
        passthrough = getattr(args, "passthrough", None)
        if not passthrough:
            print(USAGE, file=sys.stderr)
            return EXIT_INVALID_USAGE

        invoker = Invoker(self.cache_manager(config))
        try:
            returncode = invoker.run(passthrough)
        except BundleError as e:
            LOGGER.debug("exec failed", exc_info=True)
            print(f"exec failed: {e}", file=sys.stderr)
            return EXIT_FAILURE

        return returncode_to_exit_code(returncode)
