"""Dump-bundle command implementation."""

from __future__ import annotations

import sys
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autossl.config.models import AutosslConfig

from autossl.cli.commands import Command
from autossl.cli.exit_codes import EXIT_FAILURE, EXIT_SUCCESS
from autossl.core.logging import get_logger
from autossl.runtime.dumper import Dumper
from autossl.runtime.errors import BundleError

LOGGER = get_logger(__name__)


class DumpBundleCommand(Command):
    """Exports the bash runtime to a directory."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "dump-bundle"

    def execute(self, args: Namespace, config: "AutosslConfig") -> int:
        """Execute the dump-bundle command.

        Args:
            args: Parsed command-line arguments.
            config: autossl configuration supplying defaults.

        Returns:
            Exit code: 0 on success, 1 if the target exists or copying fails.
        """
        output = args.output or config.dump.output
        checksum = args.checksum if args.checksum is not None else config.dump.checksum

        try:
            path = Dumper(self.source).dump(output, force=args.force, checksum=checksum)
        except BundleError as e:
            LOGGER.debug("dump-bundle failed", exc_info=True)
            print(f"dump-bundle failed: {e}", file=sys.stderr)
            return EXIT_FAILURE

        if args.print_path:
            print(path)
        else:
            print(f"Bash runtime dumped to {path}")
        return EXIT_SUCCESS
