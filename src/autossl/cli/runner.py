"""CLI runner orchestration.

This module handles command dispatch and execution for the autossl CLI.
"""

from __future__ import annotations

import sys
from typing import Dict, Iterable, Optional

from autossl.cli.arguments import build_parser, split_passthrough
from autossl.cli.commands import (
    Command,
    DoctorCommand,
    DumpBundleCommand,
    ExecCommand,
    StatusCommand,
)
from autossl.cli.exit_codes import EXIT_FAILURE, EXIT_INVALID_USAGE, EXIT_SUCCESS
from autossl.config import ConfigError, load_config
from autossl.core.logging import configure_logging, get_logger
from autossl.runtime.source import BundleSource
from autossl.runtime.versions import get_program_version

LOGGER = get_logger(__name__)


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(
        self,
        source: Optional[BundleSource] = None,
        version: Optional[str] = None,
    ) -> None:
        """Initialize CLIRunner with parser and commands.

        Args:
            source: Bundle to operate on; defaults to the packaged bash runtime.
            version: Version token; defaults to the installed program version.
        """
        self.parser = build_parser()
        self._version = version if version is not None else get_program_version()
        self.commands: Dict[str, Command] = {
            cmd.name: cmd
            for cmd in (
                DumpBundleCommand(self._version, source),
                ExecCommand(self._version, source),
                StatusCommand(self._version, source),
                DoctorCommand(self._version, source),
            )
        }

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:]).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else sys.argv[1:]
        own_args, passthrough = split_passthrough(argv_list)

        try:
            args = self.parser.parse_args(own_args)
        except SystemExit as e:
            # argparse exits 0 after --help and 2 on usage errors
            return e.code if isinstance(e.code, int) else EXIT_INVALID_USAGE
        args.passthrough = passthrough

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(f"autossl version {self._version}")
            return EXIT_SUCCESS

        command = self.commands.get(getattr(args, "command", None) or "")
        if command is None:
            if passthrough is not None:
                print("Arguments after '--' are only accepted by 'exec'.", file=sys.stderr)
                return EXIT_INVALID_USAGE
            self.parser.print_help()
            return EXIT_SUCCESS

        if passthrough is not None and command.name != "exec":
            print(f"'{command.name}' does not accept arguments after '--'.", file=sys.stderr)
            return EXIT_INVALID_USAGE

        try:
            config = load_config(args.config)
        except ConfigError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return EXIT_INVALID_USAGE

        LOGGER.debug(f"Running '{command.name}' with version {self._version}")
        try:
            return command.execute(args, config)
        except Exception as e:
            if args.debug:
                import traceback
                traceback.print_exc()
            print(f"{command.name} failed: {e}", file=sys.stderr)
            return EXIT_FAILURE
