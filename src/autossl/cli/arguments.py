"""Argument parser construction for autossl CLI.

This module builds the argument parser with subcommands:
- autossl dump-bundle - Export the bash runtime to a directory
- autossl exec        - Run the bundled auto-ssl entry point
- autossl status      - Show runtime cache status
- autossl doctor      - Check host tools used by the bash runtime
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Tuple

# Separates autossl options from arguments passed through to the bash runtime
PASSTHROUGH_SEPARATOR = "--"


def split_passthrough(argv: List[str]) -> Tuple[List[str], Optional[List[str]]]:
    """Split argv at the first ``--``.

    Returns:
        Arguments for autossl, and the arguments after the separator (None
        when there is no separator).
    """
    if PASSTHROUGH_SEPARATOR not in argv:
        return argv, None
    index = argv.index(PASSTHROUGH_SEPARATOR)
    return argv[:index], argv[index + 1:]


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show autossl version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: ~/.config/autossl/config.yml).",
    )


def _build_dump_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'dump-bundle' subcommand parser."""
    dump_parser = subparsers.add_parser(
        "dump-bundle",
        help="Export the embedded bash runtime to a directory.",
        description=(
            "Copy the bash runtime bundled with autossl into a directory "
            "so it can be inspected or installed by hand."
        ),
    )
    dump_parser.add_argument(
        "--output", "-o",
        metavar="DIR",
        default=None,
        help="Target directory (default: ./auto-ssl-bash).",
    )
    dump_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Replace the target directory if it already exists.",
    )
    dump_parser.add_argument(
        "--print-path",
        action="store_true",
        help="Print only the resolved output directory.",
    )
    dump_parser.add_argument(
        "--checksum",
        action="store_true",
        default=None,
        help="Also write a CHECKSUMS.txt manifest of SHA-256 digests.",
    )


def _build_exec_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'exec' subcommand parser."""
    subparsers.add_parser(
        "exec",
        help="Run the bundled auto-ssl script: autossl exec -- <args>.",
        description=(
            "Extract the bash runtime if needed and run its auto-ssl entry "
            "point. Arguments after '--' are passed through unchanged; the "
            "exit code is the script's exit code."
        ),
    )


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    subparsers.add_parser(
        "status",
        help="Show runtime cache status.",
        description=(
            "Display autossl version, platform, cache location and the "
            "state of the extracted bash runtime."
        ),
    )


def _build_doctor_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'doctor' subcommand parser."""
    doctor_parser = subparsers.add_parser(
        "doctor",
        help="Check host tools used by the bash runtime.",
        description="Look up step, step-ca, curl, ssh and systemctl on PATH.",
    )
    doctor_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for autossl CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="autossl",
        description="autossl - bash runtime manager for the auto-ssl toolkit.",
        epilog=(
            "Examples:\n"
            "  autossl dump-bundle                      # Export to ./auto-ssl-bash\n"
            "  autossl dump-bundle -o /opt/x --force    # Replace an existing export\n"
            "  autossl exec -- ca status                # Run a bundled command\n"
            "  autossl status                           # Show cache status\n"
            "  autossl doctor --json                    # Check host tools\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )

    _build_dump_parser(subparsers)
    _build_exec_parser(subparsers)
    _build_status_parser(subparsers)
    _build_doctor_parser(subparsers)

    return parser
