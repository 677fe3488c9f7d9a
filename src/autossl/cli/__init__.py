"""Command-line interface for autossl."""

from __future__ import annotations

from typing import Iterable, Optional

from autossl.cli.arguments import build_parser
from autossl.cli.runner import CLIRunner

__all__ = ["CLIRunner", "build_parser", "main"]


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code.
    """
    return CLIRunner().run(argv)
