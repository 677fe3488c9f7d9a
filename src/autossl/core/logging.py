"""Logging setup for the autossl command line.

Diagnostics go to stderr through a handler on the ``autossl`` logger, so
stdout stays reserved for command output such as ``dump-bundle --print-path``
and the bash runtime's own output.
"""

from __future__ import annotations

import logging
from typing import Optional

# Parent logger of every module logger in the package
ROOT_LOGGER_NAME = "autossl"

_HANDLER_NAME = "autossl-stderr"
_FORMAT = "autossl: %(levelname)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> int:
    """Configure the package logger based on CLI flags.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - verbose → INFO
    - default → WARNING

    Each call replaces the stderr handler installed by the previous one, so
    the handler always writes to the current ``sys.stderr``.

    Returns:
        The level that was applied.
    """

    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    for old in [h for h in logger.handlers if h.get_name() == _HANDLER_NAME]:
        logger.removeHandler(old)
        old.close()

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if debug else _FORMAT))
    logger.addHandler(handler)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""

    return logging.getLogger(name if name is not None else ROOT_LOGGER_NAME)
