"""Shared fixtures for autossl unit tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator

import pytest

from autossl.core.logging import ROOT_LOGGER_NAME
from autossl.runtime.paths import RuntimePaths
from autossl.runtime.source import MemoryBundleSource

ENTRY_SCRIPT = b"#!/bin/sh\nif [ \"$1\" = version ]; then echo 'auto-ssl 9.9.9'; exit 0; fi\necho \"args: $*\"\nexit \"${AUTO_SSL_TEST_EXIT:-0}\"\n"


@pytest.fixture(autouse=True)
def reset_autossl_logger() -> Iterator[None]:
    """Undo logging configuration applied by CLI runs."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.NOTSET)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def bundle_files() -> Dict[str, bytes]:
    """Files of a small synthetic bundle."""
    return {
        "auto-ssl": ENTRY_SCRIPT,
        "lib/a.sh": b"a() { echo a; }\n",
        "lib/tool.sh": b"#!/bin/sh\necho tool\n",
        "commands/ca.sh": b"cmd_ca() { echo ca; }\n",
    }


@pytest.fixture
def bundle(bundle_files: Dict[str, bytes]) -> MemoryBundleSource:
    """In-memory bundle with one executable helper besides the entry point."""
    return MemoryBundleSource(bundle_files, executables=["lib/tool.sh"])


@pytest.fixture
def paths(tmp_path: Path) -> RuntimePaths:
    """Runtime paths rooted in a temporary cache directory."""
    return RuntimePaths(tmp_path / "cache")
