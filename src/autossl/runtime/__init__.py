"""
Runtime module for the embedded bash bundle.

This module handles:
- Bundle sources (package data, directories, in-memory trees)
- Content hashing and version tokens
- Extraction into a per-version cache generation (~/.cache/autossl/runtime/)
- Export of the bundle with checksum manifests
- Running the bundled entry point
"""

from autossl.runtime.cache import CacheManager, GenerationState
from autossl.runtime.dumper import Dumper
from autossl.runtime.errors import (
    BundleError,
    CleanupError,
    DumpError,
    EntryResolutionError,
    ExtractionError,
    HashComputationError,
    MarkerWriteError,
    SpawnError,
    TargetExistsError,
)
from autossl.runtime.invoker import Invoker
from autossl.runtime.paths import RuntimePaths, get_cache_root
from autossl.runtime.source import (
    BundleEntry,
    BundleSource,
    DirectoryBundleSource,
    MemoryBundleSource,
    PackageBundleSource,
    default_bundle_source,
)

__all__ = [
    "BundleEntry",
    "BundleError",
    "BundleSource",
    "CacheManager",
    "CleanupError",
    "DirectoryBundleSource",
    "DumpError",
    "Dumper",
    "EntryResolutionError",
    "ExtractionError",
    "GenerationState",
    "HashComputationError",
    "Invoker",
    "MarkerWriteError",
    "MemoryBundleSource",
    "PackageBundleSource",
    "RuntimePaths",
    "SpawnError",
    "TargetExistsError",
    "default_bundle_source",
    "get_cache_root",
]
