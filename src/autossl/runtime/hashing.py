"""Content hashing for bundles and exported files."""

from __future__ import annotations

import hashlib
from pathlib import Path

from autossl.runtime.errors import HashComputationError
from autossl.runtime.source import BundleSource

# Read size for streaming file digests
_CHUNK_SIZE = 64 * 1024


def content_hash(source: BundleSource) -> str:
    """Compute the SHA-256 content hash of a bundle.

    Files are visited in lexicographic path order. Each one contributes its
    path and length, then its bytes, so renaming a file or moving bytes
    between files changes the digest.

    Args:
        source: Bundle to hash.

    Returns:
        Hex digest.

    Raises:
        HashComputationError: If any entry cannot be enumerated or read.
    """
    digest = hashlib.sha256()
    try:
        files = sorted(source.files(), key=lambda e: e.path)
    except OSError as e:
        raise HashComputationError(f"Failed to list bundle entries: {e}") from e

    for entry in files:
        try:
            data = source.read(entry.path)
        except OSError as e:
            raise HashComputationError(f"Failed to read bundle entry {entry.path}: {e}") from e
        digest.update(f"{entry.path}\0{len(data)}\0".encode("utf-8"))
        digest.update(data)
    return digest.hexdigest()


def file_digest(path: Path) -> str:
    """Return the SHA-256 hex digest of a file on disk."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
