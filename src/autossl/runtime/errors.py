"""Error taxonomy for the embedded runtime bundle.

Every error raised by the runtime package derives from :class:`BundleError`
so callers presenting failures to a user only need one ``except`` clause.
"""

from __future__ import annotations


class BundleError(Exception):
    """Error related to bundle operations."""

    pass


class HashComputationError(BundleError):
    """A bundle entry could not be read while computing the content hash.

    Indicates a defect in the packaged bundle and is never retried.
    """

    pass


class ExtractionError(BundleError):
    """Filesystem failure while creating or populating a generation.

    Retryable: a failed extraction never leaves a valid marker behind.
    """

    pass


class MarkerWriteError(ExtractionError):
    """The marker file could not be written after the content was copied."""

    pass


class EntryResolutionError(BundleError):
    """No valid generation could be produced for the entry point."""

    pass


class SpawnError(BundleError):
    """The operating system refused to start the resolved entry point."""

    pass


class TargetExistsError(BundleError):
    """The dump target exists and overwriting was not requested."""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"output directory already exists: {path} (use --force)")


class DumpError(BundleError):
    """Filesystem failure while exporting the bundle."""

    pass


class CleanupError(BundleError):
    """Retention pruning failed for one or more generations.

    Logged by the cache manager, never propagated.
    """

    pass
