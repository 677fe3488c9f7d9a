"""Export of the runtime bundle to a user-chosen directory."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from autossl.core.logging import get_logger
from autossl.runtime.errors import DumpError, TargetExistsError
from autossl.runtime.extract import materialize_bundle, remove_path
from autossl.runtime.hashing import file_digest
from autossl.runtime.source import ENTRY_POINT_NAME, BundleSource

LOGGER = get_logger(__name__)

# Default export directory, relative to the working directory
DEFAULT_DUMP_DIR = "./auto-ssl-bash"

# Checksum manifest written inside the export directory
MANIFEST_NAME = "CHECKSUMS.txt"


def build_manifest(root: Path, manifest_name: str = MANIFEST_NAME) -> List[Tuple[str, str]]:
    """Digest every file under ``root`` except the manifest itself.

    Returns:
        ``(relative posix path, sha256 hex)`` pairs sorted by path.
    """
    rows = []
    for path in root.rglob("*"):
        if path.is_dir():
            continue
        rel = path.relative_to(root).as_posix()
        if rel == manifest_name:
            continue
        rows.append((rel, file_digest(path)))
    return sorted(rows)


def format_manifest(rows: List[Tuple[str, str]]) -> str:
    """Render manifest rows as ``"<digest>  <path>"`` lines."""
    return "".join(f"{digest}  {rel}\n" for rel, digest in rows)


def parse_manifest(text: str) -> Dict[str, str]:
    """Parse manifest text into a path to digest mapping.

    Raises:
        ValueError: On a malformed line.
    """
    result: Dict[str, str] = {}
    for number, line in enumerate(text.splitlines(), 1):
        if not line.strip():
            continue
        digest, sep, rel = line.partition("  ")
        if not sep or not rel or len(digest) != 64:
            raise ValueError(f"Malformed manifest line {number}: {line!r}")
        result[rel] = digest
    return result


def read_manifest(path: Path) -> Dict[str, str]:
    """Read a manifest file into a path to digest mapping.

    Raises:
        OSError: If the file cannot be read.
        ValueError: On a malformed line.
    """
    return parse_manifest(path.read_text(encoding="utf-8"))


def write_manifest(root: Path, manifest_name: str = MANIFEST_NAME) -> Path:
    """Write the checksum manifest for ``root`` and return its path."""
    manifest = root / manifest_name
    manifest.write_text(format_manifest(build_manifest(root, manifest_name)), encoding="utf-8")
    return manifest


def verify_manifest(root: Path, manifest_name: str = MANIFEST_NAME) -> List[str]:
    """Check files under ``root`` against its manifest.

    Returns:
        Relative paths that are missing, modified or not listed. Empty when
        everything matches.
    """
    expected = read_manifest(root / manifest_name)
    actual = dict(build_manifest(root, manifest_name))
    problems = [rel for rel, digest in expected.items() if actual.get(rel) != digest]
    problems.extend(rel for rel in actual if rel not in expected)
    return sorted(problems)


class Dumper:
    """Copies a bundle verbatim into an arbitrary directory."""

    def __init__(self, source: BundleSource, entry_point: str = ENTRY_POINT_NAME) -> None:
        self.source = source
        self.entry_point = entry_point

    def dump(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        force: bool = False,
        checksum: bool = False,
    ) -> Path:
        """Export the bundle.

        Args:
            output_dir: Target directory; defaults to ./auto-ssl-bash.
            force: Replace the target if it already exists.
            checksum: Also write CHECKSUMS.txt into the target.

        Returns:
            Absolute path of the output directory.

        Raises:
            TargetExistsError: If the target exists and force is False.
            DumpError: If the target cannot be replaced or populated, or if
                ``checksum`` is set and the bundle ships its own manifest.
        """
        if output_dir is None or not str(output_dir).strip():
            output_dir = DEFAULT_DUMP_DIR
        target = Path(output_dir).expanduser().absolute()

        if checksum:
            self._check_manifest_free()

        if target.exists() or target.is_symlink():
            if not force:
                raise TargetExistsError(target)
            LOGGER.debug(f"Removing existing output directory {target}")
            try:
                remove_path(target)
            except OSError as e:
                raise DumpError(f"Failed to remove {target}: {e}") from e

        try:
            count = materialize_bundle(self.source, target, self.entry_point)
            if checksum:
                write_manifest(target)
        except OSError as e:
            raise DumpError(f"Failed to dump bundle to {target}: {e}") from e

        LOGGER.info(f"Dumped {count} file(s) to {target}")
        return target

    def _check_manifest_free(self) -> None:
        """Refuse a checksum dump that would overwrite a bundled manifest."""
        try:
            paths = {entry.path for entry in self.source.files()}
        except OSError as e:
            raise DumpError(f"Failed to list bundle entries: {e}") from e
        if MANIFEST_NAME in paths:
            raise DumpError(f"Bundle already contains {MANIFEST_NAME}; dump without --checksum")
