"""Bundle sources: read-only trees of runtime files.

A bundle source is an explicit value handed to the cache manager and the
dumper. The installed program uses :class:`PackageBundleSource`, which reads
the bash runtime shipped as package data; tests and embedding programs can
supply a :class:`DirectoryBundleSource` or a :class:`MemoryBundleSource`.
"""

from __future__ import annotations

import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from importlib import resources
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional

# Name of the executable dispatcher at the root of the bundle
ENTRY_POINT_NAME = "auto-ssl"

# Package data location of the default bundle
DEFAULT_BUNDLE_PACKAGE = "autossl"
DEFAULT_BUNDLE_SUBPATH = "assets/bash"


@dataclass(frozen=True)
class BundleEntry:
    """A single file or directory in a bundle.

    Attributes:
        path: Relative POSIX path inside the bundle.
        is_dir: True for directories.
        executable: True if the file carries an executable bit.
    """

    path: str
    is_dir: bool = False
    executable: bool = False


def check_relative_path(path: str) -> str:
    """Validate a bundle path and return it in normalized POSIX form.

    Raises:
        ValueError: If the path is empty, absolute or escapes the bundle root.
    """
    pure = PurePosixPath(path.replace("\\", "/"))
    if not path or pure.is_absolute() or ".." in pure.parts or str(pure) == ".":
        raise ValueError(f"Unsafe path in bundle: {path!r}")
    return str(pure)


class BundleSource(ABC):
    """Read-only, enumerable tree of files."""

    @abstractmethod
    def entries(self) -> List[BundleEntry]:
        """Return every entry, sorted by path."""

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Return the content of the file at ``path``.

        Raises:
            OSError: If the file cannot be read.
        """

    def files(self) -> List[BundleEntry]:
        """Return the non-directory entries, sorted by path."""
        return [entry for entry in self.entries() if not entry.is_dir]


class MemoryBundleSource(BundleSource):
    """Bundle held in memory, keyed by relative path."""

    def __init__(
        self,
        files: Dict[str, bytes],
        executables: Iterable[str] = (),
        directories: Iterable[str] = (),
    ) -> None:
        self._files = {check_relative_path(p): bytes(data) for p, data in files.items()}
        self._executables = {check_relative_path(p) for p in executables}
        unknown = self._executables - set(self._files)
        if unknown:
            raise ValueError(f"Executable paths not in bundle: {sorted(unknown)}")

        dirs = {check_relative_path(d) for d in directories}
        for path in dirs | set(self._files):
            parent = PurePosixPath(path).parent
            while str(parent) != ".":
                dirs.add(str(parent))
                parent = parent.parent
        clash = dirs & set(self._files)
        if clash:
            raise ValueError(f"Paths used as both file and directory: {sorted(clash)}")
        self._dirs = dirs

    def entries(self) -> List[BundleEntry]:
        result = [BundleEntry(path=d, is_dir=True) for d in self._dirs]
        result.extend(
            BundleEntry(path=p, executable=p in self._executables) for p in self._files
        )
        return sorted(result, key=lambda e: e.path)

    def read(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError:
            raise FileNotFoundError(f"No such bundle file: {path}") from None


class DirectoryBundleSource(BundleSource):
    """Bundle backed by a directory on disk."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._entries: Optional[List[BundleEntry]] = None

    def entries(self) -> List[BundleEntry]:
        if self._entries is None:
            if not self.root.is_dir():
                raise FileNotFoundError(f"Bundle directory not found: {self.root}")
            result = []
            for path in self.root.rglob("*"):
                rel = path.relative_to(self.root).as_posix()
                if path.is_dir():
                    result.append(BundleEntry(path=rel, is_dir=True))
                else:
                    mode = path.stat().st_mode
                    result.append(BundleEntry(path=rel, executable=bool(mode & stat.S_IXUSR)))
            self._entries = sorted(result, key=lambda e: e.path)
        return list(self._entries)

    def read(self, path: str) -> bytes:
        return (self.root / check_relative_path(path)).read_bytes()


class PackageBundleSource(BundleSource):
    """Bundle shipped as package data, read through importlib.resources."""

    def __init__(
        self,
        package: str = DEFAULT_BUNDLE_PACKAGE,
        subpath: str = DEFAULT_BUNDLE_SUBPATH,
    ) -> None:
        self.package = package
        self.subpath = subpath
        self._nodes: Optional[Dict[str, object]] = None
        self._entries: Optional[List[BundleEntry]] = None

    def _root(self):
        root = resources.files(self.package)
        for part in PurePosixPath(self.subpath).parts:
            root = root.joinpath(part)
        return root

    def _walk(self, node, prefix: str, nodes: Dict[str, object], result: List[BundleEntry]) -> None:
        for child in node.iterdir():
            if child.name == "__pycache__":
                continue
            rel = f"{prefix}{child.name}"
            nodes[rel] = child
            if child.is_dir():
                result.append(BundleEntry(path=rel, is_dir=True))
                self._walk(child, f"{rel}/", nodes, result)
            else:
                executable = False
                if isinstance(child, Path):
                    executable = bool(child.stat().st_mode & stat.S_IXUSR)
                result.append(BundleEntry(path=rel, executable=executable))

    def entries(self) -> List[BundleEntry]:
        if self._entries is None:
            root = self._root()
            if not root.is_dir():
                raise FileNotFoundError(
                    f"Bundle data not found: {self.package}/{self.subpath}"
                )
            nodes: Dict[str, object] = {}
            result: List[BundleEntry] = []
            self._walk(root, "", nodes, result)
            self._nodes = nodes
            self._entries = sorted(result, key=lambda e: e.path)
        return list(self._entries)

    def read(self, path: str) -> bytes:
        if self._nodes is None:
            self.entries()
        assert self._nodes is not None
        node = self._nodes.get(path)
        if node is None:
            raise FileNotFoundError(f"No such bundle file: {path}")
        return node.read_bytes()  # type: ignore[attr-defined]


def default_bundle_source() -> BundleSource:
    """Return the bash runtime bundled with this package."""
    return PackageBundleSource()
