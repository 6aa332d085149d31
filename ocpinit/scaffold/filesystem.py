"""Filesystem backends the scaffold step reads and writes through.

Paths are POSIX-style and relative to the generated project directory.
Backends raise ``OSError`` subclasses on failure; callers translate them
into ocpinit errors with context.
"""
import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Iterator, Optional, Union

from ocpinit.errors import ReadError, StatError

DEFAULT_FILE_MODE = 0o644


@dataclass(frozen=True)
class FileInfo:
    """Subset of stat information the scaffold step needs."""

    mode: int


def _normalize(path: str) -> str:
    """Return a canonical relative POSIX path."""
    pure = PurePosixPath(path)
    if pure.is_absolute():
        raise PermissionError(f"absolute paths are not allowed: {path}")
    parts = []
    for part in pure.parts:
        if part == "..":
            if not parts:
                raise PermissionError(f"path escapes project root: {path}")
            parts.pop()
        elif part != ".":
            parts.append(part)
    if not parts:
        raise IsADirectoryError(f"not a file path: {path!r}")
    return "/".join(parts)


class Filesystem(ABC):
    """Abstract interface over the generated project's files."""

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """Read the full content of a file.

        Args:
            path: Relative POSIX path

        Returns:
            Raw file bytes
        """

    @abstractmethod
    def stat(self, path: str) -> FileInfo:
        """Return file information (permission bits) for a path."""

    @abstractmethod
    def write_file(self, path: str, data: bytes, mode: int = DEFAULT_FILE_MODE) -> None:
        """Write data to a path, setting its permission bits to mode."""

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
        except OSError:
            return False
        return True


class LocalFilesystem(Filesystem):
    """Filesystem rooted at a real directory on disk."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root.joinpath(*_normalize(path).split("/"))

    def read_file(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    def stat(self, path: str) -> FileInfo:
        st = self._resolve(path).stat()
        return FileInfo(mode=stat.S_IMODE(st.st_mode))

    def write_file(self, path: str, data: bytes, mode: int = DEFAULT_FILE_MODE) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        os.chmod(target, stat.S_IMODE(mode))


class MemoryFilesystem(Filesystem):
    """In-memory filesystem for tests and dry runs.

    Args:
        files: Initial content keyed by relative path
        read_only: Reject every write with PermissionError
    """

    def __init__(self, files: Optional[Dict[str, Union[bytes, str]]] = None, read_only: bool = False):
        self.read_only = read_only
        self._files: Dict[str, bytes] = {}
        self._modes: Dict[str, int] = {}
        for path, content in (files or {}).items():
            if isinstance(content, str):
                content = content.encode()
            key = _normalize(path)
            self._files[key] = content
            self._modes[key] = DEFAULT_FILE_MODE

    @classmethod
    def snapshot(cls, source: Filesystem, paths: Iterable[str]) -> "MemoryFilesystem":
        """Copy the given paths, with their modes, out of another filesystem.

        Reads go through source the same way a real run would, so symlinks
        are followed and a missing target fails the same way.

        Raises:
            ReadError: A path cannot be read
            StatError: A path's mode cannot be read
        """
        memfs = cls()
        for path in paths:
            try:
                content = source.read_file(path)
            except OSError as e:
                raise ReadError(path, e) from e
            try:
                info = source.stat(path)
            except OSError as e:
                raise StatError(path, e) from e
            key = _normalize(path)
            memfs._files[key] = content
            memfs._modes[key] = stat.S_IMODE(info.mode)
        return memfs

    def read_file(self, path: str) -> bytes:
        key = _normalize(path)
        if key not in self._files:
            raise FileNotFoundError(f"no such file: {path}")
        return self._files[key]

    def stat(self, path: str) -> FileInfo:
        key = _normalize(path)
        if key not in self._files:
            raise FileNotFoundError(f"no such file: {path}")
        return FileInfo(mode=self._modes[key])

    def write_file(self, path: str, data: bytes, mode: int = DEFAULT_FILE_MODE) -> None:
        if self.read_only:
            raise PermissionError(f"read-only filesystem: {path}")
        key = _normalize(path)
        self._files[key] = bytes(data)
        self._modes[key] = stat.S_IMODE(mode)

    def chmod(self, path: str, mode: int) -> None:
        key = _normalize(path)
        if key not in self._files:
            raise FileNotFoundError(f"no such file: {path}")
        self._modes[key] = stat.S_IMODE(mode)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._files))

    def __len__(self) -> int:
        return len(self._files)
