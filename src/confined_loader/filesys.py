"""Filesystem abstraction consumed by the path policies and the loader.

Two implementations share the :class:`FileSystem` protocol: the real disk
and an in-memory tree used for tests and dry runs. Policies only issue
read-only queries (stat, readlink); the writers exist so callers can build
fixtures through the same interface.
"""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Protocol

from .errors import LoaderIOError, RootNotDirError


class ConfirmedDir(str):
    """An absolute, existing directory with links and backsteps resolved out."""

    __slots__ = ()

    def join(self, *parts: str) -> str:
        return os.path.join(self, *parts)

    def has_prefix(self, root: str) -> bool:
        """Return True when this directory equals *root* or lies below it."""
        if self == root:
            return True
        prefix = root if root.endswith(os.sep) else root + os.sep
        return self.startswith(prefix)


class FileSystem(Protocol):
    """Operations the loader needs from a filesystem."""

    def exists(self, path: str) -> bool: ...

    def is_dir(self, path: str) -> bool: ...

    def is_symlink(self, path: str) -> bool: ...

    def read_link(self, path: str) -> str: ...

    def real_path(self, path: str) -> str: ...

    def read_bytes(self, path: str) -> bytes: ...

    def mkdir_all(self, path: str) -> None: ...

    def create(self, path: str) -> None: ...

    def write_bytes(self, path: str, data: bytes) -> None: ...


class OnDiskFileSystem:
    """FileSystem backed by the operating system."""

    def exists(self, path: str) -> bool:
        """Return True if *path* exists, following links.

        Absence (including a dangling link) is False; any other stat
        failure such as a permission fault or a link loop propagates.
        """
        try:
            os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return False
        return True

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_symlink(self, path: str) -> bool:
        return os.path.islink(path)

    def read_link(self, path: str) -> str:
        return os.readlink(path)

    def real_path(self, path: str) -> str:
        return os.path.realpath(path)

    def read_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def mkdir_all(self, path: str) -> None:
        os.makedirs(path, exist_ok=True)

    def create(self, path: str) -> None:
        self.write_bytes(path, b"")

    def write_bytes(self, path: str, data: bytes) -> None:
        Path(path).write_bytes(data)


class InMemoryFileSystem:
    """FileSystem held in memory: directories and regular files, no links.

    Relative paths are taken relative to the filesystem root.
    """

    def __init__(self) -> None:
        self._dirs: set[str] = {os.sep}
        self._files: dict[str, bytes] = {}

    @staticmethod
    def _clean(path: str) -> str:
        return os.path.normpath(os.path.join(os.sep, path))

    def exists(self, path: str) -> bool:
        p = self._clean(path)
        return p in self._dirs or p in self._files

    def is_dir(self, path: str) -> bool:
        return self._clean(path) in self._dirs

    def is_symlink(self, path: str) -> bool:
        return False

    def read_link(self, path: str) -> str:
        raise OSError(errno.EINVAL, "not a symbolic link", path)

    def real_path(self, path: str) -> str:
        return self._clean(path)

    def read_bytes(self, path: str) -> bytes:
        p = self._clean(path)
        if p in self._dirs:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), path)
        try:
            return self._files[p]
        except KeyError:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path) from None

    def mkdir_all(self, path: str) -> None:
        p = self._clean(path)
        chain = []
        while p not in self._dirs:
            if p in self._files:
                raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
            chain.append(p)
            p = os.path.dirname(p)
        self._dirs.update(chain)

    def create(self, path: str) -> None:
        self.write_bytes(path, b"")

    def write_bytes(self, path: str, data: bytes) -> None:
        p = self._clean(path)
        if p in self._dirs:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), path)
        self.mkdir_all(os.path.dirname(p))
        self._files[p] = data


def confirm_dir(fs: FileSystem, path: str) -> ConfirmedDir:
    """Canonicalize *path* into a ConfirmedDir.

    Args:
        fs: Filesystem to query.
        path: Directory path, relative to the working directory if not absolute.

    Returns:
        The absolute, link-free directory.

    Raises:
        RootNotDirError: If *path* is not an existing directory.
        LoaderIOError: If the filesystem cannot be queried.
    """
    absolute = os.path.abspath(path)
    if not fs.is_dir(absolute):
        raise RootNotDirError(path)
    try:
        return ConfirmedDir(fs.real_path(absolute))
    except OSError as exc:
        raise LoaderIOError(path, exc) from exc
