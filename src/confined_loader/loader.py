"""Confined file loader.

A :class:`FileLoader` reads files referenced from a configuration file,
applying one load restriction, chosen at construction, to every path.
Child loaders for referenced directories inherit the filesystem and the
restriction; re-entering a directory already on the referrer chain is a
cycle.
"""

from __future__ import annotations

import logging
import os

from .config import get_config
from .errors import LoaderCycleError, LoaderIOError
from .filesys import ConfirmedDir, FileSystem, OnDiskFileSystem, confirm_dir
from .path_policy import restriction_for
from .types import LoadRestrictions

logger = logging.getLogger(__name__)


class FileLoader:
    """Loads referenced files from under a confirmed root directory."""

    def __init__(
        self,
        root: str,
        restrictions: LoadRestrictions | str,
        fs: FileSystem | None = None,
        *,
        referrer: FileLoader | None = None,
    ) -> None:
        self._restrictions = LoadRestrictions.coerce(restrictions)
        # Unknown is rejected before the filesystem is touched.
        self._restrictor = restriction_for(self._restrictions)
        self._fs = fs if fs is not None else OnDiskFileSystem()
        self._root = confirm_dir(self._fs, root)
        self._referrer = referrer

    @classmethod
    def from_config(cls, root: str, fs: FileSystem | None = None) -> FileLoader:
        """Build a loader using the configured load restrictions."""
        return cls(root, get_config().load_restrictions, fs)

    @property
    def root(self) -> ConfirmedDir:
        return self._root

    @property
    def restrictions(self) -> LoadRestrictions:
        return self._restrictions

    def _absolute(self, path: str) -> str:
        return path if os.path.isabs(path) else self._root.join(path)

    def check(self, path: str) -> str:
        """Apply the load restriction to *path* and return the path to read."""
        return self._restrictor(self._fs, self._root, self._absolute(path))

    def load(self, path: str) -> bytes:
        """Read the file at *path*, relative to the root unless absolute.

        Raises:
            PathNotInRootError: If the restriction rejects *path*.
            LoaderIOError: If the file cannot be read.
        """
        checked = self.check(path)
        try:
            data = self._fs.read_bytes(checked)
        except OSError as exc:
            raise LoaderIOError(path, exc) from exc
        logger.debug("Loaded %s (%d bytes)", checked, len(data))
        return data

    def new(self, path: str) -> FileLoader:
        """Return a loader rooted at the directory *path*.

        The directory itself is not subject to the restriction; files loaded
        through the new loader are confined to it.

        Raises:
            RootNotDirError: If *path* is not an existing directory.
            LoaderCycleError: If *path* is this root, one of its ancestors,
                or a root already on the referrer chain.
        """
        root = confirm_dir(self._fs, self._absolute(path))
        if self._root.has_prefix(root):
            raise LoaderCycleError(root, self._root)
        loader = self._referrer
        while loader is not None:
            if loader.root == root:
                raise LoaderCycleError(root, loader.root)
            loader = loader._referrer
        logger.debug("New loader at %s (referred by %s)", root, self._root)
        return FileLoader(root, self._restrictions, self._fs, referrer=self)
