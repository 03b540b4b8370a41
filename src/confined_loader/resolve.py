"""Canonical path resolution for referenced paths.

Turns a candidate path plus a root into an absolute path with ``.`` and
``..`` segments collapsed lexically and, when the path exists, with
symbolic links followed to the real location. Missing paths are not an
error here: their existing ancestors are resolved and the missing tail is
kept as written, so a link to a directory cannot smuggle a new file out.
"""

from __future__ import annotations

import errno
import logging
import os
from dataclasses import dataclass

from .errors import LoaderIOError
from .filesys import ConfirmedDir, FileSystem

logger = logging.getLogger(__name__)

# Same bound the Linux kernel applies to nested link resolution.
MAX_SYMLINK_HOPS = 40


@dataclass(frozen=True)
class ResolvedPath:
    """A resolved path split into its directory and leaf name.

    ``file`` is empty when the path resolves to a directory.
    """

    dir: ConfirmedDir
    file: str

    def join(self) -> str:
        return self.dir.join(self.file) if self.file else str(self.dir)


def lexical_abs(root: str, candidate: str) -> str:
    """Absolutize *candidate* against *root* and collapse ``.``/``..`` segments.

    Never touches the filesystem.
    """
    return os.path.normpath(os.path.join(root, candidate))


def _split(path: str) -> tuple[str, str]:
    head, tail = os.path.split(path)
    return head or os.sep, tail


def _follow_links(fs: FileSystem, path: str) -> str:
    """Resolve every link on *path*, following a final link recursively."""
    head, tail = _split(path)
    current = os.path.join(fs.real_path(head), tail) if tail else fs.real_path(head)
    hops = 0
    while fs.is_symlink(current):
        if hops >= MAX_SYMLINK_HOPS:
            raise OSError(errno.ELOOP, os.strerror(errno.ELOOP), path)
        target = fs.read_link(current)
        logger.debug("Following link %s -> %s", current, target)
        head, tail = _split(lexical_abs(os.path.dirname(current), target))
        current = os.path.join(fs.real_path(head), tail)
        hops += 1
    return current


def _resolve_missing(fs: FileSystem, path: str) -> str:
    """Resolve the deepest existing ancestor of *path* and re-append the rest."""
    missing: list[str] = []
    current = path
    while not fs.exists(current):
        head, tail = _split(current)
        if head == current:
            break
        missing.append(tail)
        current = head
    return os.path.join(_follow_links(fs, current), *reversed(missing))


def resolve_candidate(fs: FileSystem, root: ConfirmedDir, candidate: str) -> ResolvedPath:
    """Resolve *candidate* to its canonical form relative to *root*.

    Args:
        fs: Filesystem to query.
        root: Directory that relative candidates are taken against.
        candidate: Path as written in the configuration; may be relative,
            contain backsteps, or not exist yet.

    Returns:
        The resolved directory and leaf. For existing paths this is the real,
        link-free location. For missing paths the existing ancestors are
        resolved and the missing components are appended lexically.

    Raises:
        LoaderIOError: If the filesystem cannot be queried.
    """
    lexical = lexical_abs(root, candidate)
    try:
        if fs.exists(lexical):
            resolved = _follow_links(fs, lexical)
            if fs.is_dir(resolved):
                return ResolvedPath(ConfirmedDir(resolved), "")
        else:
            logger.debug("%s does not exist; resolving its existing ancestors", lexical)
            resolved = _resolve_missing(fs, lexical)
    except OSError as exc:
        raise LoaderIOError(candidate, exc) from exc

    head, tail = _split(resolved)
    return ResolvedPath(ConfirmedDir(head), tail)
