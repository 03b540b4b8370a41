"""Policy helpers for confining referenced paths to a loader root.

Each restriction has the same signature, ``(fs, root, path) -> str``, and
returns the path the caller must use from then on. A load operation picks
one with :func:`restriction_for` and applies it to every path it reads.

- ``restriction_none``: no confinement; the path comes back untouched.
- ``restriction_root_only``: the fully resolved location, links followed,
  must be in or below the root.
- ``restriction_dominated_shallowly``: the lexical location must be in or
  below the root; a link found there may point anywhere.
"""

from __future__ import annotations

import logging
from typing import Callable

from .errors import PathNotInRootError, UnknownRestrictionsError
from .filesys import ConfirmedDir, FileSystem
from .resolve import lexical_abs, resolve_candidate
from .types import LoadRestrictions

logger = logging.getLogger(__name__)

Restrictor = Callable[[FileSystem, ConfirmedDir, str], str]


def _reject(path: str, root: ConfirmedDir, restrictions: LoadRestrictions) -> PathNotInRootError:
    logger.warning("Rejected '%s': not in or below '%s' (%s)", path, root, restrictions)
    return PathNotInRootError(path, root, restrictions)


def restriction_none(fs: FileSystem, root: ConfirmedDir, path: str) -> str:
    """Accept any path and return it unmodified."""
    return path


def restriction_root_only(fs: FileSystem, root: ConfirmedDir, path: str) -> str:
    """Require the resolved location of *path* to be in or below *root*.

    Backsteps are collapsed against the absolute root before the check, and
    links are followed to their real location, so neither can carry the
    path outside the root.

    Returns:
        The resolved path.

    Raises:
        PathNotInRootError: If the resolved directory is outside *root*.
        LoaderIOError: If the filesystem cannot be queried.
    """
    resolved = resolve_candidate(fs, root, path)
    if not resolved.dir.has_prefix(root):
        raise _reject(path, root, LoadRestrictions.ROOT_ONLY)
    return resolved.join()


def restriction_dominated_shallowly(fs: FileSystem, root: ConfirmedDir, path: str) -> str:
    """Require the lexical location of *path* to be in or below *root*.

    Only the placement is confined: a link located under the root resolves
    to its real target even when that target lies elsewhere. Backsteps are
    collapsed before the check, so ``<root>/a/../../x/link`` is rejected
    although it starts with the root.

    Returns:
        The resolved path, links followed.

    Raises:
        PathNotInRootError: If the collapsed path is outside *root*.
        LoaderIOError: If the filesystem cannot be queried.
    """
    if not ConfirmedDir(lexical_abs(root, path)).has_prefix(root):
        raise _reject(path, root, LoadRestrictions.DOMINATED_SHALLOWLY)
    return resolve_candidate(fs, root, path).join()


_RESTRICTORS: dict[LoadRestrictions, Restrictor] = {
    LoadRestrictions.ROOT_ONLY: restriction_root_only,
    LoadRestrictions.DOMINATED_SHALLOWLY: restriction_dominated_shallowly,
    LoadRestrictions.NONE: restriction_none,
}


def restriction_for(restrictions: LoadRestrictions | str) -> Restrictor:
    """Return the restriction function for *restrictions*.

    Strings are accepted in any spelling :meth:`LoadRestrictions.parse` knows.

    Raises:
        UnknownRestrictionsError: For ``LoadRestrictions.UNKNOWN``.
        ValueError: If a string names no restriction.
    """
    restrictions = LoadRestrictions.coerce(restrictions)
    if restrictions is LoadRestrictions.UNKNOWN:
        raise UnknownRestrictionsError()
    return _RESTRICTORS[restrictions]
