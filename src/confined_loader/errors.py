"""Structured error handling: loader exceptions, error categories and the error model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .types import LoadRestrictions


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics."""

    PATH_NOT_IN_ROOT = "PATH_NOT_IN_ROOT"
    ROOT_NOT_DIR = "ROOT_NOT_DIR"
    RESTRICTIONS_UNKNOWN = "RESTRICTIONS_UNKNOWN"
    LOADER_CYCLE = "LOADER_CYCLE"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    IO_ERROR = "IO_ERROR"
    UNKNOWN = "UNKNOWN"


class LoaderError(Exception):
    """Base class for everything the loader raises on purpose."""


class PathNotInRootError(LoaderError):
    """Raised when a referenced path lies outside the permitted root."""

    def __init__(self, path: str, root: str, restrictions: LoadRestrictions) -> None:
        self.path = path
        self.root = root
        self.restrictions = restrictions
        super().__init__(
            f"security; file '{path}' is not in or below '{root}' ({restrictions})"
        )


class RootNotDirError(LoaderError):
    """Raised when a loader root is not an existing directory."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"must build at directory: '{path}'")


class UnknownRestrictionsError(LoaderError, ValueError):
    """Raised when a load operation is configured without a restriction."""

    def __init__(self) -> None:
        super().__init__(
            f"{LoadRestrictions.UNKNOWN} is not a valid load restriction; "
            "choose RootOnly, DominatedShallowly or None"
        )


class LoaderCycleError(LoaderError):
    """Raised when a child loader would re-enter one of its ancestors."""

    def __init__(self, root: str, visited: str) -> None:
        self.root = root
        self.visited = visited
        super().__init__(
            f"cycle detected: candidate root '{root}' contains visited root '{visited}'"
        )


class LoaderIOError(LoaderError):
    """Raised when the filesystem cannot be queried or read.

    The original :class:`OSError` is kept as ``__cause__`` and its message
    is surfaced verbatim.
    """

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class LoadErrorModel(BaseModel):
    """Structured error returned to callers that report rather than raise."""

    error: str
    category: str
    hint: str
    retryable: bool = False
    path: str | None = None
    root: str | None = None
    restrictions: str | None = None


def categorize_error(error: Exception) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint."""
    if isinstance(error, PathNotInRootError):
        return (
            ErrorCategory.PATH_NOT_IN_ROOT,
            "Reference escapes the configuration directory; move the file under it "
            "or relax load restrictions",
        )
    if isinstance(error, RootNotDirError):
        return (
            ErrorCategory.ROOT_NOT_DIR,
            "Loader root must be an existing directory",
        )
    if isinstance(error, UnknownRestrictionsError):
        return (
            ErrorCategory.RESTRICTIONS_UNKNOWN,
            "Set CONFINED_LOADER_RESTRICTIONS to RootOnly, DominatedShallowly or None",
        )
    if isinstance(error, LoaderCycleError):
        return (
            ErrorCategory.LOADER_CYCLE,
            "A configuration directory refers back to one of its ancestors",
        )

    cause = error.cause if isinstance(error, LoaderIOError) else error
    if isinstance(cause, FileNotFoundError):
        return (
            ErrorCategory.FILE_NOT_FOUND,
            "File not found; check the path",
        )
    if isinstance(cause, PermissionError):
        return (
            ErrorCategory.PERMISSION_DENIED,
            "Filesystem denied access; check file permissions",
        )
    if isinstance(cause, OSError):
        return (ErrorCategory.IO_ERROR, str(cause))

    return (ErrorCategory.UNKNOWN, str(error))


def make_load_error(error: Exception) -> dict:
    """Create a serialisable LoadErrorModel dict from an exception."""
    cat, hint = categorize_error(error)
    restrictions = getattr(error, "restrictions", None)
    return LoadErrorModel(
        error=str(error),
        category=cat.value,
        hint=hint,
        path=getattr(error, "path", None),
        root=getattr(error, "root", None),
        restrictions=str(restrictions) if restrictions is not None else None,
    ).model_dump(mode="json")
