"""Read loader settings from ``~/.config/confined-loader/.env``.

Only variables that are missing or empty in the process environment are
taken from the file, so an exported setting always wins.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_ENV_PATH = Path.home() / ".config" / "confined-loader" / ".env"

_QUOTES = ('"', "'")


def _parse_line(line: str) -> tuple[str, str] | None:
    """Split one ``[export ]KEY=VALUE`` line; None for blanks, comments and junk."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    line = line.removeprefix("export ").lstrip()
    key, sep, value = line.partition("=")
    key, value = key.strip(), value.strip()
    if not sep or not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        value = value[1:-1]
    return key, value


def read_env_file(path: Path) -> dict[str, str]:
    """Return the settings in *path*, or an empty dict if it is not a file."""
    if not path.is_file():
        return {}
    pairs = (_parse_line(line) for line in path.read_text().splitlines())
    return dict(pair for pair in pairs if pair is not None)


def load_dotenv(path: Path | None = None) -> dict[str, str]:
    """Copy settings from *path* into ``os.environ`` where unset or empty.

    Args:
        path: Env file to read. Defaults to :data:`DEFAULT_ENV_PATH`.

    Returns:
        The variables that were set.
    """
    values = read_env_file(DEFAULT_ENV_PATH if path is None else path)
    injected = {k: v for k, v in values.items() if not os.environ.get(k, "").strip()}
    os.environ.update(injected)
    return injected
