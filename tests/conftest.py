"""Shared test fixtures for confined-loader."""

from __future__ import annotations

import pytest

from confined_loader.filesys import ConfirmedDir, OnDiskFileSystem, confirm_dir


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/confined-loader/.env."""
    monkeypatch.setattr(
        "confined_loader.dotenv.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture(autouse=True)
def _clear_restrictions_env(monkeypatch):
    monkeypatch.delenv("CONFINED_LOADER_RESTRICTIONS", raising=False)


@pytest.fixture()
def clean_config():
    """Reset the config singleton between tests."""
    import confined_loader.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture()
def disk_fs() -> OnDiskFileSystem:
    return OnDiskFileSystem()


@pytest.fixture()
def disk_root(tmp_path, disk_fs) -> ConfirmedDir:
    """A confirmed, link-free temporary root directory on disk."""
    root = tmp_path / "root"
    root.mkdir()
    return confirm_dir(disk_fs, str(root))
