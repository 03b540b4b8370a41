"""Loader configuration via environment variables."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field, field_validator

from .types import LoadRestrictions

logger = logging.getLogger(__name__)

RESTRICTIONS_ENV = "CONFINED_LOADER_RESTRICTIONS"


class LoaderConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    load_restrictions: LoadRestrictions = Field(default=LoadRestrictions.ROOT_ONLY)

    @field_validator("load_restrictions", mode="before")
    @classmethod
    def parse_restrictions(cls, value: object) -> LoadRestrictions:
        restrictions = LoadRestrictions.coerce(value)
        if restrictions is LoadRestrictions.UNKNOWN:
            raise ValueError(f"{RESTRICTIONS_ENV} must not be Unknown")
        return restrictions

    @classmethod
    def from_env(cls) -> LoaderConfig:
        """Build config from environment variables."""
        raw = os.getenv(RESTRICTIONS_ENV, "").strip()
        return cls(load_restrictions=raw or LoadRestrictions.ROOT_ONLY)


_config: LoaderConfig | None = None


def get_config() -> LoaderConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/confined-loader/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        from .dotenv import load_dotenv

        injected = load_dotenv()
        if injected:
            logger.info(
                "Loaded %d var(s) from config: %s",
                len(injected),
                ", ".join(injected.keys()),
            )
        _config = LoaderConfig.from_env()
    return _config


def update_config(**overrides: object) -> LoaderConfig:
    """Patch the live config."""
    global _config
    cfg = get_config()
    data = cfg.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    _config = LoaderConfig(**data)
    return _config
