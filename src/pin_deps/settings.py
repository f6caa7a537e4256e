"""Environment-backed settings primitives for :mod:`pin_deps`."""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pin_deps.project.lockfile import DEFAULT_LOCKFILE_NAME

__all__ = ["PinDepsSettings", "get_settings"]


class PinDepsSettings(BaseSettings):
    """Expose environment-derived configuration knobs for pin-deps.

    Every environment lookup of the tool goes through this class. Unset
    variables fall back to the inline defaults.

    Attributes:
        config_path: Explicit path to a pin-deps configuration file.
        lockfile: Lockfile name, relative to the project root.
        no_color: Disable ANSI colour in text output when set to any
            non-empty value.
        log_level: Level applied to the ``pin_deps`` logger hierarchy.
    """

    config_path: str | None = Field(default=None, alias="PIN_DEPS_CONFIG_PATH")
    lockfile: str = Field(default=DEFAULT_LOCKFILE_NAME, alias="PIN_DEPS_LOCKFILE")
    no_color: bool = Field(default=False, alias="NO_COLOR")
    log_level: str = Field(default="INFO", alias="PIN_DEPS_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    @field_validator("no_color", mode="before")
    @classmethod
    def _parse_presence_flag(cls, value: object) -> bool:
        """Treat any non-empty value as set, following the NO_COLOR convention."""

        if value is None:
            return False
        if isinstance(value, bool):
            return value
        return str(value).strip() != ""

    @field_validator("lockfile", mode="before")
    @classmethod
    def _default_blank_lockfile(cls, value: object) -> str:
        if value is None or not str(value).strip():
            return DEFAULT_LOCKFILE_NAME
        return str(value).strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        """Return a known level name, falling back to ``INFO``.

        Args:
            value: Raw environment value.

        Returns:
            Upper-cased level name understood by :mod:`logging`.
        """

        if not isinstance(value, str):
            return "INFO"
        candidate = value.strip().upper()
        if isinstance(logging.getLevelName(candidate), int):
            return candidate
        return "INFO"

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level)


def get_settings() -> PinDepsSettings:
    """Return a :class:`PinDepsSettings` instance.

    Returns:
        Settings parsed from environment variables.
    """

    return PinDepsSettings()
