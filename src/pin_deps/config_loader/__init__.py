"""Public entry points for the :mod:`pin_deps` configuration loader."""

from __future__ import annotations

from pathlib import Path

from pin_deps.config_loader.models import (
    FilterSettings,
    OutputSettings,
    PinDepsConfig,
)
from pin_deps.config_loader.parsing import (
    apply_cli_overrides,
    apply_environment_overrides,
    apply_structured_overrides,
)
from pin_deps.config_loader.sources import ConfigError, load_structured_config
from pin_deps.settings import PinDepsSettings, get_settings

__all__ = [
    "ConfigError",
    "FilterSettings",
    "OutputSettings",
    "PinDepsConfig",
    "apply_cli_overrides",
    "load_config",
]


def load_config(
    path: str | None = None,
    *,
    settings: PinDepsSettings | None = None,
    root: Path | None = None,
) -> PinDepsConfig:
    """Load configuration from environment and optional file sources.

    Args:
        path: Optional explicit path to a configuration file. When omitted the
            loader inspects the environment and the default candidates in
            ``root``.
        settings: Optional pre-instantiated environment settings. When omitted
            :func:`pin_deps.settings.get_settings` is used.
        root: Project root searched for ``.pin-deps.{yml,yaml,json}``.

    Returns:
        Fully populated :class:`PinDepsConfig` instance.

    Raises:
        ConfigError: If an explicitly requested file does not exist.
    """

    env_settings = settings or get_settings()
    base = apply_environment_overrides(PinDepsConfig(), env_settings)
    structured = load_structured_config(path, env_settings, root=root)
    if structured is None:
        return base
    return apply_structured_overrides(base, structured)
