"""Configuration source utilities for :mod:`pin_deps.config_loader`."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import cast

import yaml

from pin_deps.settings import PinDepsSettings

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATES: tuple[str, ...] = (
    ".pin-deps.yml",
    ".pin-deps.yaml",
    ".pin-deps.json",
)


class ConfigError(RuntimeError):
    """Raised when an explicitly requested configuration file is missing."""


def load_structured_config(
    path: str | None, settings: PinDepsSettings, *, root: Path | None = None
) -> dict[str, object] | None:
    """Load configuration data from disk.

    An explicit ``path`` (or ``PIN_DEPS_CONFIG_PATH``) must exist. Files found
    through the default candidates in ``root`` are optional, and malformed
    files are ignored.

    Args:
        path: Explicit configuration path provided by the caller.
        settings: Environment-derived settings used for fallback discovery.
        root: Directory searched for the default candidates.

    Returns:
        A dictionary representation of the configuration file when discovered,
        otherwise ``None``.

    Raises:
        ConfigError: If an explicitly requested file does not exist.
    """

    explicit = path or settings.config_path
    candidates: Iterable[Path]
    if explicit:
        explicit_path = Path(explicit)
        if root is not None and not explicit_path.is_absolute():
            explicit_path = root / explicit_path
        if not explicit_path.is_file():
            raise ConfigError(f"Configuration file {explicit_path} does not exist")
        candidates = (explicit_path,)
    else:
        base = root if root is not None else Path.cwd()
        candidates = tuple(base / name for name in DEFAULT_CANDIDATES)

    for candidate in candidates:
        data = _load_config_file(candidate)
        if data is not None:
            logger.debug("Loaded configuration from %s", candidate)
            return data
    return None


def _load_config_file(path: Path) -> dict[str, object] | None:
    """Load a configuration file based on suffix heuristics.

    Args:
        path: Candidate configuration path.

    Returns:
        Parsed mapping when the file exists and is readable, otherwise
        ``None``.
    """

    if not path.exists():
        return None
    suffix = path.suffix.lower()
    if suffix == ".json":
        return _load_json(path)
    return _load_yaml(path)


def _load_json(path: Path) -> dict[str, object] | None:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed configuration file %s", path)
        return None
    return _normalize_mapping(data)


def _load_yaml(path: Path) -> dict[str, object] | None:
    """Load YAML configuration from ``path``.

    Args:
        path: YAML file path.

    Returns:
        Parsed mapping when the file is valid YAML, otherwise ``None``.
    """

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, UnicodeDecodeError):
        return None
    except yaml.YAMLError:
        logger.warning("Ignoring malformed configuration file %s", path)
        return None
    return _normalize_mapping(data)


def _normalize_mapping(value: object) -> dict[str, object] | None:
    """Normalize potential mapping values to ``dict[str, object]``.

    Args:
        value: Arbitrary Python object produced by JSON/YAML parsing.

    Returns:
        Mapping restricted to string keys when possible, otherwise ``None``.
    """

    if not isinstance(value, dict):
        return None
    value_dict = cast(dict[object, object], value)
    normalized: dict[str, object] = {}
    for key_obj, item in value_dict.items():
        if not isinstance(key_obj, str):
            continue
        normalized[key_obj] = item
    return normalized
