"""Parsing and transformation helpers for :mod:`pin_deps.config_loader`."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace

from pin_deps.config_loader.models import PinDepsConfig
from pin_deps.settings import PinDepsSettings


def apply_environment_overrides(
    config: PinDepsConfig, settings: PinDepsSettings
) -> PinDepsConfig:
    """Apply environment-derived overrides to the configuration.

    Args:
        config: Base configuration instance.
        settings: Environment-derived settings.

    Returns:
        Configuration with environment overrides applied.
    """

    updated = replace(config, lockfile=settings.lockfile)
    if settings.no_color:
        updated = replace(updated, output=replace(updated.output, color=False))
    return updated


def apply_structured_overrides(
    config: PinDepsConfig, data: Mapping[str, object]
) -> PinDepsConfig:
    """Apply overrides sourced from structured configuration data.

    Args:
        config: Base configuration instance.
        data: Mapping parsed from configuration file.

    Returns:
        Configuration updated according to the provided mapping.
    """

    updated = config

    lockfile = _coerce_str(data.get("lockfile"))
    if lockfile is not None:
        updated = replace(updated, lockfile=lockfile)

    dry = _coerce_bool(data.get("dry"))
    if dry is not None:
        updated = replace(updated, dry=dry)

    filters_section = _expect_mapping(data.get("filters"))
    if filters_section is not None:
        updated = _apply_filters_section(updated, filters_section)

    output_section = _expect_mapping(data.get("output"))
    if output_section is not None:
        updated = _apply_output_section(updated, output_section)

    return updated


def apply_cli_overrides(
    config: PinDepsConfig,
    *,
    only: Iterable[str] = (),
    also: Iterable[str] = (),
    workspaces: Iterable[str] = (),
    only_dev: bool = False,
    ignore_dev: bool = False,
    verbose: bool = False,
    json_output: bool = False,
    no_color: bool = False,
    dry: bool = False,
    lockfile: str | None = None,
) -> PinDepsConfig:
    """Merge command-line arguments on top of ``config``.

    Repeatable references extend the configured ones. Boolean flags can only
    switch a feature on; ``no_color`` can only switch colour off.
    """

    filters = config.filters
    filters = replace(
        filters,
        only=_extend(filters.only, only),
        also=_extend(filters.also, also),
        workspaces=_extend(filters.workspaces, workspaces),
        only_dev=filters.only_dev or only_dev,
        ignore_dev=filters.ignore_dev or ignore_dev,
    )
    output = replace(
        config.output,
        verbose=config.output.verbose or verbose,
        json=config.output.json or json_output,
        color=config.output.color and not no_color,
    )
    return replace(
        config,
        filters=filters,
        output=output,
        dry=config.dry or dry,
        lockfile=lockfile or config.lockfile,
    )


def _extend(existing: tuple[str, ...], extra: Iterable[str]) -> tuple[str, ...]:
    merged = list(existing)
    for item in extra:
        if item not in merged:
            merged.append(item)
    return tuple(merged)


def _apply_filters_section(
    config: PinDepsConfig, section: Mapping[str, object]
) -> PinDepsConfig:
    """Apply dependency and workspace filters from a structured section.

    Args:
        config: Current configuration instance.
        section: Mapping describing the filters section from the file.

    Returns:
        Updated configuration instance.
    """

    filters = config.filters
    for key in ("only", "also", "workspaces"):
        values = _coerce_str_sequence(section.get(key))
        if values is not None:
            filters = replace(filters, **{key: values})
    for key in ("only_dev", "ignore_dev"):
        flag = _coerce_bool(section.get(key))
        if flag is not None:
            filters = replace(filters, **{key: flag})
    return replace(config, filters=filters)


def _apply_output_section(
    config: PinDepsConfig, section: Mapping[str, object]
) -> PinDepsConfig:
    output = config.output
    for key in ("verbose", "json", "color"):
        flag = _coerce_bool(section.get(key))
        if flag is not None:
            output = replace(output, **{key: flag})
    return replace(config, output=output)


def _coerce_bool(value: object) -> bool | None:
    """Parse a boolean from arbitrary input.

    Args:
        value: Raw value.

    Returns:
        Parsed boolean when conversion succeeds, otherwise ``None``.
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes"}:
            return True
        if lowered in {"false", "0", "no"}:
            return False
    if isinstance(value, (int, float)):
        if value == 0:
            return False
        if value == 1:
            return True
    return None


def _coerce_str(value: object) -> str | None:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _coerce_str_sequence(value: object) -> tuple[str, ...] | None:
    """Parse a tuple of strings from an arbitrary iterable.

    A single string is accepted as a one-element sequence.

    Args:
        value: Raw iterable value.

    Returns:
        Tuple of strings when conversion succeeds, otherwise ``None``.
    """

    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else None
    if not isinstance(value, Sequence) or isinstance(value, bytes):
        return None
    items: list[str] = []
    for element in value:
        if not isinstance(element, str):
            return None
        items.append(element)
    return tuple(items)


def _expect_mapping(value: object) -> Mapping[str, object] | None:
    """Return the value when it is a mapping with string keys.

    Args:
        value: Raw configuration value.

    Returns:
        Mapping with string keys suitable for further parsing, or ``None``.
    """

    if not isinstance(value, Mapping):
        return None
    if not all(isinstance(key, str) for key in value.keys()):
        return None
    return value
