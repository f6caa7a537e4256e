"""Yarn Berry lockfile reader producing a :class:`ResolvedGraph`.

Berry lockfiles are YAML documents. Every top-level key except
``__metadata`` lists one or more comma-separated descriptors that resolved to
the entry's ``resolution`` locator::

    "lodash@npm:^4.17.20, lodash@npm:^4.17.21":
      version: 4.17.21
      resolution: "lodash@npm:4.17.21"
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import yaml

from pin_deps.structs import (
    Package,
    ResolvedGraph,
    parse_descriptor,
    parse_locator,
)

__all__ = [
    "DEFAULT_LOCKFILE_NAME",
    "LockfileError",
    "load_resolved_graph",
    "parse_lockfile",
]

logger = logging.getLogger(__name__)

DEFAULT_LOCKFILE_NAME = "yarn.lock"
_METADATA_KEY = "__metadata"


class LockfileError(RuntimeError):
    """Raised when the lockfile is missing or cannot be interpreted."""


def parse_lockfile(
    data: Mapping[object, object], *, source: str = "<lockfile>"
) -> ResolvedGraph:
    """Build a :class:`ResolvedGraph` from a parsed lockfile mapping.

    Args:
        data: Mapping produced by the YAML parser.
        source: Label used in error messages.

    Raises:
        LockfileError: If an entry is not a mapping, lacks a ``resolution`` or
            carries unparsable descriptors.
    """

    graph = ResolvedGraph()
    for key, entry in data.items():
        if key == _METADATA_KEY:
            continue
        if not isinstance(key, str) or not isinstance(entry, Mapping):
            raise LockfileError(f"Malformed entry {key!r} in {source}")

        resolution = entry.get("resolution")
        if not isinstance(resolution, str):
            raise LockfileError(f"Entry {key!r} in {source} has no resolution")

        version = entry.get("version")
        try:
            locator = parse_locator(resolution)
            descriptors = [
                parse_descriptor(part) for part in key.split(",") if part.strip()
            ]
        except ValueError as exc:
            raise LockfileError(f"Invalid entry {key!r} in {source}: {exc}") from exc

        graph.add(
            Package(locator=locator, version=None if version is None else str(version)),
            descriptors,
        )

    logger.debug(
        "Loaded %d packages and %d resolutions from %s",
        len(graph.packages),
        len(graph.resolutions),
        source,
    )
    return graph


def load_resolved_graph(path: Path) -> ResolvedGraph:
    """Read the lockfile at ``path``.

    Raises:
        LockfileError: If the file is missing, unreadable or malformed.
    """

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise LockfileError(
            f"No lockfile found at {path}; run an install first"
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise LockfileError(f"Unable to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise LockfileError(f"Invalid lockfile {path}: {exc}") from exc

    if data is None:
        return ResolvedGraph()
    if not isinstance(data, Mapping):
        raise LockfileError(f"Lockfile {path} must contain a mapping")
    return parse_lockfile(data, source=str(path))
