"""npm-flavoured semver helpers built on :mod:`semantic_version`."""

from __future__ import annotations

import re
from functools import lru_cache

import semantic_version

__all__ = [
    "is_exact_version",
    "needs_pin",
    "parse_version",
    "satisfies",
    "valid_range",
]

# npm accepts a space between a comparator and its version; NpmSpec does not.
_COMPARATOR_GAP = re.compile(r"(<=|>=|<|>|=|~|\^)\s+")


@lru_cache(maxsize=1024)
def valid_range(range_: str) -> semantic_version.NpmSpec | None:
    """Return the parsed npm range, or ``None`` when ``range_`` is not one.

    Protocol references (anything containing ``:``) are never ranges, which
    rules out ``workspace:``, ``npm:`` aliases, ``patch:`` and URLs.
    """

    if ":" in range_:
        return None
    try:
        normalized = _COMPARATOR_GAP.sub(r"\1", range_.strip())
        return semantic_version.NpmSpec(normalized)
    except ValueError:
        return None


@lru_cache(maxsize=1024)
def parse_version(version: str) -> semantic_version.Version | None:
    """Parse a strict semver version, returning ``None`` when invalid."""

    try:
        return semantic_version.Version(version)
    except ValueError:
        return None


def is_exact_version(range_: str) -> bool:
    """Return ``True`` when ``range_`` is a plain exact version like ``1.2.3``."""

    return parse_version(range_) is not None


def needs_pin(range_: str) -> bool:
    """Return ``True`` when ``range_`` is a semver range that is not yet exact."""

    if is_exact_version(range_):
        return False
    return valid_range(range_) is not None


def satisfies(version: str, range_: str) -> bool:
    """Return ``True`` when ``version`` falls within the npm range ``range_``."""

    spec = valid_range(range_)
    parsed = parse_version(version)
    if spec is None or parsed is None:
        return False
    return spec.match(parsed)
