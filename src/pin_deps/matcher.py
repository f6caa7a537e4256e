"""Literal matching of ``name:range`` filter references against dependencies."""

from __future__ import annotations

from collections.abc import Iterable

from pin_deps.structs import Descriptor, render_reference

__all__ = ["matches_any", "references_package"]


def references_package(filter_ref: str, descriptor: Descriptor) -> bool:
    """Return ``True`` when ``filter_ref`` designates ``descriptor``.

    A filter matches when it equals the rendered reference of the dependency
    (``@scope/name:range``, ``scope/name:range`` or ``name:range``), or when it
    is a range-only filter (``:range`` or ``*:range``) whose range equals the
    declared range. Matching is literal and case-sensitive.

    Args:
        filter_ref: Reference given on the command line or in configuration.
        descriptor: Declared dependency to test.

    Returns:
        Whether the filter selects the dependency.
    """

    rendered = {render_reference(descriptor)}
    if descriptor.scope:
        rendered.add(render_reference(descriptor, scoped_prefix=""))
    if filter_ref in rendered:
        return True

    range_ = descriptor.range
    return filter_ref in (f":{range_}", f"*:{range_}")


def matches_any(filter_refs: Iterable[str], descriptor: Descriptor) -> bool:
    """Return ``True`` when any of ``filter_refs`` designates ``descriptor``."""

    return any(references_package(ref, descriptor) for ref in filter_refs)
