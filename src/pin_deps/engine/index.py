"""Index of resolved candidates grouped by logical dependency identity."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from pin_deps.structs import Ident, Locator, Package, ResolvedGraph

__all__ = ["ResolutionIndex", "ResolutionIntegrityError", "build_resolution_index"]

LOGGER = logging.getLogger(__name__)


class ResolutionIntegrityError(RuntimeError):
    """Raised when a resolution points at a locator with no package record."""


@dataclass(frozen=True, slots=True)
class ResolutionIndex:
    """Read-only mapping of identity to the packages it resolved to."""

    locators_by_ident: Mapping[Ident, frozenset[Locator]]
    packages: Mapping[Locator, Package] = field(repr=False)

    def locators_for(self, ident: Ident) -> frozenset[Locator]:
        return self.locators_by_ident.get(ident, frozenset())

    def candidates_for(self, ident: Ident) -> list[Package]:
        """Return the distinct resolved packages observed for ``ident``.

        The list is ordered by locator so callers see a stable sequence.
        """

        locators = sorted(self.locators_for(ident), key=str)
        return [self.packages[locator] for locator in locators]


def _lookup(graph: ResolvedGraph, locator: Locator, source: str) -> Package:
    package = graph.packages.get(locator)
    if package is None:
        raise ResolutionIntegrityError(
            f"Can't find package for locator '{locator}' (resolved from {source})"
        )
    return package


def build_resolution_index(graph: ResolvedGraph) -> ResolutionIndex:
    """Group every resolution of ``graph`` by the identity of its descriptor.

    Virtual locators are replaced by the shared instance they specialise
    before indexing, so peer-dependency fan-out does not multiply candidates.

    Args:
        graph: Fully resolved dependency graph.

    Returns:
        The populated :class:`ResolutionIndex`.

    Raises:
        ResolutionIntegrityError: If a resolution, or the devirtualized form of
            a virtual resolution, has no package record. This means the graph
            was not fully resolved and nothing downstream can be trusted.
    """

    grouped: dict[Ident, set[Locator]] = {}
    packages: dict[Locator, Package] = {}

    for descriptor, locator in graph.resolutions.items():
        package = _lookup(graph, locator, str(descriptor))
        if package.locator.is_virtual:
            try:
                source_locator = package.locator.devirtualize()
            except ValueError as exc:
                raise ResolutionIntegrityError(str(exc)) from exc
            package = _lookup(graph, source_locator, str(locator))

        packages[package.locator] = package
        grouped.setdefault(descriptor.ident, set()).add(package.locator)

    LOGGER.debug(
        "Indexed %d resolutions into %d identities",
        len(graph.resolutions),
        len(grouped),
    )
    return ResolutionIndex(
        locators_by_ident={ident: frozenset(locs) for ident, locs in grouped.items()},
        packages=packages,
    )
