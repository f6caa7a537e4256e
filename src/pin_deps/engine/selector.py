"""Selection of the exact version a declared dependency should be pinned to."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations

import semantic_version

from pin_deps.engine.filters import Filters
from pin_deps.engine.index import ResolutionIndex
from pin_deps.reporting import Report
from pin_deps.structs import Descriptor, Package, render_reference
from pin_deps.versioning import needs_pin, parse_version, satisfies

__all__ = [
    "Outcome",
    "Selection",
    "find_duplicates",
    "rank_candidates",
    "select_candidate",
]

_LOWEST = semantic_version.Version("0.0.0")


class Outcome(str, Enum):
    """Result category of a candidate selection."""

    PIN = "pin"
    SKIPPED = "skipped"
    OMITTED = "omitted"
    MISSING = "missing"
    UNSATISFIED = "unsatisfied"
    ALREADY_PINNED = "already_pinned"


@dataclass(frozen=True, slots=True)
class Selection:
    """Outcome of selecting a pin target for one dependency entry.

    Attributes:
        outcome: What the selector decided.
        target: The chosen package for ``PIN`` and ``ALREADY_PINNED``.
        explicitly_included: Whether an ``also``/``only`` filter matched.
        duplicates: Pairs of candidates sharing a version under distinct
            locators.
    """

    outcome: Outcome
    target: Package | None = None
    explicitly_included: bool = False
    duplicates: tuple[tuple[Package, Package], ...] = field(default=())

    @property
    def should_pin(self) -> bool:
        return self.outcome is Outcome.PIN


def _version_key(package: Package) -> tuple[bool, semantic_version.Version]:
    parsed = parse_version(package.version) if package.version else None
    return (parsed is not None, parsed or _LOWEST)


def rank_candidates(
    candidates: list[Package], range_: str, *, explicitly_included: bool
) -> list[Package]:
    """Order the usable candidates from best to worst.

    Candidates without a version are dropped. Unless ``explicitly_included``
    the remaining ones must satisfy ``range_``. The result is sorted by
    descending version, ties keeping ascending locator order.
    """

    usable = [candidate for candidate in candidates if candidate.version]
    if not explicitly_included:
        usable = [
            candidate
            for candidate in usable
            if satisfies(candidate.version or "", range_)
        ]
    by_locator = sorted(usable, key=lambda candidate: str(candidate.locator))
    return sorted(by_locator, key=_version_key, reverse=True)


def find_duplicates(candidates: list[Package]) -> list[tuple[Package, Package]]:
    """Return every pair sharing a version while differing by locator."""

    # Quadratic, candidate sets hold the resolutions of a single package name.
    return [
        (first, second)
        for first, second in combinations(candidates, 2)
        if first.version == second.version and first.locator != second.locator
    ]


def select_candidate(
    descriptor: Descriptor,
    index: ResolutionIndex,
    filters: Filters,
    *,
    report: Report,
    workspace_label: str,
) -> Selection:
    """Decide whether ``descriptor`` should be pinned and to which package.

    Args:
        descriptor: Dependency entry as declared in the workspace manifest.
        index: Resolution index for the whole project.
        filters: Run filters.
        report: Diagnostic channel.
        workspace_label: Workspace identifier used in messages.

    Returns:
        The :class:`Selection`; only ``Outcome.PIN`` yields a plan entry.
    """

    reference = render_reference(descriptor)
    explicitly_included = filters.is_explicitly_included(descriptor)

    if not needs_pin(descriptor.range):
        if not explicitly_included:
            report.verbose_warning(workspace_label, f"Skip: {reference}")
            return Selection(Outcome.SKIPPED)
        report.verbose_info(workspace_label, f"Include: {reference}")

    if not filters.is_selected(descriptor):
        report.verbose_warning(workspace_label, f"Omit: {reference}")
        return Selection(Outcome.OMITTED, explicitly_included=explicitly_included)

    candidates = index.candidates_for(descriptor.ident)
    duplicates: list[tuple[Package, Package]] = []

    if not candidates:
        report.warning(
            f"Missing locator: {reference}, in workspace {workspace_label}"
        )
        return Selection(Outcome.MISSING, explicitly_included=explicitly_included)

    if len(candidates) == 1:
        target: Package | None = candidates[0] if candidates[0].version else None
    else:
        ranked = rank_candidates(
            candidates, descriptor.range, explicitly_included=explicitly_included
        )
        if len(ranked) > 1:
            duplicates = find_duplicates(ranked)
            for first, second in duplicates:
                report.warning_once(
                    f"Possible duplicate: {reference} resolves to both "
                    f"{first.locator} and {second.locator} ({first.version}) "
                    f"in workspace {workspace_label}"
                )
        target = ranked[0] if ranked else None

    if target is None or target.version is None:
        report.warning(
            f"No satisfying candidate: {reference} has {len(candidates)} "
            f"resolution(s) in workspace {workspace_label}"
        )
        return Selection(
            Outcome.UNSATISFIED,
            explicitly_included=explicitly_included,
            duplicates=tuple(duplicates),
        )

    if target.version == descriptor.range:
        if explicitly_included:
            report.info(f"{report.yellow('-')} Already pinned: {reference}")
        else:
            report.verbose_warning(
                workspace_label, f"already pinned {reference} to {target.version}"
            )
        return Selection(
            Outcome.ALREADY_PINNED,
            target=target,
            explicitly_included=explicitly_included,
            duplicates=tuple(duplicates),
        )

    report.verbose_info(
        workspace_label,
        f"will pin {reference} to {target.version} in {workspace_label}",
    )
    return Selection(
        Outcome.PIN,
        target=target,
        explicitly_included=explicitly_included,
        duplicates=tuple(duplicates),
    )
