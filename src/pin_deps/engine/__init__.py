"""Pinning decision engine.

A run builds the resolution index once, restricts the project to the
selected workspaces, plans every pin and only then applies the plan, so a
fatal graph inconsistency aborts before any manifest is touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pin_deps.engine.applier import ApplyResult, apply_plan
from pin_deps.engine.filters import DevMode, Filters
from pin_deps.engine.index import (
    ResolutionIndex,
    ResolutionIntegrityError,
    build_resolution_index,
)
from pin_deps.engine.planner import (
    PinPlan,
    PinPlanEntry,
    WorkspacePlan,
    gather_workspaces,
    plan_workspaces,
)
from pin_deps.engine.selector import Outcome, Selection, select_candidate
from pin_deps.project import Project
from pin_deps.reporting import Report
from pin_deps.schemas import PINNABLE_DEPENDENCIES_NAME, PinnableDependencies
from pin_deps.structs import ResolvedGraph

__all__ = [
    "ApplyResult",
    "DevMode",
    "Filters",
    "Outcome",
    "PinPlan",
    "PinPlanEntry",
    "ResolutionIndex",
    "ResolutionIntegrityError",
    "RunResult",
    "Selection",
    "WorkspacePlan",
    "apply_plan",
    "build_resolution_index",
    "gather_workspaces",
    "plan_workspaces",
    "run_pin_deps",
    "select_candidate",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    """Plan and outcome of one engine run."""

    plan: PinPlan
    applied: ApplyResult


def run_pin_deps(
    project: Project,
    graph: ResolvedGraph,
    filters: Filters,
    *,
    dry_run: bool,
    report: Report,
) -> RunResult:
    """Pin the dependencies of ``project`` to the versions found in ``graph``.

    Args:
        project: Loaded project with every workspace manifest.
        graph: Resolved dependency graph read from the lockfile.
        filters: Run filters.
        dry_run: Plan and report without writing manifests.
        report: Diagnostic channel.

    Returns:
        The computed plan together with what was applied.

    Raises:
        ResolutionIntegrityError: If the graph is internally inconsistent.
    """

    index = build_resolution_index(graph)
    workspaces = gather_workspaces(project.workspaces, filters, report)
    plan = plan_workspaces(workspaces, index, filters, report)

    payload = PinnableDependencies(plan.to_json())
    report.json(PINNABLE_DEPENDENCIES_NAME, payload.model_dump(mode="json"))

    applied = apply_plan(plan, dry_run=dry_run, report=report)
    logger.debug(
        "Planned %d pins, applied %d (dry_run=%s)",
        len(plan),
        applied.pinned,
        dry_run,
    )
    return RunResult(plan=plan, applied=applied)
