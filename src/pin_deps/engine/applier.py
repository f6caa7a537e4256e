"""Application of a :class:`PinPlan` to workspace manifests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pin_deps.engine.planner import PinPlan, PinPlanEntry, WorkspacePlan
from pin_deps.project import Manifest
from pin_deps.reporting import Report
from pin_deps.structs import DependencyType, Descriptor

__all__ = ["ApplyResult", "WorkspaceResult", "apply_plan", "apply_workspace_plan"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WorkspaceResult:
    """What happened to one workspace manifest."""

    manifest_path: Path
    pinned: int
    saved: bool


@dataclass(slots=True)
class ApplyResult:
    """Aggregate outcome of :func:`apply_plan`."""

    dry_run: bool = False
    workspaces: list[WorkspaceResult] = field(default_factory=list)

    @property
    def pinned(self) -> int:
        return sum(result.pinned for result in self.workspaces)

    @property
    def saved(self) -> list[Path]:
        return [result.manifest_path for result in self.workspaces if result.saved]


def _target_section(manifest: Manifest, entry: PinPlanEntry) -> DependencyType:
    """Return the manifest section an entry should be written to.

    The section it was planned from wins; an entry no longer present there
    falls back to whichever section still declares it.
    """

    if entry.ident in manifest.section(entry.dependency_type):
        return entry.dependency_type
    if entry.ident in manifest.dependencies:
        return DependencyType.REGULAR
    return DependencyType.DEV


def _render_change(
    report: Report, before: Descriptor, after: Descriptor, path: Path
) -> str:
    old = report.reference(before, range_color="yellow")
    new = report.reference(after, range_color="green")
    return f"→ Pin {old} → {new} ({path})"


def apply_workspace_plan(
    workspace_plan: WorkspacePlan, *, dry_run: bool, report: Report
) -> WorkspaceResult:
    """Rewrite the manifest of one workspace and persist it unless dry.

    Returns:
        The number of changed entries and whether the file was written.
    """

    manifest = workspace_plan.workspace.manifest
    pinned = 0
    for entry in workspace_plan.pins.values():
        section = _target_section(manifest, entry)
        entries = manifest.section(section)
        current = entries.get(entry.ident)
        if current is None or current.range == entry.version:
            continue
        updated = manifest.set_range(entry.ident, entry.version, section)
        report.info(_render_change(report, current, updated, manifest.path))
        pinned += 1

    saved = False
    if pinned and not dry_run:
        workspace_plan.workspace.persist_manifest()
        saved = True

    suffix = "saved[DRY RUN]" if dry_run else "saved"
    report.info(
        f"{report.green('✓')} Pinned {pinned} and {suffix} to {manifest.path}"
    )
    return WorkspaceResult(manifest_path=manifest.path, pinned=pinned, saved=saved)


def apply_plan(plan: PinPlan, *, dry_run: bool, report: Report) -> ApplyResult:
    """Apply every non-empty workspace plan in order.

    Persistence is sequential; a failure while writing one manifest leaves
    the manifests written before it in place and propagates.
    """

    result = ApplyResult(dry_run=dry_run)
    for workspace_plan in plan:
        if not workspace_plan.pins:
            continue
        result.workspaces.append(
            apply_workspace_plan(workspace_plan, dry_run=dry_run, report=report)
        )
    logger.debug(
        "Applied %d pins across %d workspaces (dry_run=%s)",
        result.pinned,
        len(result.workspaces),
        dry_run,
    )
    return result
