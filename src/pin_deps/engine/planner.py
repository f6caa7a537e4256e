"""Planning of pins across every selected workspace."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from pin_deps.engine.filters import Filters
from pin_deps.engine.index import ResolutionIndex
from pin_deps.engine.selector import Selection, select_candidate
from pin_deps.project import Workspace
from pin_deps.reporting import Report
from pin_deps.structs import (
    DependencyType,
    Descriptor,
    Ident,
    Package,
    render_reference,
)

__all__ = [
    "PinPlan",
    "PinPlanEntry",
    "WorkspacePlan",
    "gather_workspaces",
    "plan_workspace",
    "plan_workspaces",
]


@dataclass(frozen=True, slots=True)
class PinPlanEntry:
    """One planned rewrite of a declared range to an exact version."""

    ident: Ident
    descriptor: Descriptor
    dependency_type: DependencyType
    target: Package

    @property
    def version(self) -> str:
        return self.target.version or ""


@dataclass(slots=True)
class WorkspacePlan:
    """Pins planned for a single workspace.

    Attributes:
        workspace: The workspace the plan applies to.
        pins: Planned entries keyed by identity.
        reportable: Rendered ``name:range`` reference to target version.
        selections: Every selection made for the workspace, in order.
    """

    workspace: Workspace
    pins: dict[Ident, PinPlanEntry] = field(default_factory=dict)
    reportable: dict[str, str] = field(default_factory=dict)
    selections: list[tuple[Descriptor, Selection]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pins)


@dataclass(slots=True)
class PinPlan:
    """The per-workspace plans of one run."""

    workspaces: list[WorkspacePlan] = field(default_factory=list)

    def __iter__(self) -> Iterator[WorkspacePlan]:
        return iter(self.workspaces)

    def __len__(self) -> int:
        return sum(len(workspace_plan) for workspace_plan in self.workspaces)

    def for_workspace(self, workspace: Workspace) -> WorkspacePlan | None:
        for workspace_plan in self.workspaces:
            if workspace_plan.workspace is workspace:
                return workspace_plan
        return None

    def to_json(self) -> dict[str, dict[str, str]]:
        """Return ``{workspace cwd: {reference: version}}``."""

        return {
            str(workspace_plan.workspace.cwd): dict(workspace_plan.reportable)
            for workspace_plan in self.workspaces
        }


def gather_workspaces(
    workspaces: Iterable[Workspace], filters: Filters, report: Report
) -> list[Workspace]:
    """Restrict ``workspaces`` to those matching the workspace filter.

    Without workspace references every workspace is kept. A workspace matches
    when any reference equals its absolute cwd, relative cwd or name.
    """

    workspaces = list(workspaces)
    if not filters.workspaces:
        return workspaces

    selected: list[Workspace] = []
    for workspace in workspaces:
        possible_refs = workspace.references
        if any(ref in possible_refs for ref in filters.workspaces):
            report.warning(
                f"{report.green('✓')} Including workspace "
                f"{workspace.display_name} at {workspace.cwd}"
            )
            selected.append(workspace)
        else:
            refs = " or ".join(f"'{ref}'" for ref in possible_refs)
            report.verbose_warning(
                "gatherWorkspaces",
                f"{report.yellow('x')} Excluding workspace "
                f"{workspace.display_name}, no match for {refs}",
            )
    return selected


def _plan_entry(
    workspace_plan: WorkspacePlan,
    descriptor: Descriptor,
    dependency_type: DependencyType,
    index: ResolutionIndex,
    filters: Filters,
    report: Report,
) -> None:
    workspace = workspace_plan.workspace
    selection = select_candidate(
        descriptor,
        index,
        filters,
        report=report,
        workspace_label=str(workspace.cwd),
    )
    workspace_plan.selections.append((descriptor, selection))
    if not selection.should_pin or selection.target is None:
        return

    workspace_plan.pins[descriptor.ident] = PinPlanEntry(
        ident=descriptor.ident,
        descriptor=descriptor,
        dependency_type=dependency_type,
        target=selection.target,
    )
    workspace_plan.reportable[render_reference(descriptor)] = (
        selection.target.version or ""
    )


def plan_workspace(
    workspace: Workspace,
    index: ResolutionIndex,
    filters: Filters,
    report: Report,
) -> WorkspacePlan:
    """Plan the pins of a single workspace.

    Regular dependencies are visited first (unless only dev dependencies are
    requested), then dev dependencies (unless they are ignored). A dev
    dependency that is also a regular dependency is reported as ambiguous;
    when regular dependencies are part of the run the regular entry decides
    and the dev entry is left alone.
    """

    manifest = workspace.manifest
    workspace_plan = WorkspacePlan(workspace=workspace)

    if filters.include_regular:
        for descriptor in manifest.dependencies.values():
            _plan_entry(
                workspace_plan,
                descriptor,
                DependencyType.REGULAR,
                index,
                filters,
                report,
            )

    if filters.include_dev:
        for ident, descriptor in manifest.dev_dependencies.items():
            if ident in manifest.dependencies:
                report.warning(
                    "Possible package.json conflict between devDependencies "
                    f"and dependencies in {ident.key} at {manifest.path}"
                )
                if filters.include_regular:
                    continue
            _plan_entry(
                workspace_plan,
                descriptor,
                DependencyType.DEV,
                index,
                filters,
                report,
            )

    return workspace_plan


def plan_workspaces(
    workspaces: Iterable[Workspace],
    index: ResolutionIndex,
    filters: Filters,
    report: Report,
) -> PinPlan:
    """Plan the pins of every workspace in ``workspaces``."""

    return PinPlan(
        workspaces=[
            plan_workspace(workspace, index, filters, report)
            for workspace in workspaces
        ]
    )
