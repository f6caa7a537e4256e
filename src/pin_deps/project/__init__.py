"""Host adapters: workspaces, manifests and the resolved lockfile graph."""

from __future__ import annotations

from pin_deps.project.lockfile import (
    DEFAULT_LOCKFILE_NAME,
    LockfileError,
    load_resolved_graph,
    parse_lockfile,
)
from pin_deps.project.manifest import MANIFEST_FILENAME, Manifest, ManifestError
from pin_deps.project.workspaces import (
    Project,
    ProjectError,
    Workspace,
    find_project_root,
    load_project,
)

__all__ = [
    "DEFAULT_LOCKFILE_NAME",
    "LockfileError",
    "MANIFEST_FILENAME",
    "Manifest",
    "ManifestError",
    "Project",
    "ProjectError",
    "Workspace",
    "find_project_root",
    "load_project",
    "load_resolved_graph",
    "parse_lockfile",
]
