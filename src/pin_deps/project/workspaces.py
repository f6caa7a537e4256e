"""Project and workspace discovery."""

from __future__ import annotations

import logging
import os
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from pin_deps.project.lockfile import DEFAULT_LOCKFILE_NAME
from pin_deps.project.manifest import MANIFEST_FILENAME, Manifest, ManifestError

__all__ = [
    "Project",
    "ProjectError",
    "Workspace",
    "find_project_root",
    "load_project",
]

logger = logging.getLogger(__name__)

_IGNORED_DIRECTORIES = frozenset({"node_modules", ".git", ".yarn"})


class ProjectError(RuntimeError):
    """Raised when no project can be located or a manifest is unusable."""


@dataclass(slots=True)
class Workspace:
    """A package unit of the project with its own manifest.

    Attributes:
        cwd: Absolute workspace directory.
        relative_cwd: Directory relative to the project root, ``"."`` for the
            root workspace.
        manifest: Parsed manifest.
    """

    cwd: Path
    relative_cwd: str
    manifest: Manifest = field(repr=False)

    @property
    def name(self) -> str | None:
        ident = self.manifest.name
        return ident.key if ident is not None else None

    @property
    def display_name(self) -> str:
        return self.name or self.relative_cwd

    @property
    def manifest_path(self) -> Path:
        return self.manifest.path

    @property
    def references(self) -> tuple[str, ...]:
        """Strings a workspace filter may use to designate this workspace."""

        candidates = (str(self.cwd), self.relative_cwd, self.name)
        return tuple(ref for ref in candidates if ref)

    def persist_manifest(self) -> None:
        self.manifest.persist()


@dataclass(slots=True)
class Project:
    """A root workspace plus every nested workspace it declares."""

    root: Path
    workspaces: list[Workspace]
    lockfile_path: Path

    @property
    def top_level_workspace(self) -> Workspace:
        return self.workspaces[0]


def find_project_root(
    cwd: Path, *, lockfile_name: str = DEFAULT_LOCKFILE_NAME
) -> Path:
    """Locate the project root for ``cwd``.

    The closest ancestor holding ``lockfile_name`` wins; without a lockfile
    the closest ancestor holding a manifest is used.

    Raises:
        ProjectError: If no ancestor contains a manifest.
    """

    start = cwd.resolve()
    nearest_manifest: Path | None = None
    for directory in (start, *start.parents):
        if not (directory / MANIFEST_FILENAME).is_file():
            continue
        if (directory / lockfile_name).is_file():
            return directory
        if nearest_manifest is None:
            nearest_manifest = directory
    if nearest_manifest is None:
        raise ProjectError(f"No {MANIFEST_FILENAME} found in {start} or its parents")
    return nearest_manifest


def _load_manifest(directory: Path) -> Manifest:
    try:
        return Manifest.load(directory / MANIFEST_FILENAME)
    except ManifestError as exc:
        raise ProjectError(str(exc)) from exc


def _expand_patterns(base: Path, patterns: tuple[str, ...]) -> list[Path]:
    """Resolve ``workspaces`` globs relative to ``base``.

    Patterns starting with ``!`` remove matches of earlier patterns.
    """

    included: set[Path] = set()
    excluded: set[Path] = set()
    for pattern in patterns:
        target = excluded if pattern.startswith("!") else included
        glob = pattern.lstrip("!").rstrip("/")
        if not glob:
            continue
        for match in base.glob(glob):
            if not match.is_dir():
                continue
            if _IGNORED_DIRECTORIES.intersection(match.relative_to(base).parts):
                continue
            if (match / MANIFEST_FILENAME).is_file():
                target.add(match.resolve())
    return sorted(included - excluded)


def load_project(
    cwd: Path, *, lockfile_name: str = DEFAULT_LOCKFILE_NAME
) -> Project:
    """Load the project containing ``cwd`` with all of its workspaces.

    Workspaces are discovered from the ``workspaces`` field of the root
    manifest and, recursively, of every nested workspace. The root workspace
    comes first, the others follow in discovery order.

    Raises:
        ProjectError: If no project is found or a manifest cannot be parsed.
    """

    root = find_project_root(cwd, lockfile_name=lockfile_name)
    workspaces: list[Workspace] = []
    seen: set[Path] = set()
    queue: deque[Path] = deque([root])

    while queue:
        directory = queue.popleft()
        if directory in seen:
            continue
        seen.add(directory)

        manifest = _load_manifest(directory)
        relative = Path(os.path.relpath(directory, root)).as_posix()
        workspaces.append(
            Workspace(cwd=directory, relative_cwd=relative, manifest=manifest)
        )
        queue.extend(_expand_patterns(directory, manifest.workspace_patterns))

    logger.debug("Loaded %d workspaces from %s", len(workspaces), root)
    return Project(
        root=root,
        workspaces=workspaces,
        lockfile_path=root / lockfile_name,
    )
