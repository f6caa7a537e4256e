"""Typed configuration dataclasses for :mod:`pin_deps.config_loader`."""

from __future__ import annotations

from dataclasses import dataclass, field

from pin_deps.engine.filters import Filters
from pin_deps.project.lockfile import DEFAULT_LOCKFILE_NAME


@dataclass(slots=True)
class FilterSettings:
    """Dependency and workspace filters read from configuration.

    Attributes:
        only: References restricting the run to exactly these dependencies.
        also: References forced into the run.
        workspaces: Workspace references to restrict the run to.
        only_dev: Pin devDependencies only.
        ignore_dev: Leave devDependencies alone.
    """

    only: tuple[str, ...] = ()
    also: tuple[str, ...] = ()
    workspaces: tuple[str, ...] = ()
    only_dev: bool = False
    ignore_dev: bool = False

    def to_filters(self) -> Filters:
        return Filters.from_flags(
            only=self.only,
            also=self.also,
            workspaces=self.workspaces,
            only_dev=self.only_dev,
            ignore_dev=self.ignore_dev,
        )


@dataclass(slots=True)
class OutputSettings:
    """Controls for the reporting channel."""

    verbose: bool = False
    json: bool = False
    color: bool = True


@dataclass(slots=True)
class PinDepsConfig:
    """Strongly typed configuration container for a pin-deps run."""

    filters: FilterSettings = field(default_factory=FilterSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    lockfile: str = DEFAULT_LOCKFILE_NAME
    dry: bool = False
