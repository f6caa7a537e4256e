"""Run-scoped inclusion and exclusion filters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from pin_deps.matcher import matches_any
from pin_deps.structs import Descriptor

__all__ = ["DevMode", "Filters"]

DevMode = Literal["include", "only", "ignore"]


@dataclass(frozen=True, slots=True)
class Filters:
    """Immutable filter set built once from configuration and CLI input.

    Attributes:
        only: References restricting the run to exactly these dependencies.
        also: References forced into the run even when they would be skipped.
        workspaces: Workspace references (cwd, relative cwd or name).
        dev_mode: ``include`` pins both sections, ``only`` pins only
            devDependencies, ``ignore`` skips devDependencies.
    """

    only: tuple[str, ...] = ()
    also: tuple[str, ...] = ()
    workspaces: tuple[str, ...] = ()
    dev_mode: DevMode = "include"

    @classmethod
    def from_flags(
        cls,
        *,
        only: Iterable[str] = (),
        also: Iterable[str] = (),
        workspaces: Iterable[str] = (),
        only_dev: bool = False,
        ignore_dev: bool = False,
    ) -> Filters:
        """Build filters from command-line style flags.

        ``only_dev`` takes precedence when both dev flags are set.
        """

        dev_mode: DevMode = "include"
        if only_dev:
            dev_mode = "only"
        elif ignore_dev:
            dev_mode = "ignore"
        return cls(
            only=tuple(only),
            also=tuple(also),
            workspaces=tuple(workspaces),
            dev_mode=dev_mode,
        )

    @property
    def include_regular(self) -> bool:
        return self.dev_mode != "only"

    @property
    def include_dev(self) -> bool:
        return self.dev_mode != "ignore"

    def is_explicitly_included(self, descriptor: Descriptor) -> bool:
        """Return ``True`` when an ``also`` or ``only`` reference matches."""

        return matches_any(self.also, descriptor) or matches_any(
            self.only, descriptor
        )

    def is_selected(self, descriptor: Descriptor) -> bool:
        """Return ``False`` when ``only`` is configured and none matches."""

        if not self.only:
            return True
        return matches_any(self.only, descriptor)
