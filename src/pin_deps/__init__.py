"""pin-deps - pin workspace dependency ranges to their resolved versions."""

from __future__ import annotations

from importlib import import_module
from typing import Any, TYPE_CHECKING

__all__ = [
    "Filters",
    "PinnableDependencies",
    "Report",
    "load_project",
    "load_resolved_graph",
    "run_pin_deps",
]

if TYPE_CHECKING:
    from .engine import Filters, run_pin_deps
    from .project import load_project, load_resolved_graph
    from .reporting import Report
    from .schemas import PinnableDependencies


def __getattr__(name: str) -> Any:
    """Lazily import submodules so ``import pin_deps`` stays cheap."""

    module_map = {
        "Filters": "engine",
        "run_pin_deps": "engine",
        "load_project": "project",
        "load_resolved_graph": "project",
        "Report": "reporting",
        "PinnableDependencies": "schemas",
    }

    if name not in module_map:
        raise AttributeError(name)

    module = import_module(f".{module_map[name]}", __name__)
    return getattr(module, name)
