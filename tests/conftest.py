"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
import logging
import os
import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from pin_deps.structs import (  # noqa: E402
    Descriptor,
    Locator,
    Package,
    ResolvedGraph,
    parse_ident,
)

ProjectFactory = Callable[..., Path]


def write_manifest(directory: Path, manifest: dict[str, Any]) -> Path:
    """Write ``manifest`` as a two-space indented ``package.json``."""

    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Return a factory laying out a project in ``tmp_path``.

    The factory takes a mapping of relative workspace directory to manifest
    (``"."`` for the root) and the lockfile text, and returns the root.
    """

    def _factory(
        workspaces: dict[str, dict[str, Any]], lockfile: str | None = ""
    ) -> Path:
        for relative, manifest in workspaces.items():
            write_manifest(tmp_path / relative, manifest)
        if lockfile is not None:
            (tmp_path / "yarn.lock").write_text(
                textwrap.dedent(lockfile).lstrip(), encoding="utf-8"
            )
        return tmp_path

    return _factory


def make_package(name: str, reference: str, version: str | None) -> Package:
    return Package(
        locator=Locator(ident=parse_ident(name), reference=reference),
        version=version,
    )


def make_graph(*entries: tuple[str, str, str, str | None]) -> ResolvedGraph:
    """Build a graph from ``(name, declared range, reference, version)`` rows."""

    graph = ResolvedGraph()
    for name, range_, reference, version in entries:
        package = make_package(name, reference, version)
        graph.add(package, [Descriptor(ident=package.ident, range=range_)])
    return graph


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep ambient pin-deps variables from leaking into tests."""

    for name in (
        "PIN_DEPS_CONFIG_PATH",
        "PIN_DEPS_LOCKFILE",
        "PIN_DEPS_LOG_LEVEL",
        "NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    logging.getLogger("pin_deps").setLevel(logging.NOTSET)
