"""Tests for the resolution index."""

from __future__ import annotations

import logging

import pytest

from conftest import make_graph, make_package
from pin_deps.engine.index import ResolutionIntegrityError, build_resolution_index
from pin_deps.structs import Descriptor, Locator, ResolvedGraph, parse_ident


def test_groups_resolutions_by_identity() -> None:
    graph = make_graph(
        ("lib", "npm:^2.0.0", "npm:2.3.0", "2.3.0"),
        ("lib", "npm:~2.1.0", "npm:2.1.0", "2.1.0"),
        ("other", "npm:^1.0.0", "npm:1.0.0", "1.0.0"),
    )

    index = build_resolution_index(graph)

    versions = [package.version for package in index.candidates_for(parse_ident("lib"))]
    assert versions == ["2.1.0", "2.3.0"]
    assert len(index.locators_for(parse_ident("other"))) == 1
    assert index.candidates_for(parse_ident("missing")) == []


def test_descriptors_sharing_a_locator_yield_one_candidate() -> None:
    graph = ResolvedGraph()
    package = make_package("lodash", "npm:4.17.21", "4.17.21")
    graph.add(
        package,
        [
            Descriptor(ident=package.ident, range="npm:^4.17.0"),
            Descriptor(ident=package.ident, range="npm:^4.17.20"),
        ],
    )

    index = build_resolution_index(graph)

    assert index.candidates_for(package.ident) == [package]


def test_virtual_locators_are_devirtualized() -> None:
    graph = ResolvedGraph()
    real = make_package("react-dom", "npm:18.2.0", "18.2.0")
    virtual = make_package("react-dom", "virtual:abc123#npm:18.2.0", "18.2.0")
    graph.add(real)
    graph.add(virtual, [Descriptor(ident=real.ident, range="npm:^18.0.0")])

    index = build_resolution_index(graph)

    assert index.locators_for(real.ident) == frozenset({real.locator})


def test_missing_package_record_is_fatal() -> None:
    ident = parse_ident("ghost")
    graph = ResolvedGraph(
        resolutions={
            Descriptor(ident=ident, range="npm:^1.0.0"): Locator(
                ident=ident, reference="npm:1.0.0"
            )
        }
    )

    with pytest.raises(ResolutionIntegrityError, match="ghost@npm:1.0.0"):
        build_resolution_index(graph)


def test_missing_devirtualized_record_is_fatal() -> None:
    graph = ResolvedGraph()
    virtual = make_package("react-dom", "virtual:abc123#npm:18.2.0", "18.2.0")
    graph.add(virtual, [Descriptor(ident=virtual.ident, range="npm:^18.0.0")])

    with pytest.raises(ResolutionIntegrityError):
        build_resolution_index(graph)


def test_index_build_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    graph = make_graph(("lib", "npm:^2.0.0", "npm:2.3.0", "2.3.0"))

    with caplog.at_level(logging.DEBUG, logger="pin_deps.engine.index"):
        build_resolution_index(graph)

    assert "Indexed 1 resolutions into 1 identities" in caplog.text
