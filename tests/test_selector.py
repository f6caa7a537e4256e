"""Tests for candidate selection."""

from __future__ import annotations

from conftest import make_graph
from pin_deps.engine.filters import Filters
from pin_deps.engine.index import build_resolution_index
from pin_deps.engine.selector import (
    Outcome,
    find_duplicates,
    rank_candidates,
    select_candidate,
)
from pin_deps.reporting import Report
from pin_deps.structs import Descriptor, parse_ident

WORKSPACE = "/repo/packages/a"


def _select(descriptor: Descriptor, graph, filters: Filters | None = None, **kwargs):
    report = Report(color=False, **kwargs)
    selection = select_candidate(
        descriptor,
        build_resolution_index(graph),
        filters or Filters(),
        report=report,
        workspace_label=WORKSPACE,
    )
    return selection, report


def _descriptor(name: str, range_: str) -> Descriptor:
    return Descriptor(ident=parse_ident(name), range=range_)


def test_highest_satisfying_version_wins_without_duplicate_warning() -> None:
    graph = make_graph(
        ("lib", "npm:^2.0.0", "npm:2.3.0", "2.3.0"),
        ("lib", "npm:2.1.0", "npm:2.1.0", "2.1.0"),
    )

    selection, report = _select(_descriptor("lib", "^2.0.0"), graph)

    assert selection.outcome is Outcome.PIN
    assert selection.target is not None
    assert selection.target.version == "2.3.0"
    assert selection.duplicates == ()
    assert report.warnings == []


def test_single_candidate_is_used_even_when_range_does_not_match() -> None:
    graph = make_graph(("lib", "npm:^1.0.0", "npm:3.0.0", "3.0.0"))

    selection, _ = _select(_descriptor("lib", "^1.0.0"), graph)

    assert selection.should_pin
    assert selection.target is not None
    assert selection.target.version == "3.0.0"


def test_exact_version_is_skipped() -> None:
    graph = make_graph(("lib", "npm:2.3.0", "npm:2.3.0", "2.3.0"))

    selection, report = _select(_descriptor("lib", "2.3.0"), graph, verbose=True)

    assert selection.outcome is Outcome.SKIPPED
    assert report.warnings == [f"{WORKSPACE} Skip: lib:2.3.0"]


def test_equal_versions_with_distinct_locators_warn_once_per_pair() -> None:
    graph = make_graph(
        ("lib", "npm:^2.0.0", "npm:2.3.0", "2.3.0"),
        ("lib", "patch:lib@npm%3A2.3.0#fix", "patch:lib@npm%3A2.3.0#fix", "2.3.0"),
        ("lib", "npm:2.1.0", "npm:2.1.0", "2.1.0"),
    )

    selection, report = _select(_descriptor("lib", "^2.0.0"), graph)

    assert selection.should_pin
    assert selection.target is not None
    assert selection.target.version == "2.3.0"
    assert str(selection.target.locator) == "lib@npm:2.3.0"
    assert len(selection.duplicates) == 1
    duplicate_warnings = [w for w in report.warnings if "Possible duplicate" in w]
    assert len(duplicate_warnings) == 1


def test_duplicate_warning_is_not_repeated_for_the_same_workspace() -> None:
    graph = make_graph(
        ("lib", "npm:^2.0.0", "npm:2.3.0", "2.3.0"),
        ("lib", "npm:2.3.0-alias", "patch:lib#fix", "2.3.0"),
    )
    index = build_resolution_index(graph)
    report = Report(color=False)

    for _ in range(2):
        select_candidate(
            _descriptor("lib", "^2.0.0"),
            index,
            Filters(),
            report=report,
            workspace_label=WORKSPACE,
        )

    assert len(report.warnings) == 1


def test_missing_locator_warns_and_skips() -> None:
    graph = make_graph(("other", "npm:^1.0.0", "npm:1.0.0", "1.0.0"))

    selection, report = _select(_descriptor("lib", "^2.0.0"), graph)

    assert selection.outcome is Outcome.MISSING
    assert report.warnings == [
        f"Missing locator: lib:^2.0.0, in workspace {WORKSPACE}"
    ]


def test_no_satisfying_candidate_warns_and_skips() -> None:
    graph = make_graph(
        ("lib", "npm:^3.0.0", "npm:3.0.0", "3.0.0"),
        ("lib", "npm:^4.0.0", "npm:4.0.0", "4.0.0"),
    )

    selection, report = _select(_descriptor("lib", "^2.0.0"), graph)

    assert selection.outcome is Outcome.UNSATISFIED
    assert report.warnings[0].startswith("No satisfying candidate: lib:^2.0.0")


def test_versionless_single_candidate_is_not_pinned() -> None:
    graph = make_graph(("lib", "npm:^2.0.0", "npm:2.3.0", None))

    selection, report = _select(_descriptor("lib", "^2.0.0"), graph)

    assert selection.outcome is Outcome.UNSATISFIED
    assert report.warnings


def test_also_range_filter_includes_tags_and_bypasses_satisfaction() -> None:
    graph = make_graph(
        ("react", "npm:canary", "npm:19.0.0-canary.2", "19.0.0-canary.2"),
        ("react", "npm:^18.0.0", "npm:18.2.0", "18.2.0"),
    )
    filters = Filters.from_flags(also=[":canary"])

    selection, _ = _select(_descriptor("react", "canary"), graph, filters)

    assert selection.should_pin
    assert selection.explicitly_included
    assert selection.target is not None
    assert selection.target.version == "19.0.0-canary.2"


def test_tags_are_skipped_without_explicit_inclusion() -> None:
    graph = make_graph(("react", "npm:canary", "npm:19.0.0", "19.0.0"))

    selection, _ = _select(_descriptor("react", "canary"), graph)

    assert selection.outcome is Outcome.SKIPPED


def test_only_filter_omits_everything_else() -> None:
    graph = make_graph(
        ("pkg", "npm:^1.0.0", "npm:1.2.0", "1.2.0"),
        ("other", "npm:^1.0.0", "npm:1.5.0", "1.5.0"),
    )
    filters = Filters.from_flags(only=["pkg:^1.0.0"])

    kept, _ = _select(_descriptor("pkg", "^1.0.0"), graph, filters)
    omitted, _ = _select(_descriptor("other", "^1.0.0"), graph, filters)

    assert kept.should_pin
    assert omitted.outcome is Outcome.OMITTED


def test_already_pinned_is_reported_when_explicitly_included() -> None:
    graph = make_graph(("lib", "npm:2.3.0", "npm:2.3.0", "2.3.0"))
    filters = Filters.from_flags(also=["lib:2.3.0"])

    selection, report = _select(_descriptor("lib", "2.3.0"), graph, filters)

    assert selection.outcome is Outcome.ALREADY_PINNED
    assert report.infos[-1] == "- Already pinned: lib:2.3.0"


def test_rank_candidates_breaks_ties_by_locator() -> None:
    graph = make_graph(
        ("lib", "a", "npm:b-ref", "1.0.0"),
        ("lib", "b", "npm:a-ref", "1.0.0"),
        ("lib", "c", "npm:c-ref", "0.9.0"),
    )
    candidates = build_resolution_index(graph).candidates_for(parse_ident("lib"))

    ranked = rank_candidates(candidates, "^1.0.0", explicitly_included=True)

    assert [str(p.locator) for p in ranked] == [
        "lib@npm:a-ref",
        "lib@npm:b-ref",
        "lib@npm:c-ref",
    ]
    assert len(find_duplicates(ranked)) == 1
