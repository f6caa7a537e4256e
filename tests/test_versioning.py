"""Tests for the npm semver helpers."""

from __future__ import annotations

import pytest

from pin_deps.versioning import is_exact_version, needs_pin, satisfies, valid_range


@pytest.mark.parametrize(
    "range_",
    [
        "^1.2.3",
        "~1.2.0",
        ">=1.0.0 <2.0.0",
        ">= 1.0.0",
        "< 2.0.0 >= 1.0.0",
        "1.x",
        "*",
        "1.2.3 || 2.0.0",
    ],
)
def test_ranges_need_pin(range_: str) -> None:
    assert needs_pin(range_)


@pytest.mark.parametrize(
    "range_",
    [
        "1.2.3",
        "1.0.0-beta.1",
        "canary",
        "latest",
        "workspace:^",
        "npm:other@^1.0.0",
        "https://example.com/pkg.tgz",
    ],
)
def test_exact_versions_tags_and_protocols_do_not_need_pin(range_: str) -> None:
    assert not needs_pin(range_)


def test_is_exact_version() -> None:
    assert is_exact_version("2.3.0")
    assert not is_exact_version("^2.3.0")


def test_protocol_ranges_are_not_valid_ranges() -> None:
    assert valid_range("workspace:*") is None


def test_satisfies_follows_npm_semantics() -> None:
    assert satisfies("2.3.0", "^2.0.0")
    assert not satisfies("3.0.0", "^2.0.0")
    assert not satisfies("not-a-version", "^2.0.0")
    assert not satisfies("2.3.0", "canary")


def test_comparators_may_be_followed_by_spaces() -> None:
    assert satisfies("2.3.0", ">= 2.0.0")
    assert satisfies("1.4.0", "< 2.0.0 >= 1.0.0")
    assert not satisfies("2.3.0", "< 2.0.0 >= 1.0.0")
    assert satisfies("1.2.9", "~ 1.2.0")
