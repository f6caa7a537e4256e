"""Tests for environment-backed settings."""

from __future__ import annotations

import logging

import pytest

from pin_deps.settings import PinDepsSettings, get_settings


def test_defaults() -> None:
    settings = get_settings()

    assert settings.config_path is None
    assert settings.lockfile == "yarn.lock"
    assert settings.no_color is False
    assert settings.numeric_log_level == logging.INFO


def test_environment_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIN_DEPS_CONFIG_PATH", "/etc/pin-deps.yml")
    monkeypatch.setenv("PIN_DEPS_LOG_LEVEL", "debug")
    monkeypatch.setenv("NO_COLOR", "anything")

    settings = PinDepsSettings()

    assert settings.config_path == "/etc/pin-deps.yml"
    assert settings.log_level == "DEBUG"
    assert settings.no_color is True


@pytest.mark.parametrize(("raw", "expected"), [("loud", "INFO"), ("", "INFO")])
def test_unknown_log_level_falls_back(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: str
) -> None:
    monkeypatch.setenv("PIN_DEPS_LOG_LEVEL", raw)

    assert PinDepsSettings().log_level == expected


def test_blank_values_use_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIN_DEPS_LOCKFILE", " ")
    monkeypatch.setenv("NO_COLOR", "")

    settings = PinDepsSettings()

    assert settings.lockfile == "yarn.lock"
    assert settings.no_color is False
