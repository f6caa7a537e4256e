"""Reporting channel and logging pipeline for pin-deps."""

from __future__ import annotations

from pin_deps.reporting.logging_pipeline import (
    ConsoleFormatter,
    JsonLinesFormatter,
    configure_report_logging,
    shutdown_listeners,
)
from pin_deps.reporting.report import REPORT_LOGGER_NAME, Report

__all__ = [
    "ConsoleFormatter",
    "JsonLinesFormatter",
    "REPORT_LOGGER_NAME",
    "Report",
    "configure_report_logging",
    "shutdown_listeners",
]
