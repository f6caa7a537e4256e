"""Diagnostic reporting channel used by the pinning engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pin_deps.structs import Descriptor

__all__ = ["Report", "REPORT_LOGGER_NAME"]

REPORT_LOGGER_NAME = "pin_deps.report"

_GREEN = "\x1b[32m"
_YELLOW = "\x1b[33m"
_RESET = "\x1b[0m"


@dataclass(slots=True)
class Report:
    """Collect and emit info/warning messages plus structured JSON payloads.

    Messages are routed through the ``pin_deps.report`` logger so the
    configured pipeline decides between console text and NDJSON. Warnings are
    additionally kept in :attr:`warnings` for programmatic callers.

    Attributes:
        verbose: Emit the ``verbose_*`` diagnostics.
        color: Wrap highlighted fragments in ANSI colour codes.
        emit_json: Always emit :meth:`json` payloads (otherwise only when
            verbose).
        logger: Destination logger.
        warnings: Every warning message reported so far, in order.
    """

    verbose: bool = False
    color: bool = True
    emit_json: bool = False
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(REPORT_LOGGER_NAME)
    )
    warnings: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)
    _reported_once: set[str] = field(default_factory=set, repr=False)

    def info(self, message: str) -> None:
        self.infos.append(message)
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)
        self.logger.warning(message)

    def warning_once(self, message: str) -> None:
        """Report ``message`` as a warning unless it was already reported."""

        if message in self._reported_once:
            return
        self._reported_once.add(message)
        self.warning(message)

    def verbose_info(self, prefix: str, message: str) -> None:
        if self.verbose:
            self.info(f"{prefix} {message}")

    def verbose_warning(self, prefix: str, message: str) -> None:
        if self.verbose:
            self.warning(f"{prefix} {message}")

    def json(self, name: str, data: object) -> None:
        """Emit a named structured payload."""

        if not (self.emit_json or self.verbose):
            return
        self.logger.info(name, extra={"report_name": name, "report_data": data})

    def green(self, text: str) -> str:
        return f"{_GREEN}{text}{_RESET}" if self.color else text

    def yellow(self, text: str) -> str:
        return f"{_YELLOW}{text}{_RESET}" if self.color else text

    def reference(self, descriptor: Descriptor, *, range_color: str = "") -> str:
        """Render ``@scope/name:range`` with the range optionally highlighted.

        Args:
            descriptor: Dependency to render.
            range_color: ``"green"``, ``"yellow"`` or ``""`` for no highlight.
        """

        range_text = descriptor.range
        if range_color == "green":
            range_text = self.green(range_text)
        elif range_color == "yellow":
            range_text = self.yellow(range_text)
        prefix = f"@{descriptor.scope}/" if descriptor.scope else ""
        return f"{prefix}{descriptor.name}:{range_text}"
