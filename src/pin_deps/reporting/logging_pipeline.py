"""Logging pipeline rendering pin-deps reports as console text or NDJSON."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from queue import SimpleQueue
from typing import IO, Iterable

LOGGER = logging.getLogger(__name__)

ROOT_LOGGER_NAME = "pin_deps"

_STRUCTURED_RESERVED_KEYS: tuple[str, ...] = (
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "report_name",
    "report_data",
)

_YELLOW = "\x1b[33m"
_RED = "\x1b[31m"
_RESET = "\x1b[0m"


def _report_type(record: logging.LogRecord) -> str:
    if record.levelno >= logging.ERROR:
        return "error"
    if record.levelno >= logging.WARNING:
        return "warning"
    return "info"


class ConsoleFormatter(logging.Formatter):
    """Render records as ``➤``-prefixed console lines."""

    def __init__(self, *, color: bool = True) -> None:
        super().__init__()
        self._color = color

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        message = record.getMessage()
        data = getattr(record, "report_data", None)
        if data is not None:
            message = f"{message}: {json.dumps(data, indent=2)}"

        marker = "➤"
        if self._color:
            if record.levelno >= logging.ERROR:
                marker = f"{_RED}{marker}{_RESET}"
            elif record.levelno >= logging.WARNING:
                marker = f"{_YELLOW}{marker}{_RESET}"

        text = f"{marker} {message}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


class JsonLinesFormatter(logging.Formatter):
    """Render records as one JSON object per line, shaped like Yarn's NDJSON."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        name = getattr(record, "report_name", None)
        data = getattr(record, "report_data", None)

        context: dict[str, object] = {}
        for key, value in record.__dict__.items():
            if key in _STRUCTURED_RESERVED_KEYS:
                continue
            context[key] = value

        payload: dict[str, object] = {
            "type": _report_type(record),
            "name": name,
            "displayName": name or record.name,
            "indent": "",
            "data": data if data is not None else record.getMessage(),
        }
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_report_logging(
    *,
    json_output: bool = False,
    color: bool = True,
    level: int = logging.INFO,
    stream: IO[str] | None = None,
    logger_name: str = ROOT_LOGGER_NAME,
) -> logging.handlers.QueueListener:
    """Attach a queue-backed console handler to the pin-deps logger tree.

    Args:
        json_output: Emit NDJSON instead of console text.
        color: Colourise console markers. Ignored for NDJSON.
        level: Minimum level for the ``pin_deps`` logger.
        stream: Destination stream, ``sys.stdout`` by default.
        logger_name: Logger receiving the queue handler.

    Returns:
        The started listener; pass it to :func:`shutdown_listeners`.
    """

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    record_queue: SimpleQueue[logging.LogRecord] = SimpleQueue()
    queue_handler = logging.handlers.QueueHandler(record_queue)
    logger.addHandler(queue_handler)

    stream_handler = logging.StreamHandler(stream or sys.stdout)
    if json_output:
        stream_handler.setFormatter(JsonLinesFormatter())
    else:
        stream_handler.setFormatter(ConsoleFormatter(color=color))

    listener = logging.handlers.QueueListener(record_queue, stream_handler)
    listener.start()
    return listener


def shutdown_listeners(
    listeners: Iterable[logging.handlers.QueueListener],
    *,
    logger_name: str = ROOT_LOGGER_NAME,
) -> None:
    """Stop listeners and detach the queue handlers feeding them."""

    listeners = list(listeners)
    for listener in listeners:
        try:
            listener.stop()
        except Exception as exc:  # pragma: no cover - defensive logging cleanup
            LOGGER.warning("Failed to stop logging listener", exc_info=exc)

    queues = {id(listener.queue) for listener in listeners}
    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        if (
            isinstance(handler, logging.handlers.QueueHandler)
            and id(handler.queue) in queues
        ):
            logger.removeHandler(handler)
