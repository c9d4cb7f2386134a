"""Logging setup for the Aiden SDK.

The ``aiden`` logger is isolated (no propagation) and repeated configuration
never stacks handlers. ``event_logger`` adapts it to the structured event hook
accepted by ``HttpClient`` and ``AidenClient``.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from aiden.config import LogLevel

LOGGER_NAME = "aiden"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logger(
    log_level: LogLevel | str = LogLevel.INFO,
    *,
    log_path: Path | str | None = None,
) -> logging.Logger:
    """Configure and return the ``aiden`` logger, writing to ``log_path`` or stderr."""

    logger = logging.getLogger(LOGGER_NAME)
    level_value = _to_logging_level(log_level)
    logger.setLevel(level_value)
    logger.propagate = False

    if not logger.handlers:
        handler: logging.Handler
        if log_path is not None:
            path = Path(log_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path, encoding="utf-8")
        else:
            handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    for handler in logger.handlers:
        handler.setLevel(level_value)

    # Silence noisy client libraries.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger


def event_logger(logger: logging.Logger | None = None) -> Callable[[str, dict[str, object]], None]:
    """Return a hook that writes transport events as one JSON line each."""

    target = logger or logging.getLogger(LOGGER_NAME)

    def _log(event: str, data: dict[str, object]) -> None:
        level = logging.INFO if event == "request_retry" else logging.DEBUG
        target.log(level, "%s %s", event, json.dumps(data, default=str, sort_keys=True))

    return _log


def _to_logging_level(value: LogLevel | str) -> int:
    mapping = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
    }
    if isinstance(value, LogLevel):
        return mapping[value]
    if isinstance(value, str):
        try:
            return mapping[LogLevel(value)]
        except ValueError:
            return logging.WARNING
    return logging.WARNING


__all__ = ["configure_logger", "event_logger", "LOGGER_NAME", "_to_logging_level"]
