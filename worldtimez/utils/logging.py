"""Logging setup and in-process log capture."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, TypedDict

LOGGER_NAME = "worldtimez"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class CapturedLog(TypedDict):
    timestamp: datetime
    level: str
    logger: str
    message: str
    exception: str | None


def setup_logging(name: str = LOGGER_NAME, level: str | int = "INFO") -> logging.Logger:
    """Configure logging for the application if it is not already configured."""

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level if isinstance(level, int) else getattr(logging, str(level).upper(), logging.INFO))

    # Avoid duplicate logging from child loggers
    logger.propagate = False
    return logger


class _CaptureHandler(logging.Handler):
    """Collect log records emitted while a capture is active."""

    def __init__(self) -> None:
        super().__init__()
        self._formatter = logging.Formatter("%(message)s")
        self.entries: List[CapturedLog] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self._formatter.format(record)
        except Exception:
            message = record.getMessage()

        exception_text: str | None = None
        if record.exc_info:
            exception_text = self._formatter.formatException(record.exc_info)

        self.entries.append(
            {
                "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc),
                "level": record.levelname,
                "logger": record.name,
                "message": message,
                "exception": exception_text,
            }
        )


@contextmanager
def capture_logs(name: str = LOGGER_NAME, level: int = logging.DEBUG) -> Iterator[List[CapturedLog]]:
    """Attach a temporary handler that captures output of the ``name`` logger tree."""

    handler = _CaptureHandler()
    handler.setLevel(logging.NOTSET)
    logger = logging.getLogger(name)
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(level)
    try:
        yield handler.entries
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
