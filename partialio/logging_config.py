"""Logging configuration for partialio.

partialio is silent by default (NullHandler on the ``partialio`` logger).
Every wrapper logs one DEBUG line per scripted decision, named after the
call it was applied to::

    partialio.polling.engine DEBUG poll_write: limited to 2 of 4 bytes
    partialio.polling.engine DEBUG poll_write: simulating would-block, waking task for re-poll

That line stream is usually the quickest way to see why a property test
failed. Turn it on for a whole run from the environment, or capture it for
one block of code with ``log_decisions()``.

Example usage:
    import partialio

    # Decisions on stderr
    partialio.enable_console_logging(level="DEBUG")

    # Decisions in a rotating file, one JSON object per line
    partialio.enable_file_logging("partialio.log", level="DEBUG", json=True)

    # Decisions of one block, as records
    with partialio.log_decisions() as decisions:
        writer.write(b"hello")
    assert decisions[0].message == "write: limited to 2 of 5 bytes"

Environment variables:
    PARTIALIO_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    PARTIALIO_LOG_FILE: Path to a rotating log file (instead of stderr)
    PARTIALIO_LOG_JSON: Set to "1" for JSON output
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, Literal

__all__ = [
    "DecisionLog",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "log_decisions",
    "set_level",
    "set_module_level",
]

LOGGER_NAME = "partialio"

ENV_LEVEL = "PARTIALIO_LOGGING"
ENV_FILE = "PARTIALIO_LOG_FILE"
ENV_JSON = "PARTIALIO_LOG_JSON"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DECISION_FORMAT = "%(name)s %(levelname)s %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _component(logger_name: str) -> str:
    """Logger name relative to the package, e.g. ``polling.engine``."""
    prefix = LOGGER_NAME + "."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix):]
    return logger_name


class JsonFormatter(logging.Formatter):
    """Formats log records as one JSON object per line.

    Example output:
        {"timestamp": "2024-01-15T10:30:00.123456+00:00", "level": "DEBUG",
         "component": "polling.engine", "message": "poll_write: limited to 2 of 4 bytes"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "component": _component(record.name),
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


@dataclass(frozen=True)
class DecisionLog:
    """One captured log record."""

    component: str
    level: str
    message: str


class _DecisionLogHandler(logging.Handler):
    """Appends records from the partialio logger hierarchy to a list."""

    def __init__(self, sink: list[DecisionLog], level: int) -> None:
        super().__init__(level=level)
        self._sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._sink.append(DecisionLog(_component(record.name), record.levelname, record.getMessage()))
        except Exception:
            self.handleError(record)


def _get_level(level: str | int) -> int:
    """Convert a level string or int to a logging level constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    """Remove and close all handlers from the partialio logger except NullHandler."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def _formatter(level: int, format: str | None, json_output: bool) -> logging.Formatter:
    if json_output:
        return JsonFormatter()
    if format is None:
        # decision lines are read in sequence; timestamps only add noise
        format = DECISION_FORMAT if level <= logging.DEBUG else DEFAULT_FORMAT
    return logging.Formatter(format, DEFAULT_DATE_FORMAT)


def _attach(handler: logging.Handler, level: int, format: str | None, json_output: bool) -> None:
    handler.setFormatter(_formatter(level, format, json_output))
    handler.setLevel(level)
    logger = _get_logger()
    logger.setLevel(level)
    logger.addHandler(handler)


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str | None = None,
    json: bool = False,
    stream: IO[str] | None = None,
) -> logging.StreamHandler:
    """Enable console logging for partialio.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int.
            At DEBUG, every scripted decision is logged.
        format: Log message format string. Defaults to a compact
            decision format at DEBUG and a timestamped one otherwise.
        json: Emit one JSON object per line instead.
        stream: Output stream. Defaults to stderr.

    Returns:
        The created StreamHandler.
    """
    handler = logging.StreamHandler(stream)
    _attach(handler, _get_level(level), format, json)
    return handler


def enable_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    format: str | None = None,
    json: bool = False,
) -> RotatingFileHandler:
    """Enable rotating file logging for partialio.

    Long property-based runs log one line per scripted decision, so the
    file is rotated once it reaches ``max_bytes``.

    Args:
        path: Path to the log file. Parent directories are created automatically.
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int.
        max_bytes: Maximum size of each log file in bytes. Default 10 MB.
        backup_count: Number of backup files to keep. Default 5.
        format: Log message format string, as for ``enable_console_logging``.
        json: Write one JSON object per line instead.

    Returns:
        The created RotatingFileHandler.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    _attach(handler, _get_level(level), format, json)
    return handler


@contextmanager
def log_decisions(level: LogLevel | int = "DEBUG") -> Iterator[list[DecisionLog]]:
    """Capture partialio log records emitted inside the ``with`` block.

    The logger level is lowered for the duration of the block and restored
    afterwards; other handlers are left alone.

    Example:
        >>> with partialio.log_decisions() as decisions:
        ...     PartialWrite(io.BytesIO(), [Limited(2)]).write(b"hello")
        >>> decisions[0]
        DecisionLog(component='blocking.ops', level='DEBUG', message='write: limited to 2 of 5 bytes')
    """
    captured: list[DecisionLog] = []
    handler = _DecisionLogHandler(captured, _get_level(level))
    logger = _get_logger()
    previous = logger.level
    logger.setLevel(_get_level(level))
    logger.addHandler(handler)
    try:
        yield captured
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


def configure_from_env() -> logging.Handler | None:
    """Configure logging from environment variables.

    Reads ``PARTIALIO_LOGGING``, ``PARTIALIO_LOG_FILE`` and
    ``PARTIALIO_LOG_JSON``. If neither a level nor a file is set, this
    function does nothing. A file without a level logs at INFO.

    Example:
        # In shell:
        export PARTIALIO_LOGGING=DEBUG

        # In a conftest.py:
        >>> import partialio
        >>> partialio.configure_from_env()

    Returns:
        The handler that was added, or None.
    """
    level = os.environ.get(ENV_LEVEL, "").upper()
    log_file = os.environ.get(ENV_FILE, "")
    use_json = os.environ.get(ENV_JSON, "") == "1"

    if not level and not log_file:
        return None

    level = level or "INFO"
    if log_file:
        return enable_file_logging(log_file, level=level, json=use_json)
    return enable_console_logging(level=level, json=use_json)


def set_level(level: LogLevel | int) -> None:
    """Set the global log level for partialio."""
    _get_logger().setLevel(_get_level(level))


def set_module_level(module: str, level: LogLevel | int) -> None:
    """Set the log level for one partialio component.

    Args:
        module: Module name relative to partialio (e.g., "polling.engine").
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int.

    Example:
        >>> partialio.enable_console_logging(level="DEBUG")
        >>> partialio.set_module_level("ops.source", "INFO")  # hide replace/exhaust lines
    """
    logging.getLogger(f"{LOGGER_NAME}.{module}").setLevel(_get_level(level))


def disable_logging() -> None:
    """Remove all handlers and silence partialio completely."""
    logger = _get_logger()
    _clear_handlers()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL + 1)
