"""Logging setup: stderr handler, optional rotating JSON file, context fields."""

import contextvars
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

# Fields added by the innermost active LogContext
_context_fields: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("log_context_fields", default={})
_base_factory: Optional[Any] = None


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        payload.update(getattr(record, "extra_fields", {}))

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


FORMATS = {
    "simple": "%(levelname)-8s | %(name)s | %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
}


def build_formatter(format: str) -> logging.Formatter:
    """Formatter for a LoggingConfig.format value (simple, detailed, json)."""
    if format == "json":
        return StructuredFormatter()
    return logging.Formatter(FORMATS.get(format, FORMATS["simple"]), datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    level: str = "WARNING",
    format: str = "simple",
    log_file: Optional[Path] = None,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the root logger, replacing existing handlers.

    Records go to stderr (or stream) so they never mix with the progress
    output on stdout. A log file, if given, always gets JSON lines and is
    rotated at max_file_size_mb.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console_handler.setFormatter(build_formatter(format))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)


def _install_record_factory() -> None:
    global _base_factory
    if _base_factory is not None:
        return

    _base_factory = logging.getLogRecordFactory()

    def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
        record = _base_factory(*args, **kwargs)
        fields = _context_fields.get()
        if fields:
            record.extra_fields = {**getattr(record, "extra_fields", {}), **fields}
        return record

    logging.setLogRecordFactory(record_factory)


class LogContext:
    """Adds structured fields to every record logged inside the block.

    Contexts nest; inner fields override outer ones. The fields are kept
    in a context variable, so concurrent threads do not see each other's.

        with LogContext(logger, operation="verify", database=path):
            ...
    """

    def __init__(self, logger: logging.Logger, **fields: Any) -> None:
        self.logger = logger
        self.fields = fields
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> "LogContext":
        _install_record_factory()
        self._token = _context_fields.set({**_context_fields.get(), **self.fields})
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._token is not None:
            _context_fields.reset(self._token)
            self._token = None
