"""
Structured logging configuration.

Log calls attach structured context with ``extra_data``::

    logger = get_logger(__name__)
    logger.info("Answer graded", extra_data={"question_id": qid, "is_correct": True})

JSON output puts the context next to the standard fields; text output
appends it as ``key=value`` pairs.
"""

import sys
import logging
from typing import Any, Dict, List
from datetime import datetime, timezone
import json
from pathlib import Path

from .config import settings


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "extra_data", None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(_context(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines for local development"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            line = f"{line} [{pairs}]"
        return line


def _handlers(formatter: logging.Formatter, level: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
    return handlers


def setup_logging() -> None:
    """Configure the root logger from LOG_LEVEL, LOG_FORMAT and LOG_FILE"""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    formatter = StructuredFormatter() if settings.LOG_FORMAT == "json" else TextFormatter()

    logging.basicConfig(
        level=level,
        handlers=_handlers(formatter, level),
        force=True
    )

    # Request lines duplicate what the handlers already log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


class LoggerAdapter(logging.LoggerAdapter):
    """Logger accepting ``extra_data`` on every call, merged over bound context"""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.setdefault("extra", {})
        extra["extra_data"] = {**self.extra, **kwargs.pop("extra_data", {})}
        return msg, kwargs


def get_logger(name: str) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), {})


def get_context_logger(name: str, **context) -> LoggerAdapter:
    """Logger that adds ``context`` (e.g. ``user_id``) to every record"""
    return LoggerAdapter(logging.getLogger(name), context)
