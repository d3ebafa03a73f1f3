"""Structured logging for the readiness engine.

Log lines are key=value pairs. Readiness context passed through ``extra``
(project, change kind, finalization area, statuses) is appended after the
message so a project's recomputations can be followed with one grep.
"""

import logging
import sys

# Fields lifted from ``extra`` into the log line, in output order
CONTEXT_FIELDS = (
    "project_id",
    "change_kind",
    "area",
    "status",
    "overall_status",
    "blocking_issues",
)


class StructuredFormatter(logging.Formatter):
    """key=value formatter that carries readiness context fields."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            f"timestamp={self.formatTime(record, self.datefmt)}",
            f"level={record.levelname}",
            f"logger={record.name}",
            f"function={record.funcName}",
            f"message={record.getMessage()}",
        ]
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                parts.append(f"{name}={value}")

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _level_for_env() -> int:
    try:
        from app.core.config import get_settings

        env = get_settings().READINESS_ENV
    except Exception:
        # Settings not loadable yet (e.g. at import time in tests)
        return logging.INFO
    return logging.DEBUG if env == "dev" else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger writing structured lines to stdout.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.setLevel(_level_for_env())

    return logger
