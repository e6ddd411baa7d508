"""
Centralized logging configuration with structured logging support.
"""
import json
import logging
import logging.config
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Extra fields the orchestrator attaches to per-attempt log records
STRUCTURED_FIELDS = ("provider", "purpose", "attempt")


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for production logging.

    Produces structured log entries with consistent fields for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry: Dict[str, Any] = {
            "timestamp": timestamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        # Add source location for error-level logs
        if record.levelno >= logging.ERROR:
            log_entry["source"] = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    json_output: bool = False,
) -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Level name for the package and root loggers
        log_file: Optional path of a file that receives the same records
        json_output: Emit JSON lines instead of the human-readable format
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = "json" if json_output else "default"

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": formatter,
            "stream": sys.stderr,
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "level": level,
            "formatter": formatter,
            "filename": log_file,
            "encoding": "utf-8",
        }

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": handlers,
        "root": {
            "level": level,
            "handlers": list(handlers),
        },
        "loggers": {
            "question_orchestrator": {
                "level": level,
                "handlers": list(handlers),
                "propagate": False,
            },
            # Request lines from the HTTP stack carry the Gemini key in the URL
            "httpx": {
                "level": logging.WARNING,
                "handlers": list(handlers),
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)
