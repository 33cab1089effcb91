"""
Structured logging utilities for application logging
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from .config import LoggingSettings

APP_LOGGER = "clinicslots"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "thread": record.thread,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """Attach a single stdout handler to the ``clinicslots`` logger tree.

    Child loggers (``clinicslots.audit`` and friends) propagate here. Calling
    this twice replaces the handler rather than stacking a second one.
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(getattr(logging, settings.level))

    for handler in list(logger.handlers):
        if getattr(handler, "_clinicslots_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if settings.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    handler._clinicslots_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
