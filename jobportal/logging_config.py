"""Logging setup: JSON records to stdout and a rotating log file."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, default=str)


def setup_logging(
    name: str = "jobportal",
    level: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """Configure and return the named logger.

    Args:
        name: Logger name. Module loggers created with
            `logging.getLogger(__name__)` inside the package propagate here.
        level: Log level name. Falls back to the LOG_LEVEL env var, then INFO.
        log_dir: Directory for the rotating file handler. Falls back to
            the LOG_DIR env var, then "logs".

    Returns:
        Configured logger instance.
    """
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_dir = log_dir or os.getenv("LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Avoid duplicate handlers when called more than once
    logger.handlers = []

    formatter = JSONFormatter()

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, f"{name}.log"),
        maxBytes=10485760,  # 10MB
        backupCount=5,
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_level == "DEBUG":
        logger.debug("Debug logging enabled")

    return logger
