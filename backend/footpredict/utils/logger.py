"""
Logger configuration module for the Football Predictions API.

Production logs are one JSON object per line, tagged with the upstream mode
and cache backend so fallback and cache log lines can be told apart between
deployments.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from footpredict.utils.config import Settings, settings

# Standard LogRecord attributes; anything else on a record came in via `extra=`
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Formats records as JSON with service context and any `extra=` fields."""

    def __init__(self, current: Settings = settings):
        super().__init__()
        self.context = {
            "service": current.APP_NAME,
            "environment": current.ENVIRONMENT,
            "upstream_mode": "live" if current.RAPIDAPI_KEY else "offline",
            "cache_backend": current.CACHE_BACKEND,
        }

    def format(self, record):
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "path": record.pathname,
            "line": record.lineno,
            **self.context,
        }

        extra = {k: v for k, v in vars(record).items() if k not in _RESERVED_ATTRS}
        if extra:
            log_data["extra"] = extra

        if record.exc_info:
            log_data["exception"] = {
                "type": str(record.exc_info[0].__name__),
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_data, default=str)


def setup_logging(current: Settings = settings):
    """Configure the root handler and return the `footpredict` logger."""
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    level = getattr(logging, current.LOG_LEVEL, logging.INFO)
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    if current.APP_DEBUG:
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    else:
        console_handler.setFormatter(JsonFormatter(current))
    root_logger.addHandler(console_handler)

    app_logger = logging.getLogger("footpredict")
    app_logger.setLevel(level)

    return app_logger


logger = setup_logging()
