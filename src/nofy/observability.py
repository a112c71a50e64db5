"""Logging setup for hosts embedding nofy.

The library itself only creates named loggers under ``nofy``; a host calls
``setup_logging`` once if it wants nofy's JSON output.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from nofy.config import Settings

_EXTRA_FIELDS = ("messenger", "job_id", "status_code", "duration_ms")
_TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_dict["exception"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_dict[key] = val
        return json.dumps(log_dict, default=str)


def setup_logging(level: str | None = None, json_output: bool = True) -> None:
    """Attach a stream handler to the ``nofy`` logger.

    *level* defaults to ``NOFY_LOG_LEVEL``.
    """
    if level is None:
        level = Settings().log_level
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))
    logger = logging.getLogger("nofy")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
