"""Logging setup for the CLI.

Log records go to stderr so stdout stays clean for JSON/YAML output.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone


LOG_LEVEL_ENV = "PLANNER_SCHEDULER_LOG_LEVEL"
LOG_FORMAT_ENV = "PLANNER_SCHEDULER_LOG_FORMAT"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "WARNING", fmt: str = "text") -> None:
    """Install a single stderr handler on the root logger, replacing earlier ones."""
    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        handlers=[handler],
        force=True,
    )
