from __future__ import annotations

import logging
from logging import Logger

from .config import settings


def setup_logging() -> Logger:
    """Configure root logger for the application."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # apscheduler is chatty at INFO: one line per job run every minute
    logging.getLogger("apscheduler").setLevel(max(level, logging.WARNING))
    return logging.getLogger("habit_tracker")
