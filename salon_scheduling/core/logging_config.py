"""Process-wide logging setup for hosts embedding the scheduling engine."""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the house format.

    Falls back to ``settings.log_level`` when no level is given. Safe to call
    more than once; ``basicConfig`` is a no-op once handlers exist.
    """
    if level is None:
        from .config import settings

        level = settings.log_level

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    logging.getLogger("salon_scheduling").setLevel(level.upper())
