"""
Logging setup shared by every module.

Usage:
    from apply_assist.core.logging_config import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

from apply_assist.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging() -> None:
    """Install a single stdout handler on the root logger (idempotent)."""
    root = logging.getLogger()
    if root.handlers:
        # Already configured (uvicorn reload, tests)
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(get_settings().log_level.upper())


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
