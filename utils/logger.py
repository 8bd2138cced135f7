"""
Logging helpers
One stream handler on the root logger, configured the first time a module asks for a logger.
"""
import logging
import sys

from config import settings

_configured = False

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_root() -> None:
    global _configured
    if _configured:
        return

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a module logger, configuring the root handler on first use"""
    _configure_root()
    return logging.getLogger(name)
