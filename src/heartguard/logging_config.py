"""
Logging setup for the API process.

Library modules only create module loggers (``logging.getLogger(__name__)``);
the API calls ``configure_logging`` once so handlers and levels are decided
by the application, not by the engine. Clinical values are never logged.
"""

import logging
import sys

_configured = False


def configure_logging(level: str = "INFO", fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s") -> None:
    """Attach a stdout handler to the ``heartguard`` logger (idempotent)."""
    global _configured
    logger = logging.getLogger("heartguard")
    logger.setLevel(level.upper())
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module"""
    return logging.getLogger(name)
