"""Logging configuration for the chain-lexicon package."""

from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "chain_lexicon"

_DEFAULT_FORMAT = "%(asctime)s | chain-lexicon | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int = logging.INFO, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """Send the package's log records to ``handler`` (stderr by default).

    Only the ``chain_lexicon`` logger is touched, so applications embedding
    the package keep their own root configuration. Calling this again
    replaces the handler installed by the previous call.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger configured for the given ``name``."""
    return logging.getLogger(name)
