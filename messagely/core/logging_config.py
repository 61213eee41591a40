"""Logging setup for the messagely logger tree."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_HANDLER_NAME = "messagely-stream"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the ``messagely`` logger.

    Calling this more than once (one app per test, for instance) only updates
    the level; handlers are never stacked.
    """
    logger = logging.getLogger("messagely")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
