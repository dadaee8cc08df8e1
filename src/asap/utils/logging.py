"""Logging helpers for ASAP."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Return the package-level ``asap`` logger.

    Handlers and levels belong to the embedding application; the package only
    installs a :class:`logging.NullHandler` so unconfigured hosts stay quiet.
    """

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("asap")
        if not any(isinstance(handler, logging.NullHandler) for handler in _LOGGER.handlers):
            _LOGGER.addHandler(logging.NullHandler())
    return _LOGGER
