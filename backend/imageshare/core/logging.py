"""Logging setup for the application loggers."""
from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_HANDLER_NAME = "imageshare"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the ``imageshare`` logger tree."""

    root = logging.getLogger("imageshare")
    root.setLevel(level.upper())
    if any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
