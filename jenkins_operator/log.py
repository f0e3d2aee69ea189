"""The operator's shared logger."""

from __future__ import annotations

import logging

LOGGER_NAME = "controller-jenkins"

# Verbosity levels used by callers to pick a log method.
VWARN = -1
VDEBUG = 1

_FORMAT = "%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s"


class _OperatorHandler(logging.StreamHandler):
    """Marker type so repeated setup does not stack handlers."""


def get_logger() -> logging.Logger:
    """Return the operator's logger."""
    return logging.getLogger(LOGGER_NAME)


def setup_logger(debug: bool) -> None:
    """Configure the operator's logger for debug or info output."""
    logger = get_logger()
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not any(isinstance(h, _OperatorHandler) for h in logger.handlers):
        handler = _OperatorHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)