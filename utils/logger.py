"""
utils/logger.py
---------------
Process-wide logging setup.

Every module takes its logger from ``get_logger(__name__)``; the root logger is
configured on first use at ``config.LOG_LEVEL``. Thread names are part of the
format because concurrent handlers log side by side.
"""

import logging
import sys

from config import LOG_LEVEL

_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_configured = False

# The bot long-polls over httpx; its per-request INFO lines drown everything else
_NOISY_LOGGERS = ("httpx", "telegram.ext")


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    root = logging.getLogger()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A named logger; the root handler is installed on the first call.
    """
    _configure_root()
    return logging.getLogger(name)
