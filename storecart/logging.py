"""
Logging setup for storecart.

The root logger gets one stdout handler the first time this module is
imported, unless the embedding application already installed its own.

    from storecart.logging import get_logger
    logger = get_logger(__name__)

Environment:
    LOG_LEVEL   DEBUG/INFO/WARNING/ERROR (default INFO)
    LOG_FORMAT  "simple" drops timestamps
"""

import logging
import os
import sys
from functools import cache

_FORMATS = {
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "simple": "%(levelname)s - %(name)s - %(message)s",
}

# Product ids come from the UI layer; logged ids are cut to this length
_LOGGED_ID_LENGTH = 8
_CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _level_from_env() -> int:
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _install_handler() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = _level_from_env()
    fmt = _FORMATS.get(os.environ.get("LOG_FORMAT", "").lower(), _FORMATS["detailed"])

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    root.setLevel(level)
    root.addHandler(handler)

    # One request per stock lookup
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


_install_handler()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: object | None) -> str:
    """Render a product id for a log line.

    Control characters are escaped so an id cannot forge extra log entries
    (CWE-117), and the result is truncated. None and "" become "N/A".
    """
    if id_value is None or id_value == "":
        return "N/A"
    return str(id_value).translate(_CONTROL_CHARS)[:_LOGGED_ID_LENGTH]


__all__ = ["get_logger", "sanitize_id_for_logging"]
