"""
Runtime configuration read from environment variables.

All values are resolved once at import time, the same way the storage and
HTTP client factories expect them.
"""

import os


def _get_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Catalog / stock API
STOCK_SERVICE_URL = os.environ.get("STOCK_SERVICE_URL", "http://localhost:3333")
STOCK_SERVICE_TIMEOUT = _get_float("STOCK_SERVICE_TIMEOUT", 10.0)

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Persisted cart
CART_OWNER = os.environ.get("CART_OWNER", "default")
CART_TTL = _get_int("CART_TTL", 0)  # 0 = never expires

# Notifications
CART_LANGUAGE = os.environ.get("CART_LANGUAGE", "en")
TELEGRAM_TOKEN = os.environ.get("TELEGRAM_TOKEN", "")
TELEGRAM_CHAT_ID = _get_int("TELEGRAM_CHAT_ID", 0)
