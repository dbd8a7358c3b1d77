"""Application configuration. Load from environment."""

import os

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CACHE_TTL_SECONDS = 300


def get_database_url() -> str:
    """Return DATABASE_URL from environment. Raises if missing."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL environment variable is required")
    return url


def get_cache_ttl_seconds() -> int:
    """TTL della mappa team-competition -> team. Default 5 minuti."""
    raw = os.environ.get("FFL_CACHE_TTL_SECONDS")
    if not raw:
        return DEFAULT_CACHE_TTL_SECONDS
    try:
        return max(0, int(raw))
    except ValueError:
        raise RuntimeError("FFL_CACHE_TTL_SECONDS must be an integer") from None


def timing_logs_enabled() -> bool:
    """FFL_TIMING_LOGS=0/false/off disattiva i log di timing per richiesta."""
    raw = os.environ.get("FFL_TIMING_LOGS", "1").strip().lower()
    return raw not in ("0", "false", "off", "no")
