from ffl_stats.core.config import get_cache_ttl_seconds, get_database_url
from ffl_stats.core.database import Base, SessionLocal, engine, get_db, init_db
from ffl_stats.core.timing import StepTimer

__all__ = [
    "get_database_url",
    "get_cache_ttl_seconds",
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
    "init_db",
    "StepTimer",
]
