"""
Cache di processo della mappa team-competition -> team.

Unico stato condiviso dell'app: un valore con timestamp, ricaricato dopo
il TTL (default 5 minuti). Nessuna invalidazione (l'app non scrive),
nessun lock.
"""

import logging
import time
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from ffl_stats.core.config import get_cache_ttl_seconds
from ffl_stats.models import TeamCompetition

logger = logging.getLogger(__name__)


class TTLCache:
    """Un solo valore con scadenza. Il clock è iniettabile per i test."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Any = None
        self._stored_at: float | None = None

    def get(self) -> Any | None:
        if self._stored_at is None:
            return None
        if self._clock() - self._stored_at >= self.ttl_seconds:
            return None
        return self._value

    def set(self, value: Any) -> None:
        self._value = value
        self._stored_at = self._clock()

    def get_or_load(self, loader: Callable[[], Any]) -> Any:
        value = self.get()
        if value is None:
            value = loader()
            self.set(value)
        return value

    def clear(self) -> None:
        self._value = None
        self._stored_at = None


_team_competition_cache = TTLCache(ttl_seconds=get_cache_ttl_seconds())


def _load_team_competition_map(db: Session) -> dict[str, str]:
    rows = db.execute(select(TeamCompetition.id, TeamCompetition.team_id)).all()
    logger.info("Mappa team-competition ricaricata: %s righe", len(rows))
    return {str(tc_id): str(team_id) for tc_id, team_id in rows if team_id is not None}


def get_team_competition_team_map(db: Session) -> dict[str, str]:
    """team_competition id -> team id, entrambi normalizzati a stringa."""
    return _team_competition_cache.get_or_load(lambda: _load_team_competition_map(db))


def clear_team_competition_cache() -> None:
    _team_competition_cache.clear()


def team_competition_cache() -> TTLCache:
    return _team_competition_cache
