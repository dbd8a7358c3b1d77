"""
Accesso dati: query sottili che restituiscono righe ORM.
Nessun join: le relazioni si risolvono in memoria con mappe per id.
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ffl_stats.analytics.identifiers import normalize_id, parse_numeric_ref
from ffl_stats.models import (
    Competition,
    Goal,
    Match,
    Player,
    PlayerCompetition,
    PlayerMatchStats,
    Team,
    TeamCompetition,
    TeamMatchStats,
)

logger = logging.getLogger(__name__)


def _int_ids(ids: Iterable[Any]) -> list[int]:
    out = set()
    for ref in ids:
        n = parse_numeric_ref(ref)
        if n is not None:
            out.add(n)
    return sorted(out)


def _find_by_public_or_pk(db: Session, model, ref: Any):
    """Lookup per public_id numerico, fallback su chiave primaria. None se assente."""
    n = parse_numeric_ref(ref)
    if n is None:
        return None
    row = db.execute(select(model).where(model.public_id == n)).scalars().first()
    if row is not None:
        return row
    return db.get(model, n)


def find_player(db: Session, ref: Any) -> Player | None:
    return _find_by_public_or_pk(db, Player, ref)


def find_team(db: Session, ref: Any) -> Team | None:
    return _find_by_public_or_pk(db, Team, ref)


def find_competition(db: Session, ref: Any) -> Competition | None:
    return _find_by_public_or_pk(db, Competition, ref)


def find_match(db: Session, ref: Any) -> Match | None:
    n = parse_numeric_ref(ref)
    return db.get(Match, n) if n is not None else None


def rows_by_ids(db: Session, model, ids: Iterable[Any], column: str = "id") -> list[Any]:
    """Tutte le righe con column IN ids. Set vuoto -> lista vuota senza query."""
    values = _int_ids(ids)
    if not values:
        return []
    col = getattr(model, column)
    return list(db.execute(select(model).where(col.in_(values))).scalars().all())


def all_rows(db: Session, model, order_by=None) -> list[Any]:
    stmt = select(model)
    if order_by is not None:
        stmt = stmt.order_by(order_by)
    return list(db.execute(stmt).scalars().all())


def team_competitions_for(
    db: Session,
    competition_ids: Iterable[Any] | None = None,
    team_ids: Iterable[Any] | None = None,
) -> list[TeamCompetition]:
    stmt = select(TeamCompetition)
    if competition_ids is not None:
        values = _int_ids(competition_ids)
        if not values:
            return []
        stmt = stmt.where(TeamCompetition.competition_id.in_(values))
    if team_ids is not None:
        values = _int_ids(team_ids)
        if not values:
            return []
        stmt = stmt.where(TeamCompetition.team_id.in_(values))
    return list(db.execute(stmt.order_by(TeamCompetition.id)).scalars().all())


def player_competitions_for(
    db: Session,
    team_competition_ids: Iterable[Any] | None = None,
    player_ids: Iterable[Any] | None = None,
) -> list[PlayerCompetition]:
    stmt = select(PlayerCompetition)
    if team_competition_ids is not None:
        values = _int_ids(team_competition_ids)
        if not values:
            return []
        stmt = stmt.where(PlayerCompetition.team_competition_id.in_(values))
    if player_ids is not None:
        values = _int_ids(player_ids)
        if not values:
            return []
        stmt = stmt.where(PlayerCompetition.player_id.in_(values))
    return list(db.execute(stmt.order_by(PlayerCompetition.id)).scalars().all())


def matches_for_competitions(db: Session, competition_ids: Iterable[Any]) -> list[Match]:
    return rows_by_ids(db, Match, competition_ids, column="competition_id")


def matches_for_team_competitions(db: Session, team_competition_ids: Iterable[Any]) -> list[Match]:
    values = _int_ids(team_competition_ids)
    if not values:
        return []
    stmt = select(Match).where(
        or_(
            Match.team1_competition_id.in_(values),
            Match.team2_competition_id.in_(values),
        )
    )
    return list(db.execute(stmt.order_by(Match.date, Match.id)).scalars().all())


def player_match_stats_for(
    db: Session,
    player_competition_ids: Iterable[Any] | None = None,
    match_ids: Iterable[Any] | None = None,
    team_competition_ids: Iterable[Any] | None = None,
) -> list[PlayerMatchStats]:
    stmt = select(PlayerMatchStats)
    if team_competition_ids is not None:
        values = _int_ids(team_competition_ids)
        if not values:
            return []
        stmt = stmt.where(PlayerMatchStats.team_competition_id.in_(values))
    if player_competition_ids is not None:
        values = _int_ids(player_competition_ids)
        if not values:
            return []
        stmt = stmt.where(PlayerMatchStats.player_competition_id.in_(values))
    if match_ids is not None:
        values = _int_ids(match_ids)
        if not values:
            return []
        stmt = stmt.where(PlayerMatchStats.match_id.in_(values))
    return list(db.execute(stmt.order_by(PlayerMatchStats.id)).scalars().all())


def team_match_stats_for(db: Session, match_ids: Iterable[Any]) -> list[TeamMatchStats]:
    return rows_by_ids(db, TeamMatchStats, match_ids, column="match_id")


def team_match_stats_for_team_competitions(db: Session, team_competition_ids: Iterable[Any]) -> list[TeamMatchStats]:
    return rows_by_ids(db, TeamMatchStats, team_competition_ids, column="team_competition_id")


def goals_for(
    db: Session,
    match_ids: Iterable[Any] | None = None,
    player_competition_ids: Iterable[Any] | None = None,
) -> list[Goal]:
    """Gol per partite e/o dove un player-competition è marcatore, assist o pre-assist."""
    stmt = select(Goal)
    if match_ids is not None:
        values = _int_ids(match_ids)
        if not values:
            return []
        stmt = stmt.where(Goal.match_id.in_(values))
    if player_competition_ids is not None:
        values = _int_ids(player_competition_ids)
        if not values:
            return []
        stmt = stmt.where(
            or_(
                Goal.scorer_id.in_(values),
                Goal.assist_id.in_(values),
                Goal.preassist_id.in_(values),
            )
        )
    return list(db.execute(stmt.order_by(Goal.id)).scalars().all())


def team_ids_of(team_competitions: Iterable[TeamCompetition]) -> set[str]:
    return {normalize_id(tc.team_id) for tc in team_competitions if normalize_id(tc.team_id)}
