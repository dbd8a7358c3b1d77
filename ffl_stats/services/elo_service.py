"""
Classifica Elo: top 50 della stagione Elo attiva; senza stagione attiva
(o stagione vuota) la classifica complessiva. Tre viste: per Elo, per
partite giocate (vittorie + sconfitte, poi Elo) e per percentuale vittorie.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ffl_stats.analytics.aggregation import safe_divide, to_number
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import EloPlayer, EloPlayerSeason, EloSeason

logger = logging.getLogger(__name__)

ELO_LIMIT = 50


def _row(player_id: Any, name: str | None, source) -> dict[str, Any]:
    wins = int(to_number(source.wins))
    losses = int(to_number(source.losses))
    return {
        "player_id": player_id,
        "name": (name or "").strip() or str(player_id),
        "elo": to_number(source.elo),
        "wins": wins,
        "losses": losses,
        "matches": wins + losses,
        "win_rate": safe_divide(wins, wins + losses),
        "streaks": int(to_number(source.streaks)),
    }


def get_elo_leaderboard(db: Session, limit: int = ELO_LIMIT) -> dict[str, Any]:
    timer = StepTimer("elo")
    ranked: list[dict[str, Any]] = []

    with timer.step("season"):
        season = db.execute(
            select(EloSeason).where(EloSeason.is_active.is_(True)).order_by(EloSeason.id.desc()).limit(1)
        ).scalars().first()

    if season is not None:
        with timer.step("seasonPlayers"):
            rows = db.execute(
                select(EloPlayerSeason)
                .where(EloPlayerSeason.elo_season_id == season.id)
                .order_by(EloPlayerSeason.elo.desc(), EloPlayerSeason.id)
                .limit(limit)
            ).scalars().all()
            ranked = [
                _row(r.elo_player_id, r.player.name if r.player is not None else None, r)
                for r in rows
            ]

    using_season = bool(ranked)
    if not ranked:
        with timer.step("overall"):
            players = db.execute(
                select(EloPlayer).order_by(EloPlayer.elo.desc(), EloPlayer.id).limit(limit)
            ).scalars().all()
            ranked = [_row(p.id, p.name, p) for p in players]

    timer.total()
    return {
        "season_label": f"Season: {season.name}" if using_season else "Season data unavailable - showing overall Elo.",
        "using_season": using_season,
        "by_elo": sorted(ranked, key=lambda r: -r["elo"]),
        "by_matches": sorted(ranked, key=lambda r: (-r["matches"], -r["elo"])),
        "by_win_rate": sorted(ranked, key=lambda r: (-r["win_rate"], -r["matches"])),
    }
