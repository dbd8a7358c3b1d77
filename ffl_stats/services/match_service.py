"""Dettaglio partita: lati, barre statistiche di squadra, statistiche giocatori e formazioni."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from ffl_stats.analytics.aggregation import index_by, to_number
from ffl_stats.analytics.formatting import competition_label, format_date, format_minutes_seconds
from ffl_stats.analytics.identifiers import normalize_id
from ffl_stats.analytics.lineups import build_lineup, stat_bar
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import Competition, Player, PlayerCompetition, Team, TeamCompetition
from ffl_stats.services import repository

logger = logging.getLogger(__name__)

# (campo, etichetta) nell'ordine di visualizzazione
TEAM_STAT_BARS = (
    ("possession", "Posesión"),
    ("kicks", "Tiros"),
    ("passes", "Pases"),
    ("shots_on_goal", "Tiros a puerta"),
)


def format_team_stat(key: str, value: Any) -> str:
    """Il possesso è salvato in decimi di punto percentuale."""
    if key == "possession":
        return f"{to_number(value) / 10:.1f}%"
    return str(int(to_number(value)))


def team_stat_bars(stats1: Any, stats2: Any) -> list[dict[str, Any]]:
    bars = []
    for key, label in TEAM_STAT_BARS:
        v1 = to_number(getattr(stats1, key, 0)) if stats1 is not None else 0
        v2 = to_number(getattr(stats2, key, 0)) if stats2 is not None else 0
        width1, width2 = stat_bar(v1, v2)
        bars.append({
            "key": key,
            "label": label,
            "display1": format_team_stat(key, v1),
            "display2": format_team_stat(key, v2),
            "width1": width1,
            "width2": width2,
        })
    return bars


def get_match_detail(db: Session, ref: Any) -> dict[str, Any] | None:
    """Contesto pagina partita. None se la partita non esiste."""
    timer = StepTimer(f"match:{ref}")
    with timer.step("match"):
        match = repository.find_match(db, ref)
    if match is None:
        timer.total()
        return None

    tc1 = normalize_id(match.team1_competition_id)
    tc2 = normalize_id(match.team2_competition_id)
    with timer.step("teams"):
        tc_by_id = index_by(repository.rows_by_ids(db, TeamCompetition, {tc1, tc2} - {""}))
        teams_by_id = index_by(repository.rows_by_ids(db, Team, repository.team_ids_of(tc_by_id.values())))
        comp = db.get(Competition, match.competition_id) if match.competition_id is not None else None

    with timer.step("teamStats"):
        team_stats = index_by(repository.team_match_stats_for(db, [match.id]), key=lambda s: s.team_competition_id)

    with timer.step("playerStats"):
        player_rows = repository.player_match_stats_for(db, match_ids=[match.id])
        pcs_by_id = index_by(repository.rows_by_ids(db, PlayerCompetition, {r.player_competition_id for r in player_rows}))
        players_by_id = index_by(repository.rows_by_ids(db, Player, {pc.player_id for pc in pcs_by_id.values()}))

    def side(tc_id: str, fallback: str) -> dict[str, Any]:
        tc = tc_by_id.get(tc_id)
        team = teams_by_id.get(normalize_id(tc.team_id)) if tc is not None else None
        return {
            "team_competition_id": tc_id,
            "id": normalize_id(team) if team is not None else "",
            "public_id": team.public_id if team is not None else None,
            "name": (team.name if team is not None else None) or fallback,
            "image": (team.image if team is not None else None) or "",
        }

    def player_line(row) -> dict[str, Any]:
        pc = pcs_by_id.get(normalize_id(row.player_competition_id))
        player = players_by_id.get(normalize_id(pc.player_id)) if pc is not None else None
        return {
            "player_id": normalize_id(player) if player is not None else "",
            "public_id": player.public_id if player is not None else None,
            "name": (player.name if player is not None else None) or "Player",
            "position": row.position or (pc.position if pc is not None else "") or "",
            "minutes": format_minutes_seconds(row.minutes_played),
            "goals": int(to_number(row.goals)),
            "assists": int(to_number(row.assists)),
            "passes": int(to_number(row.passes)),
            "kicks": int(to_number(row.kicks)),
            "saves": int(to_number(row.saves)),
            "avg": to_number(row.avg),
        }

    team1_players = [player_line(r) for r in player_rows if normalize_id(r.team_competition_id) == tc1]
    team2_players = [player_line(r) for r in player_rows if normalize_id(r.team_competition_id) == tc2]

    timer.total()
    return {
        "match": match,
        "date": format_date(match.date) or "-",
        "competition_label": competition_label(comp) if comp is not None else "",
        "team1": side(tc1, "Team 1"),
        "team2": side(tc2, "Team 2"),
        "score1": int(to_number(match.score_team1)),
        "score2": int(to_number(match.score_team2)),
        "stat_bars": team_stat_bars(team_stats.get(tc1), team_stats.get(tc2)),
        "team1_players": team1_players,
        "team2_players": team2_players,
        "lineup1": build_lineup(team1_players),
        "lineup2": build_lineup(team2_players, mirrored=True),
    }
