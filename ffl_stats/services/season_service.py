"""
Stagioni: raggruppamento competizioni per la pagina lista, riepilogo di
stagione (squadre, partite, top 7 marcatori/assist/clean sheet) e API JSON.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ffl_stats.analytics.aggregation import to_number, top_by
from ffl_stats.analytics.formatting import (
    TYPE_LABELS,
    competition_image,
    competition_title,
    format_date,
    season_name_for_date,
)
from ffl_stats.analytics.identifiers import normalize_id, normalize_ids
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import Competition, Player, Team
from ffl_stats.schemas.competitions import (
    SeasonApiResponse,
    SeasonMatchRow,
    SeasonMatchTeamStats,
    SeasonTeamRow,
)
from ffl_stats.services import repository
from ffl_stats.services.competition_service import competition_info

logger = logging.getLogger(__name__)

SEASON_TYPES = ("league", "cup", "supercup")
STANDALONE_TYPES = ("summer_cup", "nations_cup")
TOP_SEASON_PLAYERS = 7

# Ordine dei bottoni competizione dentro una card stagione
_COMPETITION_ORDER = {"div1": 1, "div2": 2, "cup": 3, "supercup": 4, "summer_cup": 5, "nations_cup": 6}

CHAMPION_BADGES = {
    "div1": "🥇",
    "div2": "🥈",
    "cup": "🏆",
    "supercup": "🌟",
    "summer_cup": "🌞",
    "nations_cup": "🌍",
}


def highlight_key(comp: Competition) -> str:
    """'div1', 'div2', 'cup', ...: chiave usata nel parametro ?highlight=."""
    if comp.type == "league":
        return f"div{comp.division or 1}"
    return comp.type or ""


def parse_season_ref(ref: Any) -> int | None:
    """'season-3' o '3' -> 3."""
    raw = normalize_id(ref)
    if raw.startswith("season-"):
        raw = raw[len("season-"):]
    return int(raw) if raw.isdigit() else None


def _sort_date(value: date | datetime | None) -> date:
    if value is None:
        return date.min
    return value.date() if isinstance(value, datetime) else value


def list_competition_groups(db: Session) -> list[dict[str, Any]]:
    """
    League/cup/supercup della stessa stagione in un'unica card (date dalla
    lega di divisione 1); summer cup e nations cup da sole. Ordine per data
    di inizio desc.
    """
    timer = StepTimer("competitions")
    with timer.step("competitions"):
        competitions = list(db.execute(
            select(Competition).where(Competition.type.in_(SEASON_TYPES + STANDALONE_TYPES))
        ).scalars().all())
        champions = {
            normalize_id(t): t
            for t in repository.rows_by_ids(db, Team, {c.champion_team_id for c in competitions if c.champion_team_id})
        }

    groups: dict[str, dict[str, Any]] = {}
    for comp in competitions:
        if comp.type in SEASON_TYPES:
            season = comp.season if comp.season is not None else "no-season"
            key = f"season-{season}"
            group = groups.setdefault(key, {
                "key": key,
                "season": comp.season,
                "title": f"Season {season}",
                "competitions": [],
                "start_date": None,
                "end_date": None,
            })
            group["competitions"].append(comp)
            if comp.type == "league" and comp.division == 1:
                group["start_date"] = comp.start_date
                group["end_date"] = comp.end_date
        else:
            key = f"{comp.type}-{comp.id}"
            groups[key] = {
                "key": key,
                "season": None,
                "title": TYPE_LABELS[comp.type],
                "competitions": [comp],
                "start_date": comp.start_date,
                "end_date": comp.end_date,
            }

    out = []
    for group in groups.values():
        comps = sorted(group["competitions"], key=lambda c: _COMPETITION_ORDER.get(highlight_key(c), 99))
        first = comps[0]
        out.append({
            **group,
            "competitions": [
                {
                    "id": c.id,
                    "public_id": c.public_id,
                    "highlight": highlight_key(c),
                    "label": f"Div {c.division}" if c.type == "league" else TYPE_LABELS.get(c.type, c.type),
                    "title": competition_title(c),
                    "champion": (
                        champions[normalize_id(c.champion_team_id)].name
                        if normalize_id(c.champion_team_id) in champions else None
                    ),
                    "badge": CHAMPION_BADGES.get(highlight_key(c), ""),
                }
                for c in comps
            ],
            "image": competition_image(first),
            "status": first.status or "Unknown",
            "season_name": season_name_for_date(group["start_date"]),
            "start": format_date(group["start_date"]) or "-",
            "end": format_date(group["end_date"]) or "-",
            "team_count": sum(int(to_number(c.team_count)) for c in comps),
            "match_count": sum(int(to_number(c.match_count)) for c in comps),
            "link": f"/seasons/{group['key']}" if group["season"] is not None else f"/competitions/{first.public_id or first.id}",
        })
    out.sort(key=lambda g: _sort_date(g["start_date"]), reverse=True)
    timer.total()
    return out


def competitions_of_season(db: Session, season: int) -> list[Competition]:
    return list(db.execute(
        select(Competition).where(Competition.season == season).order_by(Competition.id)
    ).scalars().all())


def _top_players(player_competitions: Iterable[Any], field: str, players_by_id: dict, limit: int) -> list[dict]:
    ordered = top_by(player_competitions, lambda pc: getattr(pc, field), limit=limit)
    return [
        {
            "player_id": normalize_id(pc.player_id),
            "public_id": players_by_id[normalize_id(pc.player_id)].public_id if normalize_id(pc.player_id) in players_by_id else None,
            "name": players_by_id[normalize_id(pc.player_id)].name if normalize_id(pc.player_id) in players_by_id else "Player",
            "value": int(to_number(getattr(pc, field))),
        }
        for pc in ordered
    ]


def get_season_summary(db: Session, ref: Any, highlight: str | None = None) -> dict[str, Any] | None:
    """
    Riepilogo di una stagione. Competizione mostrata: quella indicata da
    highlight ('div1', 'cup', ...), altrimenti la prima in ordine standard.
    None se la stagione non ha competizioni.
    """
    season = parse_season_ref(ref)
    if season is None:
        return None
    timer = StepTimer(f"season:{ref}")
    with timer.step("competitions"):
        comps = competitions_of_season(db, season)
    if not comps:
        timer.total()
        return None
    comps.sort(key=lambda c: _COMPETITION_ORDER.get(highlight_key(c), 99))
    comp = next((c for c in comps if highlight and highlight_key(c) == highlight), comps[0])

    with timer.step("competitionData"):
        data = get_competition_data(db, comp)
    timer.total()
    return {
        "season": season,
        "highlight": highlight_key(comp),
        "competitions": [
            {"key": highlight_key(c), "title": competition_title(c), "active": c.id == comp.id}
            for c in comps
        ],
        **data,
    }


def get_competition_data(db: Session, comp: Competition) -> dict[str, Any]:
    """Squadre per punti, partite con nomi, top 7 marcatori, assist e clean sheet (solo GK)."""
    team_competitions = repository.team_competitions_for(db, competition_ids=[comp.id])
    teams_by_id = {normalize_id(t): t for t in repository.rows_by_ids(db, Team, repository.team_ids_of(team_competitions))}
    tc_by_id = {normalize_id(tc): tc for tc in team_competitions}
    matches = sorted(
        repository.matches_for_competitions(db, [comp.id]),
        key=lambda m: (m.date is None, m.date, m.id),
    )
    player_competitions = repository.player_competitions_for(db, team_competition_ids=normalize_ids(team_competitions))
    players_by_id = {normalize_id(p): p for p in repository.rows_by_ids(db, Player, {pc.player_id for pc in player_competitions})}

    teams = [_season_team_row(tc, teams_by_id) for tc in team_competitions]
    teams.sort(key=lambda t: -t.points)

    return {
        "competition": competition_info(comp),
        "teams": teams,
        "matches": [_season_match_row(m, tc_by_id, teams_by_id) for m in matches],
        "statistics": {
            "top_scorers": _top_players(player_competitions, "goals", players_by_id, TOP_SEASON_PLAYERS),
            "top_assists": _top_players(player_competitions, "assists", players_by_id, TOP_SEASON_PLAYERS),
            "top_cs": _top_players(
                [pc for pc in player_competitions if pc.position == "GK"], "cs", players_by_id, TOP_SEASON_PLAYERS
            ),
        },
    }


def _season_team_row(tc, teams_by_id: dict) -> SeasonTeamRow:
    team = teams_by_id.get(normalize_id(tc.team_id))
    return SeasonTeamRow(
        team_competition_id=normalize_id(tc),
        team_id=normalize_id(tc.team_id),
        name=(team.name if team is not None else None) or "Team",
        image=team.image if team is not None else None,
        matches_played=int(to_number(tc.matches_played)),
        won=int(to_number(tc.won)),
        draw=int(to_number(tc.draw)),
        lost=int(to_number(tc.lost)),
        goals_scored=int(to_number(tc.goals_scored)),
        goals_conceded=int(to_number(tc.goals_conceded)),
        points=int(to_number(tc.points)),
    )


def _season_match_row(m, tc_by_id: dict, teams_by_id: dict, highlight: str | None = None, stats=None) -> SeasonMatchRow:
    def name(tc_ref, fallback):
        tc = tc_by_id.get(normalize_id(tc_ref))
        team = teams_by_id.get(normalize_id(tc.team_id)) if tc is not None else None
        return (team.name if team is not None else None) or fallback

    return SeasonMatchRow(
        id=m.id,
        date=m.date,
        team1_competition_id=normalize_id(m.team1_competition_id),
        team2_competition_id=normalize_id(m.team2_competition_id),
        team1_name=name(m.team1_competition_id, "Team A"),
        team2_name=name(m.team2_competition_id, "Team B"),
        score_team1=m.score_team1,
        score_team2=m.score_team2,
        highlighted=bool(highlight) and normalize_id(m) == highlight,
        team_stats=stats or [],
    )


def get_season_api(db: Session, ref: Any, highlight: str | None = None) -> SeasonApiResponse | None:
    """Competizione per id con squadre e partite (statistiche di squadra per partita)."""
    comp = repository.find_competition(db, ref)
    if comp is None:
        return None
    timer = StepTimer(f"season-api:{ref}")
    with timer.step("load"):
        team_competitions = repository.team_competitions_for(db, competition_ids=[comp.id])
        teams_by_id = {normalize_id(t): t for t in repository.rows_by_ids(db, Team, repository.team_ids_of(team_competitions))}
        tc_by_id = {normalize_id(tc): tc for tc in team_competitions}
        matches = sorted(
            repository.matches_for_competitions(db, [comp.id]),
            key=lambda m: (m.date is None, m.date, m.id),
        )
        stats_rows = repository.team_match_stats_for(db, normalize_ids(matches))

    stats_by_match: dict[str, list[SeasonMatchTeamStats]] = {}
    for s in stats_rows:
        stats_by_match.setdefault(normalize_id(s.match_id), []).append(SeasonMatchTeamStats(
            team_competition_id=normalize_id(s.team_competition_id),
            goals_scored=int(to_number(s.goals_scored)),
            goals_conceded=int(to_number(s.goals_conceded)),
            possession=s.possession,
            kicks=int(to_number(s.kicks)),
            passes=int(to_number(s.passes)),
            shots_on_goal=int(to_number(s.shots_on_goal)),
            saves=int(to_number(s.saves)),
        ))

    teams = [_season_team_row(tc, teams_by_id) for tc in team_competitions]
    teams.sort(key=lambda t: -t.points)
    timer.total()
    return SeasonApiResponse(
        competition=competition_info(comp),
        highlight=highlight,
        teams=teams,
        matches=[
            _season_match_row(m, tc_by_id, teams_by_id, highlight=highlight, stats=stats_by_match.get(normalize_id(m)))
            for m in matches
        ],
    )
