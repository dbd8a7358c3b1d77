"""
Dettaglio competizione: partecipanti, classifica, partite, totali giocatori
e squadre, statistiche generali e ranking per metrica.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from ffl_stats.analytics.aggregation import is_number, paginate, safe_divide, to_number
from ffl_stats.analytics.formatting import (
    competition_image,
    competition_title,
    format_date,
    status_label,
    type_label,
)
from ffl_stats.analytics.identifiers import normalize_id, normalize_ids
from ffl_stats.analytics.rankings import (
    PLAYER_METRIC_GROUPS,
    TEAM_METRIC_GROUPS,
    build_competition_ranking,
    build_team_ranking,
    rankings_by_metric,
)
from ffl_stats.analytics.standings import compute_standings
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import Player, Team
from ffl_stats.schemas.competitions import CompetitionInfo, StandingRowOut, StandingsResponse
from ffl_stats.services import repository, totals

logger = logging.getLogger(__name__)

MATCHES_PER_PAGE = 7
TOP_SCORING_MATCHES = 10


def competition_info(comp) -> CompetitionInfo:
    return CompetitionInfo(
        id=comp.id,
        public_id=comp.public_id,
        name=comp.name or competition_title(comp),
        title=competition_title(comp),
        type=comp.type,
        type_label=type_label(comp.type),
        status=comp.status,
        status_label=status_label(comp.status),
        season=comp.season,
        division=comp.division,
        start_date=format_date(comp.start_date) or None,
        end_date=format_date(comp.end_date) or None,
        image=competition_image(comp),
    )


def match_row(match, tc_by_id: dict[str, Any], teams_by_id: dict[str, Any]) -> dict[str, Any]:
    """Riga partita per tabelle: nomi squadra con fallback 'Team A' / 'Team B'."""
    def side(tc_ref, fallback):
        tc = tc_by_id.get(normalize_id(tc_ref))
        team = teams_by_id.get(normalize_id(tc.team_id)) if tc is not None else None
        return {
            "id": normalize_id(team) if team is not None else "",
            "public_id": team.public_id if team is not None else None,
            "name": (team.name if team is not None else None) or fallback,
            "image": (team.image if team is not None else None) or "",
        }

    score1 = match.score_team1 if is_number(match.score_team1) else None
    score2 = match.score_team2 if is_number(match.score_team2) else None
    return {
        "id": match.id,
        "date": format_date(match.date),
        "raw_date": match.date,
        "team_a": side(match.team1_competition_id, "Team A"),
        "team_b": side(match.team2_competition_id, "Team B"),
        "score_a": score1,
        "score_b": score2,
        "comments": match.comments or "",
    }


def top_scoring_matches(rows: list[dict[str, Any]], limit: int = TOP_SCORING_MATCHES) -> list[dict[str, Any]]:
    """Partite con più gol; quelle senza punteggio numerico restano fuori."""
    scored = [r for r in rows if r["score_a"] is not None and r["score_b"] is not None]
    for r in scored:
        r["total"] = r["score_a"] + r["score_b"]
    return sorted(scored, key=lambda r: -r["total"])[:limit]


def competition_stats(participants: int, matches: list, standings: list, team_rows: list[dict]) -> dict[str, Any]:
    total_goals = sum(row.goals_scored for row in standings)
    deffwin = sum(1 for m in matches if "deffwin" in (m.comments or "").lower())
    return {
        "teams": participants,
        "matches": len(matches),
        "goals": total_goals,
        "goals_per_match": safe_divide(total_goals, len(matches)),
        "clean_sheets": int(sum(to_number(t.get("cs")) for t in team_rows)),
        "deffwin_matches": deffwin,
        "deffwin_rate": safe_divide(deffwin, len(matches)),
    }


def _load(db: Session, comp, timer: StepTimer) -> dict[str, Any]:
    with timer.step("teamCompetitions"):
        team_competitions = repository.team_competitions_for(db, competition_ids=[comp.id])
    tc_ids = normalize_ids(team_competitions)
    with timer.step("matches"):
        matches = sorted(
            repository.matches_for_competitions(db, [comp.id]),
            key=lambda m: (m.date is None, m.date, m.id),
        )
    with timer.step("teams"):
        teams = repository.rows_by_ids(db, Team, repository.team_ids_of(team_competitions))
    return {"team_competitions": team_competitions, "tc_ids": tc_ids, "matches": matches, "teams": teams}


def get_competition_standings(db: Session, ref: Any) -> StandingsResponse | None:
    comp = repository.find_competition(db, ref)
    if comp is None:
        return None
    timer = StepTimer(f"competition-standings:{ref}")
    data = _load(db, comp, timer)
    table = compute_standings(
        data["team_competitions"], data["matches"], {normalize_id(t): t for t in data["teams"]}
    )
    timer.total()
    return StandingsResponse(
        competition=competition_info(comp),
        standings=[StandingRowOut(position=i + 1, **row.as_dict()) for i, row in enumerate(table)],
    )


def get_competition_detail(db: Session, ref: Any, matches_page: Any = 1) -> dict[str, Any] | None:
    """Contesto completo della pagina competizione. None se non esiste."""
    comp = repository.find_competition(db, ref)
    if comp is None:
        return None
    timer = StepTimer(f"competition:{ref}")
    data = _load(db, comp, timer)
    team_competitions = data["team_competitions"]
    teams_by_id = {normalize_id(t): t for t in data["teams"]}
    tc_by_id = {normalize_id(tc): tc for tc in team_competitions}

    participants = []
    seen_teams: set[str] = set()
    for tc in team_competitions:
        team = teams_by_id.get(normalize_id(tc.team_id))
        if team is None or normalize_id(team) in seen_teams:
            continue
        seen_teams.add(normalize_id(team))
        participants.append({
            "id": normalize_id(team),
            "public_id": team.public_id,
            "name": team.name or "Team",
            "image": team.image or "",
            "country": team.country or "",
        })

    with timer.step("standings"):
        standings = compute_standings(team_competitions, data["matches"], teams_by_id)

    with timer.step("playerCompetitions"):
        player_competitions = repository.player_competitions_for(db, team_competition_ids=data["tc_ids"])
        stat_rows = repository.player_match_stats_for(db, player_competition_ids=normalize_ids(player_competitions))
        goals = repository.goals_for(db, match_ids=normalize_ids(data["matches"]))
        players = repository.rows_by_ids(db, Player, {pc.player_id for pc in player_competitions})

    with timer.step("totals"):
        pc_to_player = {normalize_id(pc): normalize_id(pc.player_id) for pc in player_competitions}
        player_rows = totals.player_totals(
            player_competitions,
            {normalize_id(p): p for p in players},
            tc_by_id,
            teams_by_id,
            feats=totals.scoring_feats(stat_rows, pc_to_player),
            team_goals=totals.team_goals_by_player(stat_rows, goals, pc_to_player),
        )
        team_rows = totals.team_totals(team_competitions, teams_by_id)

    with timer.step("rankings"):
        player_rankings = rankings_by_metric(PLAYER_METRIC_GROUPS, player_rows, build_competition_ranking)
        team_rankings = rankings_by_metric(TEAM_METRIC_GROUPS, team_rows, build_team_ranking)

    match_rows = [match_row(m, tc_by_id, teams_by_id) for m in data["matches"]]
    page = paginate(match_rows, matches_page, MATCHES_PER_PAGE)
    stats = competition_stats(len(participants), data["matches"], standings, team_rows)

    timer.total()
    return {
        "competition": competition_info(comp),
        "subtitle": (comp.type or "competition").replace("_", " "),
        "participants": participants,
        "standings": [dict(position=i + 1, **row.as_dict()) for i, row in enumerate(standings)],
        "matches": page,
        "top_matches": top_scoring_matches([dict(r) for r in match_rows]),
        "stats": stats,
        "players": player_rows,
        "teams": team_rows,
        "player_rankings": player_rankings,
        "team_rankings": team_rankings,
        "player_metric_groups": PLAYER_METRIC_GROUPS,
        "team_metric_groups": TEAM_METRIC_GROUPS,
    }
