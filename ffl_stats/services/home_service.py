"""
Home: conteggi, ultima lega di divisione 1 con classifica, partite recenti
e storiche, ranking globali di giocatori e squadre.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ffl_stats.analytics.formatting import format_date
from ffl_stats.analytics.identifiers import normalize_id
from ffl_stats.analytics.rankings import (
    PLAYER_METRIC_GROUPS,
    TEAM_METRIC_GROUPS,
    build_home_ranking,
    build_team_ranking,
    rankings_by_metric,
)
from ffl_stats.analytics.standings import compute_standings
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import Competition, Match, Player, PlayerCompetition, PlayerMatchStats, Team, TeamCompetition
from ffl_stats.services import repository, totals
from ffl_stats.services.competition_service import match_row

logger = logging.getLogger(__name__)

HOME_MATCHES = 5
STATUS_UPCOMING = "Próximo"
STATUS_FINISHED = "Finalizado"


def _count(db: Session, model) -> int:
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def latest_division_one_league(db: Session) -> Competition | None:
    stmt = (
        select(Competition)
        .where(Competition.type == "league", Competition.division == 1)
        .order_by(Competition.public_id.desc(), Competition.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def match_status(match_date: datetime | None, now: datetime) -> str:
    """Partita futura -> Próximo, altrimenti (o senza data) Finalizado."""
    if match_date is not None and match_date > now:
        return STATUS_UPCOMING
    return STATUS_FINISHED


def _match_rows(db: Session, matches: list[Match]) -> list[dict[str, Any]]:
    tc_ids = {normalize_id(m.team1_competition_id) for m in matches} | {normalize_id(m.team2_competition_id) for m in matches}
    team_competitions = repository.rows_by_ids(db, TeamCompetition, tc_ids - {""})
    tc_by_id = {normalize_id(tc): tc for tc in team_competitions}
    teams_by_id = {normalize_id(t): t for t in repository.rows_by_ids(db, Team, repository.team_ids_of(team_competitions))}
    return [match_row(m, tc_by_id, teams_by_id) for m in matches]


def get_home(db: Session, now: datetime | None = None) -> dict[str, Any]:
    now = now or datetime.now()
    timer = StepTimer("home")

    with timer.step("counts"):
        counts = {
            "teams": _count(db, Team),
            "players": _count(db, Player),
            "matches": _count(db, Match),
            "competitions": _count(db, Competition),
        }

    with timer.step("matches"):
        historic = list(db.execute(
            select(Match)
            .where(func.lower(Match.comments).contains("historic"))
            .order_by(Match.date.desc().nulls_last(), Match.id.desc())
            .limit(HOME_MATCHES)
        ).scalars().all())
        recent = list(db.execute(
            select(Match).order_by(Match.date.desc().nulls_last(), Match.id.desc()).limit(HOME_MATCHES)
        ).scalars().all())
        historic_rows = _match_rows(db, historic)
        recent_rows = _match_rows(db, recent)
        for row in recent_rows:
            row["status"] = match_status(row["raw_date"], now)

    with timer.step("latestLeague"):
        league = latest_division_one_league(db)
        standings = []
        if league is not None:
            league_tcs = repository.team_competitions_for(db, competition_ids=[league.id])
            league_teams = {
                normalize_id(t): t for t in repository.rows_by_ids(db, Team, repository.team_ids_of(league_tcs))
            }
            standings = compute_standings(league_tcs, repository.matches_for_competitions(db, [league.id]), league_teams)

    with timer.step("totals"):
        all_pcs = repository.all_rows(db, PlayerCompetition, order_by=PlayerCompetition.id)
        all_tcs = repository.all_rows(db, TeamCompetition, order_by=TeamCompetition.id)
        players_by_id = {normalize_id(p): p for p in repository.all_rows(db, Player)}
        teams_by_id = {normalize_id(t): t for t in repository.all_rows(db, Team)}
        stat_rows = repository.all_rows(db, PlayerMatchStats, order_by=PlayerMatchStats.id)
        goals = repository.goals_for(db)
        pc_to_player = {normalize_id(pc): normalize_id(pc.player_id) for pc in all_pcs}
        player_rows = totals.player_totals(
            all_pcs,
            players_by_id,
            {normalize_id(tc): tc for tc in all_tcs},
            teams_by_id,
            feats=totals.scoring_feats(stat_rows, pc_to_player),
            team_goals=totals.team_goals_by_player(stat_rows, goals, pc_to_player),
        )
        team_rows = totals.team_totals(all_tcs, teams_by_id, weighted_possession=True)

    with timer.step("rankings"):
        player_rankings = rankings_by_metric(PLAYER_METRIC_GROUPS, player_rows, build_home_ranking)
        team_rankings = rankings_by_metric(TEAM_METRIC_GROUPS, team_rows, build_team_ranking)

    timer.total()
    season_value = None
    if league is not None:
        season_value = league.season if league.season is not None else league.public_id
    return {
        "counts": counts,
        "latest_league": league,
        "latest_league_href": f"/competitions/{league.public_id or league.id}" if league is not None else "/competitions",
        "latest_season_label": f"Season {season_value}" if season_value is not None else "Season",
        "standings": [dict(position=i + 1, **row.as_dict()) for i, row in enumerate(standings)],
        "historic_matches": historic_rows,
        "recent_matches": recent_rows,
        "player_rankings": player_rankings,
        "team_rankings": team_rankings,
        "player_metric_groups": PLAYER_METRIC_GROUPS,
        "team_metric_groups": TEAM_METRIC_GROUPS,
        "today": format_date(now),
    }
