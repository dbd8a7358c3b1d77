"""
Pagina giocatore: totali su tutte le player-competition (media voto pesata
sulle partite), tab per competizione principale con filtri stagione della
stessa squadra, serie partite con posizione e riepiloghi dei grafici
limitati al tab attivo.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from ffl_stats.analytics.aggregation import derive, group_sum, index_by, paginate, safe_divide, to_number
from ffl_stats.analytics.formatting import competition_label, format_date, format_minutes_seconds, tab_label
from ffl_stats.analytics.identifiers import normalize_id, normalize_ids
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import Competition, Match, Team, TeamCompetition
from ffl_stats.models.mixins import PLAYER_COUNTER_FIELDS
from ffl_stats.services import repository
from ffl_stats.services.cache import get_team_competition_team_map
from ffl_stats.services.player_graphs_service import build_player_graphs, summarize_graph
from ffl_stats.services.team_service import MAIN_TAB_TYPES, SEASON_FILTERS, limit_series, outcome
from ffl_stats.services.totals import PLAYER_TOTAL_FIELDS

logger = logging.getLogger(__name__)

MATCH_LIST_PAGE_SIZE = 9


def player_stats_block(player_competitions: list[Any]) -> dict[str, Any]:
    """Contatori sommati; avg pesata sulle partite giocate."""
    acc = group_sum(player_competitions, key_fn=lambda _pc: "all", fields=PLAYER_TOTAL_FIELDS).get("all")
    if acc is None:
        out = {name: 0 for name in PLAYER_TOTAL_FIELDS}
        out.update(avg=0, win_rate=0, minutes_label=format_minutes_seconds(0))
        return out
    derive(
        acc,
        avg=lambda a: safe_divide(
            sum(to_number(pc.avg) * to_number(pc.matches_played) for pc in a.rows),
            a.totals["matches_played"],
        ),
        win_rate=lambda a: safe_divide(a.totals["won"], a.totals["matches_played"]),
        minutes_label=lambda a: format_minutes_seconds(a.totals["minutes_played"]),
    )
    return acc.as_dict()


def player_tabs(
    player_competitions: list[Any],
    tc_by_id: dict[str, Any],
    competitions_by_id: dict[str, Competition],
    teams_by_id: dict[str, Team],
) -> list[dict[str, Any]]:
    """
    Tab per lega / summer cup / nations cup, data di inizio desc. Etichetta
    "Squadra - Season S - Div D". Filtri stagione solo sulle righe della
    stessa squadra e stagione.
    """
    def context(pc):
        tc = tc_by_id.get(normalize_id(pc.team_competition_id))
        if tc is None:
            return None, None
        return tc, competitions_by_id.get(normalize_id(tc.competition_id))

    def start(pc) -> int:
        comp = context(pc)[1]
        return comp.start_date.toordinal() if comp.start_date else 0

    main = [pc for pc in player_competitions if context(pc)[1] is not None and context(pc)[1].type in MAIN_TAB_TYPES]
    main.sort(key=start, reverse=True)

    tabs = []
    for pc in main:
        tc, comp = context(pc)
        team = teams_by_id.get(normalize_id(tc.team_id))
        tab: dict[str, Any] = {
            "id": normalize_id(pc),
            "label": tab_label(team.name if team is not None else None, comp, lowercase_cups=True),
            "logo": (team.image if team is not None else None) or "",
            "stats": player_stats_block([pc]),
            "player_competition_id": normalize_id(pc),
        }
        if comp.type == "league" and comp.season is not None and team is not None:
            season_rows = []
            for item in player_competitions:
                item_tc, item_comp = context(item)
                if (
                    item_comp is not None
                    and normalize_id(item_tc.team_id) == normalize_id(team)
                    and item_comp.season == comp.season
                    and item_comp.type in ("league", "cup", "supercup")
                ):
                    season_rows.append(item)
            by_filter = {"all": season_rows}
            for kind in ("league", "cup", "supercup"):
                by_filter[kind] = [r for r in season_rows if context(r)[1].type == kind]
            tab["season_filters"] = {name: player_stats_block(rows) for name, rows in by_filter.items()}
            tab["season_filter_ids"] = {name: [normalize_id(r) for r in rows] for name, rows in by_filter.items()}
        tabs.append(tab)
    return tabs


def _series_row(stat, match, tc_to_team, teams_by_id, competitions_by_id) -> dict[str, Any] | None:
    pc_id = normalize_id(stat.player_competition_id)
    if match is None or match.date is None or not pc_id:
        return None
    own_tc = normalize_id(stat.team_competition_id)

    def side(tc_ref, fallback):
        team = teams_by_id.get(tc_to_team.get(normalize_id(tc_ref), ""))
        return (team.name if team is not None else None) or fallback, (team.image if team is not None else None) or ""

    team_a, image_a = side(match.team1_competition_id, "Team A")
    team_b, image_b = side(match.team2_competition_id, "Team B")
    score_a = to_number(match.score_team1)
    score_b = to_number(match.score_team2)
    if own_tc and normalize_id(match.team1_competition_id) == own_tc:
        own, other = score_a, score_b
    elif own_tc and normalize_id(match.team2_competition_id) == own_tc:
        own, other = score_b, score_a
    else:
        own, other = 0, 0
    comp = competitions_by_id.get(normalize_id(match.competition_id))
    stats = {name: to_number(getattr(stat, name)) for name in PLAYER_COUNTER_FIELDS}
    stats["avg"] = to_number(stat.avg)
    return {
        "match_id": normalize_id(match),
        "player_competition_id": pc_id,
        "competition_id": normalize_id(match.competition_id),
        "date": match.date,
        "date_label": format_date(match.date),
        "match_label": f"{team_a} - {team_b}",
        "competition_label": competition_label(comp) if comp is not None else "",
        "team_a": team_a,
        "team_b": team_b,
        "team_a_image": image_a,
        "team_b_image": image_b,
        "score_a": int(score_a),
        "score_b": int(score_b),
        "outcome": outcome(own, other),
        "position": stat.position or "",
        "stats": stats,
    }


def get_player_detail(
    db: Session,
    ref: Any,
    tab: str | None = None,
    season_filter: str | None = None,
    outcome_filter: str | None = None,
    matches_page: Any = 1,
) -> dict[str, Any] | None:
    """Contesto pagina giocatore. None se il giocatore non esiste."""
    timer = StepTimer(f"player:{ref}")
    with timer.step("player"):
        player = repository.find_player(db, ref)
    if player is None:
        timer.total()
        return None

    with timer.step("playerCompetitions"):
        player_competitions = repository.player_competitions_for(db, player_ids=[player.id])
        tc_by_id = index_by(repository.rows_by_ids(
            db, TeamCompetition, {pc.team_competition_id for pc in player_competitions}
        ))
        competitions_by_id = index_by(
            repository.rows_by_ids(db, Competition, {tc.competition_id for tc in tc_by_id.values()})
        )
        own_teams = index_by(repository.rows_by_ids(db, Team, repository.team_ids_of(tc_by_id.values())))

    pc_ids = [normalize_id(pc) for pc in player_competitions]
    total_stats = player_stats_block(player_competitions)
    match_limits = {normalize_id(pc): int(to_number(pc.matches_played)) for pc in player_competitions}
    tabs = player_tabs(player_competitions, tc_by_id, competitions_by_id, own_teams)

    active_tab = next((t for t in tabs if tab and t["id"] == tab), None)
    active_filter = "all"
    scope: set[str] | None = None
    stats = total_stats
    if active_tab is not None:
        if "season_filter_ids" in active_tab:
            active_filter = season_filter if season_filter in SEASON_FILTERS else "all"
            scope = set(active_tab["season_filter_ids"][active_filter])
            stats = active_tab["season_filters"][active_filter]
        else:
            scope = {active_tab["player_competition_id"]}
            stats = active_tab["stats"]

    with timer.step("matchStats"):
        stat_rows = repository.player_match_stats_for(db, player_competition_ids=pc_ids)
        matches_by_id = index_by(repository.rows_by_ids(db, Match, {s.match_id for s in stat_rows}))
        tc_to_team = get_team_competition_team_map(db)
        side_team_ids = {
            tc_to_team.get(normalize_id(side), "")
            for m in matches_by_id.values()
            for side in (m.team1_competition_id, m.team2_competition_id)
        } - {""}
        teams_by_id = {**index_by(repository.rows_by_ids(db, Team, side_team_ids)), **own_teams}
        match_comps = index_by(
            repository.rows_by_ids(db, Competition, {m.competition_id for m in matches_by_id.values()})
        )

    with timer.step("series"):
        series = [
            row for row in (
                _series_row(s, matches_by_id.get(normalize_id(s.match_id)), tc_to_team, teams_by_id, match_comps)
                for s in stat_rows
            )
            if row is not None
        ]
        if scope is None:
            filtered_series = sorted(series, key=lambda s: s["date"])
        else:
            filtered_series = limit_series(
                series, [i for i in pc_ids if i in scope], match_limits, key="player_competition_id"
            )
        match_list = sorted(
            (s for s in filtered_series if outcome_filter in ("win", "draw", "loss") and s["outcome"] == outcome_filter),
            key=lambda s: s["date"],
            reverse=True,
        )

    graphs = build_player_graphs(db, player_competitions, timer)
    with timer.step("graphSummaries"):
        summaries = {
            "goals_by_opponent": summarize_graph(
                graphs.goals_by_opponent, "opponent_id", "opponent_name", scope=scope, image_field="opponent_image"
            ),
            "assists_by_player": summarize_graph(
                graphs.assists_by_player, "assisted_id", "assisted_name", scope=scope, image_field="assisted_avatar"
            ),
            "preassists_by_player": summarize_graph(
                graphs.preassists_by_player, "assisted_id", "assisted_name", scope=scope, image_field="assisted_avatar"
            ),
            "goals_by_team": summarize_graph(
                graphs.goals_by_team, "team_id", "team_name", "goals", scope=scope, image_field="team_image"
            ),
            "assists_by_team": summarize_graph(
                graphs.assists_by_team, "team_id", "team_name", "assists", scope=scope, image_field="team_image"
            ),
            "preassists_by_team": summarize_graph(
                graphs.preassists_by_team, "team_id", "team_name", "preassists", scope=scope, image_field="team_image"
            ),
            "kicks_by_opponent": summarize_graph(
                graphs.kicks_by_opponent, "opponent_id", "opponent_name", "kicks", scope=scope, image_field="opponent_image"
            ),
            "goals_conceded_by_opponent": summarize_graph(
                graphs.goals_conceded_by_opponent, "opponent_id", "opponent_name", "goals_conceded",
                scope=scope, image_field="opponent_image",
            ),
            "gk_partners": summarize_graph(
                graphs.gk_partners, "keeper_player_id", "keeper_name", "cs", scope=scope, image_field="keeper_avatar"
            ),
        }

    is_goalkeeper = any((pc.position or "").upper() == "GK" for pc in player_competitions)
    timer.total()
    return {
        "player": player,
        "total_stats": total_stats,
        "stats": stats,
        "win_rate_label": f"{round(stats['win_rate'] * 100)}%",
        "tabs": tabs,
        "active_tab": active_tab,
        "active_filter": active_filter,
        "season_filters": SEASON_FILTERS,
        "match_limits": match_limits,
        "match_series": filtered_series,
        "outcome_filter": outcome_filter,
        "match_list": paginate(match_list, matches_page, MATCH_LIST_PAGE_SIZE),
        "graphs": summaries,
        "is_goalkeeper": is_goalkeeper,
        "player_competition_ids": sorted(normalize_ids(player_competitions)),
    }
