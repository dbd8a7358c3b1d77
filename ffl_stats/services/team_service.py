"""
Servizio squadre: ricerca/lista e dettaglio singola squadra.

Dettaglio: totali su tutte le team-competition (possesso pesato sulle
partite), un tab per lega / summer cup / nations cup con filtri stagione,
serie partite da team_match_stats e liste per avversario e per giocatore.
Le liste sono righe evento con team_competition_id: il tab attivo
seleziona le team-competition da sommare.
"""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ffl_stats.analytics.aggregation import group_sum, index_by, paginate, safe_divide, to_number
from ffl_stats.analytics.formatting import competition_label, competition_title, format_date
from ffl_stats.analytics.identifiers import normalize_id, normalize_ids
from ffl_stats.analytics.lineups import build_lineup
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import Competition, Match, Player, PlayerCompetition, Team
from ffl_stats.schemas.teams import TeamListResponse, TeamListRow
from ffl_stats.services import repository, totals
from ffl_stats.services.cache import get_team_competition_team_map
from ffl_stats.services.player_graphs_service import opponent_side, summarize_graph

logger = logging.getLogger(__name__)

TEAMS_PER_PAGE = 24
MAIN_TAB_TYPES = ("league", "summer_cup", "nations_cup")
SEASON_FILTERS = ("all", "league", "cup", "supercup")
MATCH_LIST_PAGE_SIZE = 9
ROSTER_PAGE_SIZE = 14
POSITION_ORDER = {p: i for i, p in enumerate(("GK", "LB", "CB", "RB", "DM", "CM", "AM", "LW", "RW", "ST"))}


# ---------------------------------------------------------------------------
# Lista squadre
# ---------------------------------------------------------------------------


def search_teams(
    db: Session,
    q: str | None = None,
    country: str | None = None,
    sort: str | None = None,
    page: Any = 1,
    per_page: int = TEAMS_PER_PAGE,
) -> TeamListResponse:
    """Ricerca per nome (case insensitive), filtro paese, ordinamento per nome, paginazione."""
    timer = StepTimer("teams")
    stmt = select(Team)
    if q and q.strip():
        stmt = stmt.where(func.lower(Team.name).contains(q.strip().lower()))
    if country:
        stmt = stmt.where(Team.country == country)
    order = Team.name.desc() if sort == "name_desc" else Team.name.asc()
    with timer.step("search"):
        rows = list(db.execute(stmt.order_by(order, Team.id)).scalars().all())
        countries = sorted(
            c for c in db.execute(select(Team.country).distinct()).scalars().all() if c
        )
    result = paginate(rows, page, per_page)
    timer.total()
    return TeamListResponse(
        teams=[TeamListRow.model_validate(t) for t in result.items],
        page=result.page,
        total_pages=result.total_pages,
        total=result.total,
        countries=countries,
    )


# ---------------------------------------------------------------------------
# Tab e filtri stagione
# ---------------------------------------------------------------------------


def _start_time(comp: Competition | None) -> int:
    if comp is None or comp.start_date is None:
        return 0
    return comp.start_date.toordinal()


def stats_block(team_competitions: list[Any]) -> dict[str, Any]:
    """Totali di un gruppo di team-competition con win rate."""
    block = totals.sum_team_competitions(team_competitions, weighted_possession=True)
    block["win_rate"] = safe_divide(block["won"], block["matches_played"])
    return block


def competition_tabs(team_competitions: list[Any], competitions_by_id: dict[str, Competition]) -> list[dict[str, Any]]:
    """
    Un tab per team-competition di lega, summer cup o nations cup, data di
    inizio desc. I tab di lega hanno i filtri all/league/cup/supercup
    sulle team-competition della stessa stagione.
    """
    def comp_of(tc):
        return competitions_by_id.get(normalize_id(tc.competition_id))

    main = [tc for tc in team_competitions if comp_of(tc) is not None and comp_of(tc).type in MAIN_TAB_TYPES]
    main.sort(key=lambda tc: _start_time(comp_of(tc)), reverse=True)

    tabs = []
    for tc in main:
        comp = comp_of(tc)
        tab: dict[str, Any] = {
            "id": normalize_id(tc),
            "label": competition_title(comp),
            "type": comp.type,
            "stats": stats_block([tc]),
            "team_competition_id": normalize_id(tc),
        }
        if comp.type == "league" and comp.season is not None:
            season_rows = [
                item for item in team_competitions
                if comp_of(item) is not None
                and comp_of(item).season == comp.season
                and comp_of(item).type in ("league", "cup", "supercup")
            ]
            by_filter = {
                "all": season_rows,
                "league": [r for r in season_rows if comp_of(r).type == "league"],
                "cup": [r for r in season_rows if comp_of(r).type == "cup"],
                "supercup": [r for r in season_rows if comp_of(r).type == "supercup"],
            }
            tab["season_filters"] = {name: stats_block(rows) for name, rows in by_filter.items()}
            tab["season_filter_ids"] = {name: [normalize_id(r) for r in rows] for name, rows in by_filter.items()}
        tabs.append(tab)
    return tabs


def resolve_scope(tabs: list[dict[str, Any]], tab_id: str | None, season_filter: str | None) -> tuple[dict | None, str, set[str] | None]:
    """
    Tab attivo, filtro effettivo e team-competition selezionate.
    Nessun tab (o tab sconosciuto) -> totale, scope None.
    """
    tab = next((t for t in tabs if tab_id and t["id"] == tab_id), None)
    if tab is None:
        return None, "all", None
    flt = season_filter if season_filter in SEASON_FILTERS else "all"
    if "season_filter_ids" in tab:
        return tab, flt, set(tab["season_filter_ids"][flt])
    return tab, "all", {tab["team_competition_id"]}


# ---------------------------------------------------------------------------
# Serie partite
# ---------------------------------------------------------------------------


def outcome(team_score: float, opponent_score: float) -> str:
    if team_score > opponent_score:
        return "win"
    if team_score < opponent_score:
        return "loss"
    return "draw"


def _series_row(stat, match, tc_to_team, teams_by_id, competitions_by_id) -> dict[str, Any] | None:
    tc_id = normalize_id(stat.team_competition_id)
    if match is None or match.date is None or not tc_id:
        return None

    def side(tc_ref, fallback):
        team = teams_by_id.get(tc_to_team.get(normalize_id(tc_ref), ""))
        return (team.name if team is not None else None) or fallback, (team.image if team is not None else None) or ""

    team_a, image_a = side(match.team1_competition_id, "Team A")
    team_b, image_b = side(match.team2_competition_id, "Team B")
    score_a = to_number(match.score_team1)
    score_b = to_number(match.score_team2)
    if normalize_id(match.team1_competition_id) == tc_id:
        own, other = score_a, score_b
    elif normalize_id(match.team2_competition_id) == tc_id:
        own, other = score_b, score_a
    else:
        own, other = 0, 0
    comp = competitions_by_id.get(normalize_id(match.competition_id))
    return {
        "match_id": normalize_id(match),
        "team_competition_id": tc_id,
        "competition_type": comp.type if comp is not None else "",
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
        "stats": {
            "goals_scored": int(to_number(stat.goals_scored)),
            "goals_conceded": int(to_number(stat.goals_conceded)),
            "saves": int(to_number(stat.saves)),
            "cs": int(to_number(stat.cs)),
            "points": int(to_number(stat.points)),
            "possession": to_number(stat.possession),
            "kicks": int(to_number(stat.kicks)),
            "passes": int(to_number(stat.passes)),
            "shots_on_goal": int(to_number(stat.shots_on_goal)),
            "matches_played": 1,
            "won": 1 if stat.won else 0,
            "draw": 1 if stat.draw else 0,
            "lost": 1 if stat.lost else 0,
        },
    }


def limit_series(
    series: list[dict[str, Any]],
    ids: list[str],
    match_limits: dict[str, int],
    key: str = "team_competition_id",
) -> list[dict[str, Any]]:
    """
    Per ogni aggregato (team- o player-competition) le ultime N partite,
    N = partite giocate registrate sull'aggregato (0 -> tutte).
    """
    out = []
    for ref in ids:
        items = sorted((s for s in series if s[key] == ref), key=lambda s: s["date"])
        limit = match_limits.get(ref, len(items))
        out.extend(items[-limit:] if limit > 0 else items)
    return out


def league_points_summary(series: list[dict[str, Any]]) -> dict[str, Any]:
    league = [s for s in series if s["competition_type"] == "league"]
    points = sum(s["stats"]["points"] for s in league)
    return {
        "matches": len(league),
        "points": points,
        "max_points": len(league) * 3,
        "rate": safe_divide(points * 100, len(league) * 3),
        "won": sum(s["stats"]["won"] for s in league),
        "draw": sum(s["stats"]["draw"] for s in league),
        "lost": sum(s["stats"]["lost"] for s in league),
    }


# ---------------------------------------------------------------------------
# Rosa
# ---------------------------------------------------------------------------


def roster_summary(roster: list[dict[str, Any]], scope: set[str] | None) -> list[dict[str, Any]]:
    """Un giocatore per riga: partite sommate, posizione della riga con più partite."""
    selected = [r for r in roster if scope is None or r["team_competition_id"] in scope]
    groups = group_sum(selected, key_fn=lambda r: r["player_id"], fields=("matches_played",))
    rows = []
    for acc in groups.values():
        main = max(acc.rows, key=lambda r: r["matches_played"])
        rows.append({
            "player_id": acc.key,
            "public_id": main["public_id"],
            "name": main["name"],
            "avatar": main["avatar"],
            "country": main["country"],
            "position": main["position"],
            "matches_played": int(acc.totals["matches_played"]),
        })
    rows.sort(key=lambda r: (POSITION_ORDER.get(r["position"], 99), -r["matches_played"]))
    return rows


def historic_seven(roster: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """I 7 con più presenze; se manca un GK il migliore GK prende il settimo posto."""
    ordered = sorted(roster, key=lambda r: -r["matches_played"])
    top = ordered[:7]
    if any(r["position"] == "GK" for r in top):
        return top
    best_gk = next((r for r in ordered if r["position"] == "GK"), None)
    if best_gk is None:
        return top
    return top[:6] + [best_gk]


# ---------------------------------------------------------------------------
# Dettaglio
# ---------------------------------------------------------------------------


def get_team_detail(
    db: Session,
    ref: Any,
    tab: str | None = None,
    season_filter: str | None = None,
    outcome_filter: str | None = None,
    matches_page: Any = 1,
    roster_page: Any = 1,
) -> dict[str, Any] | None:
    """Contesto pagina squadra. None se la squadra non esiste."""
    timer = StepTimer(f"team:{ref}")
    with timer.step("team"):
        team = repository.find_team(db, ref)
    if team is None:
        timer.total()
        return None

    with timer.step("teamCompetitions"):
        team_competitions = repository.team_competitions_for(db, team_ids=[team.id])
        competitions_by_id = index_by(
            repository.rows_by_ids(db, Competition, {tc.competition_id for tc in team_competitions})
        )
    tc_ids = [normalize_id(tc) for tc in team_competitions]
    own_tc_ids = set(tc_ids)

    total_stats = stats_block(team_competitions)
    match_limits = {normalize_id(tc): int(to_number(tc.matches_played)) for tc in team_competitions}
    tabs = competition_tabs(team_competitions, competitions_by_id)
    active_tab, active_filter, scope = resolve_scope(tabs, tab, season_filter)
    if active_tab is None:
        stats = total_stats
    elif "season_filters" in active_tab:
        stats = active_tab["season_filters"][active_filter]
    else:
        stats = active_tab["stats"]

    with timer.step("matchStats"):
        stat_rows = repository.team_match_stats_for_team_competitions(db, tc_ids)
        matches_by_id = index_by(repository.rows_by_ids(db, Match, {s.match_id for s in stat_rows}))
        tc_to_team = get_team_competition_team_map(db)
        side_team_ids = {
            tc_to_team.get(normalize_id(ref_), "")
            for m in matches_by_id.values()
            for ref_ in (m.team1_competition_id, m.team2_competition_id)
        } - {""}
        teams_by_id = index_by(repository.rows_by_ids(db, Team, side_team_ids | {normalize_id(team)}))
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
            filtered_series = limit_series(series, [i for i in tc_ids if i in scope], match_limits)

        goals_by_opponent, conceded_by_opponent = [], []
        for s in stat_rows:
            match = matches_by_id.get(normalize_id(s.match_id))
            tc_id = normalize_id(s.team_competition_id)
            if match is None or not tc_id:
                continue
            opponent_tc = opponent_side(match, tc_id)
            if not opponent_tc:
                continue
            opponent = teams_by_id.get(tc_to_team.get(opponent_tc, ""))
            base = {
                "team_competition_id": tc_id,
                "opponent_id": tc_to_team.get(opponent_tc, ""),
                "opponent_name": (opponent.name if opponent is not None else None) or "Team",
                "opponent_image": (opponent.image if opponent is not None else None) or "",
                "match_id": normalize_id(match),
            }
            goals_by_opponent.append({**base, "goals": int(to_number(s.goals_scored))})
            conceded_by_opponent.append({**base, "goals_conceded": int(to_number(s.goals_conceded))})

    with timer.step("players"):
        player_stats = repository.player_match_stats_for(db, team_competition_ids=tc_ids)
        roster_pcs = repository.player_competitions_for(db, team_competition_ids=tc_ids)
        match_goals = repository.goals_for(db, match_ids=matches_by_id.keys()) if matches_by_id else []
        pc_ids = (
            {normalize_id(r.player_competition_id) for r in player_stats}
            | normalize_ids(roster_pcs)
            | {normalize_id(g.scorer_id) for g in match_goals}
        ) - {""}
        pcs_by_id = index_by(repository.rows_by_ids(db, PlayerCompetition, pc_ids))
        players_by_id = index_by(repository.rows_by_ids(db, Player, {pc.player_id for pc in pcs_by_id.values()}))

    def player_fields(pc_id: str) -> dict[str, Any] | None:
        pc = pcs_by_id.get(pc_id)
        player = players_by_id.get(normalize_id(pc.player_id)) if pc is not None else None
        if player is None:
            return None
        return {
            "player_id": normalize_id(player),
            "public_id": player.public_id,
            "name": player.name or "Player",
            "avatar": player.avatar or "",
        }

    with timer.step("shape"):
        top_scorers, matches_by_player = [], []
        for r in player_stats:
            fields = player_fields(normalize_id(r.player_competition_id))
            tc_id = normalize_id(r.team_competition_id)
            if fields is None or not tc_id:
                continue
            top_scorers.append({**fields, "team_competition_id": tc_id, "goals": int(to_number(r.goals))})
            matches_by_player.append({**fields, "team_competition_id": tc_id, "matches": 1})

        conceding_scorers = []
        for g in match_goals:
            match = matches_by_id.get(normalize_id(g.match_id))
            fields = player_fields(normalize_id(g.scorer_id))
            scoring_tc = normalize_id(g.team_competition_id)
            if match is None or fields is None or not scoring_tc:
                continue
            conceding_tc = opponent_side(match, scoring_tc)
            if conceding_tc not in own_tc_ids:
                continue
            conceding_scorers.append({**fields, "team_competition_id": conceding_tc, "goals": 1})

        roster = []
        for pc in roster_pcs:
            fields = player_fields(normalize_id(pc))
            if fields is None:
                continue
            player = players_by_id[fields["player_id"]]
            roster.append({
                **fields,
                "team_competition_id": normalize_id(pc.team_competition_id),
                "country": player.country or "",
                "position": pc.position or "",
                "matches_played": int(to_number(pc.matches_played)),
            })

        squad = roster_summary(roster, scope)
        seven = historic_seven(squad)
        match_list = [
            s for s in filtered_series
            if outcome_filter in ("win", "draw", "loss") and s["outcome"] == outcome_filter
        ]
        match_list.sort(key=lambda s: s["date"], reverse=True)

        graphs = {
            "goals_by_opponent": summarize_graph(
                goals_by_opponent, "opponent_id", "opponent_name", "goals",
                scope=scope, image_field="opponent_image", scope_field="team_competition_id",
            ),
            "goals_conceded_by_opponent": summarize_graph(
                conceded_by_opponent, "opponent_id", "opponent_name", "goals_conceded",
                scope=scope, image_field="opponent_image", scope_field="team_competition_id",
            ),
            "top_scorers": summarize_graph(
                top_scorers, "player_id", "name", "goals",
                scope=scope, image_field="avatar", scope_field="team_competition_id",
            ),
            "conceding_scorers": summarize_graph(
                conceding_scorers, "player_id", "name", "goals",
                scope=scope, image_field="avatar", scope_field="team_competition_id",
            ),
            "matches_by_player": summarize_graph(
                matches_by_player, "player_id", "name", "matches",
                scope=scope, image_field="avatar", scope_field="team_competition_id",
            ),
        }

    timer.total()
    return {
        "team": team,
        "total_stats": total_stats,
        "stats": stats,
        "win_rate_label": f"{round(stats['win_rate'] * 100)}%",
        "tabs": tabs,
        "active_tab": active_tab,
        "active_filter": active_filter,
        "season_filters": SEASON_FILTERS,
        "match_limits": match_limits,
        "match_series": filtered_series,
        "league_points": league_points_summary(filtered_series),
        "outcome_filter": outcome_filter,
        "match_list": paginate(match_list, matches_page, MATCH_LIST_PAGE_SIZE),
        "graphs": graphs,
        "roster": paginate(squad, roster_page, ROSTER_PAGE_SIZE),
        "historic_lineup": build_lineup(seven),
    }
