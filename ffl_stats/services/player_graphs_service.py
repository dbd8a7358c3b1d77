"""
Grafici giocatore: righe evento per avversario, compagno, squadra.

Ogni riga porta il player_competition_id del giocatore: la pagina può
sommare solo le competizioni del tab attivo. L'avversario è il lato della
partita diverso dalla team-competition della riga; se nessun lato coincide
la riga viene scartata. Nomi mancanti -> "Team" / "Player".
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ffl_stats.analytics.aggregation import field_value, group_sum, index_by, to_number
from ffl_stats.analytics.identifiers import normalize_id, normalize_ids
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import Match, Player, PlayerCompetition, PlayerMatchStats, Team
from ffl_stats.schemas.players import (
    AssistedPlayerRow,
    GkPartnerRow,
    GoalByOpponentRow,
    GoalsConcededByOpponentRow,
    GraphSummaryItem,
    KicksByOpponentRow,
    PlayerGraphsResponse,
    TeamContributionRow,
)
from ffl_stats.services import repository
from ffl_stats.services.cache import get_team_competition_team_map

logger = logging.getLogger(__name__)


def opponent_side(match: Any, team_competition_id: str) -> str:
    """Team-competition avversaria, "" se la riga non appartiene a nessun lato."""
    team1 = normalize_id(match.team1_competition_id)
    team2 = normalize_id(match.team2_competition_id)
    if not team1 or not team2 or not team_competition_id:
        return ""
    if team1 == team_competition_id:
        return team2
    if team2 == team_competition_id:
        return team1
    return ""


def get_player_graphs(db: Session, ref: Any) -> PlayerGraphsResponse | None:
    """None se il giocatore non esiste; payload vuoto se non ha competizioni."""
    timer = StepTimer(f"player-graphs:{ref}")

    with timer.step("player"):
        player = repository.find_player(db, ref)
    if player is None:
        timer.total()
        return None

    with timer.step("playerCompetitions"):
        player_competitions = repository.player_competitions_for(db, player_ids=[player.id])
    graphs = build_player_graphs(db, player_competitions, timer)
    timer.total()
    return graphs


def build_player_graphs(db: Session, player_competitions: list[PlayerCompetition], timer: StepTimer) -> PlayerGraphsResponse:
    """Righe evento per le player-competition date (tutte dello stesso giocatore)."""
    own_pc_ids = normalize_ids(player_competitions)
    if not own_pc_ids:
        return PlayerGraphsResponse()

    pc_team = {
        normalize_id(pc): normalize_id(pc.team_competition_id)
        for pc in player_competitions
        if normalize_id(pc.team_competition_id)
    }

    with timer.step("matchStats"):
        stat_rows = repository.player_match_stats_for(db, player_competition_ids=own_pc_ids)
    match_ids = {normalize_id(r.match_id) for r in stat_rows} - {""}
    own_tc_ids = {normalize_id(r.team_competition_id) for r in stat_rows} - {""}

    with timer.step("matchDocs"):
        matches_by_id = index_by(repository.rows_by_ids(db, Match, match_ids))

    with timer.step("teamCompetitions"):
        tc_to_team = get_team_competition_team_map(db)

    tc_ids = set(own_tc_ids)
    for m in matches_by_id.values():
        tc_ids.update({normalize_id(m.team1_competition_id), normalize_id(m.team2_competition_id)} - {""})
    team_ids = {tc_to_team[t] for t in tc_ids if t in tc_to_team}

    with timer.step("teams"):
        teams_by_id = index_by(repository.rows_by_ids(db, Team, team_ids))

    with timer.step("goals"):
        goal_rows = repository.goals_for(db, match_ids=match_ids, player_competition_ids=own_pc_ids) if match_ids else []
    scored = [g for g in goal_rows if normalize_id(g.scorer_id) in own_pc_ids]
    assisted = [g for g in goal_rows if normalize_id(g.assist_id) in own_pc_ids]
    preassisted = [g for g in goal_rows if normalize_id(g.preassist_id) in own_pc_ids]

    with timer.step("gkPartners"):
        gk_rows = _gk_partner_rows(db, match_ids, own_tc_ids, own_pc_ids)

    related_pc_ids = (
        {normalize_id(g.scorer_id) for g in assisted}
        | {normalize_id(g.assist_id) for g in preassisted}
        | {normalize_id(r.player_competition_id) for r in gk_rows}
    ) - {""}
    with timer.step("relatedPlayers"):
        related_pcs = repository.rows_by_ids(db, PlayerCompetition, related_pc_ids)
        pc_to_player = {normalize_id(pc): normalize_id(pc.player_id) for pc in related_pcs}
        players_by_id = index_by(repository.rows_by_ids(db, Player, set(pc_to_player.values())))

    def team_of(tc_id: str) -> tuple[str, Team | None]:
        team_id = tc_to_team.get(tc_id, "")
        return team_id, teams_by_id.get(team_id)

    def opponent_fields(match_id: str, tc_id: str) -> dict[str, str] | None:
        match = matches_by_id.get(match_id)
        if match is None:
            return None
        opponent_tc = opponent_side(match, tc_id)
        if not opponent_tc:
            return None
        team_id, team = team_of(opponent_tc)
        return {
            "opponent_id": team_id,
            "opponent_name": (team.name if team is not None else None) or "Team",
            "opponent_image": (team.image if team is not None else None) or "",
            "match_id": match_id,
        }

    def related_player(pc_id: str) -> tuple[str, Player | None]:
        player_id = pc_to_player.get(pc_id, "")
        return player_id, players_by_id.get(player_id)

    with timer.step("shape"):
        goals_by_opponent = []
        for g in scored:
            fields = opponent_fields(normalize_id(g.match_id), normalize_id(g.team_competition_id))
            if fields is not None:
                goals_by_opponent.append(GoalByOpponentRow(player_competition_id=normalize_id(g.scorer_id), **fields))

        assists_by_player = _assisted_rows(assisted, "assist_id", "scorer_id", related_player)
        preassists_by_player = _assisted_rows(preassisted, "preassist_id", "assist_id", related_player)

        goals_by_team, assists_by_team, preassists_by_team = [], [], []
        kicks_by_opponent, conceded_by_opponent = [], []
        for r in stat_rows:
            pc_id = normalize_id(r.player_competition_id)
            match_id = normalize_id(r.match_id)
            tc_id = normalize_id(r.team_competition_id)
            team_id, team = team_of(tc_id)
            if team is not None and pc_id:
                base = {
                    "player_competition_id": pc_id,
                    "team_id": team_id,
                    "team_name": team.name or "Team",
                    "team_image": team.image or "",
                    "match_id": match_id,
                }
                goals_by_team.append(TeamContributionRow(**base, goals=int(to_number(r.goals))))
                assists_by_team.append(TeamContributionRow(**base, assists=int(to_number(r.assists))))
                preassists_by_team.append(TeamContributionRow(**base, preassists=int(to_number(r.preassists))))

            # kicks: lato dalla team-competition dell'aggregato di competizione
            kicks_fields = opponent_fields(match_id, pc_team.get(pc_id, ""))
            if kicks_fields is not None:
                kicks_by_opponent.append(KicksByOpponentRow(
                    player_competition_id=pc_id, kicks=int(to_number(r.kicks)), **kicks_fields,
                ))
            conceded_fields = opponent_fields(match_id, tc_id)
            if conceded_fields is not None:
                conceded_by_opponent.append(GoalsConcededByOpponentRow(
                    player_competition_id=pc_id,
                    goals_conceded=int(to_number(r.goals_conceded)),
                    **conceded_fields,
                ))

        gk_partners = _gk_partners(stat_rows, gk_rows, related_player)

    return PlayerGraphsResponse(
        goals_by_opponent=goals_by_opponent,
        assists_by_player=assists_by_player,
        preassists_by_player=preassists_by_player,
        goals_by_team=goals_by_team,
        assists_by_team=assists_by_team,
        preassists_by_team=preassists_by_team,
        kicks_by_opponent=kicks_by_opponent,
        goals_conceded_by_opponent=conceded_by_opponent,
        gk_partners=gk_partners,
    )


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------


def _gk_partner_rows(
    db: Session,
    match_ids: set[str],
    team_competition_ids: set[str],
    exclude_pc_ids: set[str],
) -> list[PlayerMatchStats]:
    """Righe GK di altri giocatori nelle stesse partite e team-competition."""
    if not match_ids or not team_competition_ids:
        return []
    stmt = select(PlayerMatchStats).where(
        PlayerMatchStats.match_id.in_([int(m) for m in match_ids if m.isdigit()]),
        PlayerMatchStats.team_competition_id.in_([int(t) for t in team_competition_ids if t.isdigit()]),
        PlayerMatchStats.position == "GK",
        PlayerMatchStats.player_competition_id.notin_([int(p) for p in exclude_pc_ids if p.isdigit()]),
    )
    return list(db.execute(stmt.order_by(PlayerMatchStats.id)).scalars().all())


def _assisted_rows(goals, own_field: str, target_field: str, related_player) -> list[AssistedPlayerRow]:
    rows = []
    for g in goals:
        own_pc = normalize_id(getattr(g, own_field))
        target_pc = normalize_id(getattr(g, target_field))
        player_id, player = related_player(target_pc) if target_pc else ("", None)
        if not own_pc or not player_id:
            continue
        rows.append(AssistedPlayerRow(
            player_competition_id=own_pc,
            assisted_id=player_id,
            assisted_name=(player.name if player is not None else None) or "Player",
            assisted_avatar=(player.avatar if player is not None else None) or "",
        ))
    return rows


def _gk_partners(stat_rows, gk_rows, related_player) -> list[GkPartnerRow]:
    """Partner solo se entrambi (giocatore e portiere) hanno cs > 0 nella partita."""
    own_by_match_team: dict[str, str] = {}
    own_cs: set[str] = set()
    for r in stat_rows:
        key = f"{normalize_id(r.match_id)}-{normalize_id(r.team_competition_id)}"
        own_by_match_team[key] = normalize_id(r.player_competition_id)
        if to_number(r.cs) > 0:
            own_cs.add(key)

    partners = []
    for r in gk_rows:
        match_id = normalize_id(r.match_id)
        key = f"{match_id}-{normalize_id(r.team_competition_id)}"
        if key not in own_cs or to_number(r.cs) <= 0:
            continue
        own_pc = own_by_match_team.get(key)
        keeper_pc = normalize_id(r.player_competition_id)
        keeper_player_id, keeper = related_player(keeper_pc)
        if not own_pc or not keeper_player_id:
            continue
        partners.append(GkPartnerRow(
            player_competition_id=own_pc,
            keeper_player_id=keeper_player_id,
            keeper_id=keeper_pc,
            keeper_name=(keeper.name if keeper is not None else None) or "Player",
            keeper_avatar=(keeper.avatar if keeper is not None else None) or "",
            match_id=match_id,
            cs=int(to_number(r.cs)),
        ))
    return partners


def summarize_graph(
    rows: Iterable[Any],
    id_field: str,
    name_field: str,
    value_field: str | None = None,
    scope: set[str] | None = None,
    image_field: str | None = None,
    scope_field: str = "player_competition_id",
) -> list[GraphSummaryItem]:
    """
    Totale per entità collegata. value_field None conta le righe (es. un
    gol per riga). scope limita ai valori di scope_field del tab attivo
    (player_competition_id per il giocatore, team_competition_id per la squadra).
    """
    selected = [r for r in rows if scope is None or field_value(r, scope_field) in scope]
    groups = group_sum(
        selected,
        key_fn=lambda r: field_value(r, id_field),
        fields=[value_field] if value_field else [],
    )
    items = []
    for acc in groups.values():
        first = acc.rows[0]
        value = acc.totals[value_field] if value_field else acc.count
        if value <= 0:
            continue
        items.append(GraphSummaryItem(
            id=acc.key,
            name=field_value(first, name_field) or "",
            image=(field_value(first, image_field) if image_field else "") or "",
            value=int(value),
        ))
    items.sort(key=lambda it: (-it.value, it.name.lower()))
    return items
