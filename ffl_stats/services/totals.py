"""
Totali giocatore e squadra condivisi da home, competizione, squadra, giocatore.

Tutti passano da group_sum: i campi sommati sono elencati qui una volta
sola, le differenze tra pagine sono nei parametri (media pesata o no,
squadra di riferimento, feats e gol di squadra opzionali).
"""

import logging
from collections.abc import Iterable
from typing import Any

from ffl_stats.analytics.aggregation import derive, group_sum, safe_divide, to_number
from ffl_stats.analytics.identifiers import composite_key, normalize_id
from ffl_stats.models import Goal, PlayerMatchStats
from ffl_stats.models.mixins import PLAYER_COUNTER_FIELDS
from ffl_stats.models.team_competition import TEAM_COUNTER_FIELDS

logger = logging.getLogger(__name__)

PLAYER_TOTAL_FIELDS = ("matches_played", *PLAYER_COUNTER_FIELDS, "totw", "mvp")


# ---------------------------------------------------------------------------
# Fatti per partita
# ---------------------------------------------------------------------------


def scoring_feats(stat_rows: Iterable[PlayerMatchStats], pc_to_player: dict[str, str]) -> dict[str, dict[str, int]]:
    """
    Doppiette (2), triplette (3), poker (>=4) per giocatore.
    Per ogni coppia (player-competition, partita) vale il massimo dei gol.
    """
    best: dict[str, float] = {}
    for r in stat_rows:
        key = composite_key(r.player_competition_id, r.match_id)
        if not key:
            continue
        best[key] = max(best.get(key, 0), to_number(r.goals))

    feats: dict[str, dict[str, int]] = {}
    for key, goals in best.items():
        player_id = pc_to_player.get(key.split(":")[0])
        if not player_id:
            continue
        row = feats.setdefault(player_id, {"braces": 0, "hat_tricks": 0, "pokers": 0})
        if goals == 2:
            row["braces"] += 1
        elif goals == 3:
            row["hat_tricks"] += 1
        elif goals >= 4:
            row["pokers"] += 1
    return feats


def team_goals_by_player(
    stat_rows: Iterable[PlayerMatchStats],
    goals: Iterable[Goal],
    pc_to_player: dict[str, str],
) -> dict[str, int]:
    """Gol della squadra nelle partite giocate: triple distinte (giocatore, partita, team-competition)."""
    goals_per_match_team: dict[str, int] = {}
    for g in goals:
        key = composite_key(g.match_id, g.team_competition_id)
        if key:
            goals_per_match_team[key] = goals_per_match_team.get(key, 0) + 1

    seen: set[tuple[str, str]] = set()
    out: dict[str, int] = {}
    for r in stat_rows:
        player_id = pc_to_player.get(normalize_id(r.player_competition_id))
        match_team = composite_key(r.match_id, r.team_competition_id)
        if not player_id or not match_team or (player_id, match_team) in seen:
            continue
        seen.add((player_id, match_team))
        out[player_id] = out.get(player_id, 0) + goals_per_match_team.get(match_team, 0)
    return out


# ---------------------------------------------------------------------------
# Totali giocatore
# ---------------------------------------------------------------------------


def player_totals(
    player_competitions: list[Any],
    players_by_id: dict[str, Any],
    team_competitions_by_id: dict[str, Any],
    teams_by_id: dict[str, Any],
    feats: dict[str, dict[str, int]] | None = None,
    team_goals: dict[str, int] | None = None,
    weighted_avg: bool = False,
) -> list[dict[str, Any]]:
    """
    Una riga per giocatore con tutti i contatori sommati.

    avg: media semplice delle righe (avg_sum / avg_count) oppure, con
    weighted_avg, pesata sulle partite giocate. Squadra mostrata: la
    team-competition con più partite. has_gk se almeno una riga è GK.
    """
    groups = group_sum(
        player_competitions,
        key_fn=lambda pc: pc.player_id,
        fields=PLAYER_TOTAL_FIELDS,
        distinct={"team_competitions": lambda pc: pc.team_competition_id},
    )
    feats = feats or {}
    team_goals = team_goals or {}
    rows = []
    for acc in groups.values():
        player = players_by_id.get(acc.key)
        avg_rows = [pc for pc in acc.rows if pc.avg is not None]
        if weighted_avg:
            avg = safe_divide(
                sum(to_number(pc.avg) * to_number(pc.matches_played) for pc in avg_rows),
                sum(to_number(pc.matches_played) for pc in avg_rows),
            )
        else:
            avg = safe_divide(sum(to_number(pc.avg) for pc in avg_rows), len(avg_rows))

        main_pc = max(acc.rows, key=lambda pc: to_number(pc.matches_played))
        main_tc = team_competitions_by_id.get(normalize_id(main_pc.team_competition_id))
        team = teams_by_id.get(normalize_id(main_tc.team_id)) if main_tc is not None else None

        derive(
            acc,
            avg=lambda _a: avg,
            has_gk=lambda a: any((pc.position or "").upper() == "GK" for pc in a.rows),
        )
        row = acc.as_dict()
        row.update(feats.get(acc.key, {"braces": 0, "hat_tricks": 0, "pokers": 0}))
        row.update({
            "id": acc.key,
            "public_id": player.public_id if player is not None else None,
            "name": (player.name if player is not None else None) or "Player",
            "country": player.country if player is not None else None,
            "avatar": player.avatar if player is not None else None,
            "team": (team.name if team is not None else None) or "Team",
            "team_id": normalize_id(team) if team is not None else "",
            "team_goals": team_goals.get(acc.key, 0),
            "player_competition_ids": sorted(normalize_id(pc) for pc in acc.rows),
        })
        rows.append(row)
    return rows


# ---------------------------------------------------------------------------
# Totali squadra
# ---------------------------------------------------------------------------


def team_totals(
    team_competitions: list[Any],
    teams_by_id: dict[str, Any],
    weighted_possession: bool = False,
) -> list[dict[str, Any]]:
    """
    Una riga per squadra: contatori sommati sulle team-competition.
    Possesso: media semplice, o pesata sulle partite con weighted_possession.
    """
    groups = group_sum(team_competitions, key_fn=lambda tc: tc.team_id, fields=TEAM_COUNTER_FIELDS)
    rows = []
    for acc in groups.values():
        team = teams_by_id.get(acc.key)
        if weighted_possession:
            possession = safe_divide(
                sum(to_number(tc.possession_avg) * to_number(tc.matches_played) for tc in acc.rows),
                acc.totals["matches_played"],
            )
        else:
            possession = safe_divide(sum(to_number(tc.possession_avg) for tc in acc.rows), acc.count)
        derive(acc, possession_avg=lambda _a: possession)
        row = acc.as_dict()
        row.update({
            "id": acc.key,
            "public_id": team.public_id if team is not None else None,
            "name": (team.name if team is not None else None) or "Team",
            "country": team.country if team is not None else None,
            "image": team.image if team is not None else None,
        })
        rows.append(row)
    return rows


def sum_team_competitions(team_competitions: list[Any], weighted_possession: bool = True) -> dict[str, Any]:
    """Totale unico su più team-competition (pagina squadra, filtri stagione)."""
    merged = group_sum(team_competitions, key_fn=lambda _tc: "all", fields=TEAM_COUNTER_FIELDS).get("all")
    if merged is None:
        out = {name: 0 for name in TEAM_COUNTER_FIELDS}
        out["possession_avg"] = 0
        return out
    if weighted_possession:
        possession = safe_divide(
            sum(to_number(tc.possession_avg) * to_number(tc.matches_played) for tc in team_competitions),
            merged.totals["matches_played"],
        )
    else:
        possession = safe_divide(sum(to_number(tc.possession_avg) for tc in team_competitions), merged.count)
    derive(merged, possession_avg=lambda _a: possession)
    return merged.as_dict()
