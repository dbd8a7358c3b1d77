"""
Lista giocatori: ricerca per nome, paese, ordinamento, ambito competizione
e filtri statistici (statN / opN / valN), 30 per pagina. Ogni giocatore
mostra un kit scelto in modo deterministico dall'hash del suo id.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ffl_stats.analytics.aggregation import group_sum, paginate
from ffl_stats.analytics.formatting import competition_title
from ffl_stats.analytics.identifiers import normalize_id, parse_numeric_ref
from ffl_stats.core.timing import StepTimer
from ffl_stats.models import Competition, Player, PlayerCompetition, TeamCompetition
from ffl_stats.services import repository

logger = logging.getLogger(__name__)

PAGE_SIZE = 30
PLAYER_SORTS = ("name_asc", "name_desc")
FILTER_OPS = ("gte", "lte", "eq")

STAT_FIELDS = (
    ("goals", "Goals"),
    ("assists", "Assists"),
    ("kicks", "Kicks"),
    ("passes", "Passes"),
    ("passes_forward", "Forward passes"),
    ("passes_lateral", "Lateral passes"),
    ("passes_backward", "Backward passes"),
    ("keypass", "Key pass"),
    ("autopass", "Autopass"),
    ("misspass", "Missed passes"),
    ("shots_on_goal", "Shots on goal"),
    ("shots_off_goal", "Shots off goal"),
    ("saves", "Saves"),
    ("clearances", "Clearances"),
    ("recoveries", "Recoveries"),
    ("goals_conceded", "Goals conceded"),
    ("cs", "Clean sheets"),
    ("owngoals", "Own goals"),
    ("minutes_played", "Minutes played"),
    ("matches_played", "Matches played"),
    ("won", "Matches won"),
    ("draw", "Matches drawn"),
    ("lost", "Matches lost"),
)
_STAT_NAMES = tuple(name for name, _label in STAT_FIELDS)


@dataclass(frozen=True)
class StatFilter:
    field: str
    op: str
    value: float

    def accepts(self, total: float) -> bool:
        if self.op == "lte":
            return total <= self.value
        if self.op == "eq":
            return total == self.value
        return total >= self.value


def parse_stat_filters(params: Mapping[str, Any]) -> tuple[list[dict[str, str]], list[StatFilter]]:
    """
    Righe UI (campo, op, valore grezzo) e filtri validi dai parametri
    statN/opN/valN, in ordine di indice. op sconosciuto -> gte; righe
    senza campo, senza valore, con valore non numerico o campo non
    ammesso restano solo nella UI.
    """
    indexes: set[int] = set()
    for key in params:
        for prefix in ("stat", "op", "val"):
            suffix = key[len(prefix):]
            if key.startswith(prefix) and suffix.isdigit():
                indexes.add(int(suffix))

    rows: list[dict[str, str]] = []
    filters: list[StatFilter] = []
    for idx in sorted(indexes):
        field = (params.get(f"stat{idx}") or "").strip()
        op_raw = params.get(f"op{idx}") or ""
        raw_value = (params.get(f"val{idx}") or "").strip()
        if not field and not op_raw and not raw_value:
            continue
        op = op_raw if op_raw in ("lte", "eq") else "gte"
        rows.append({"field": field, "op": op, "value": raw_value})
        if not field or not raw_value or field not in _STAT_NAMES:
            continue
        try:
            number = float(raw_value)
        except ValueError:
            continue
        filters.append(StatFilter(field=field, op=op, value=number))
    return rows, filters


def string_hash(seed: str) -> int:
    """Hash stabile tra processi (hash() di Python è randomizzato)."""
    h = 0
    for ch in seed:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h


def pick_kit(kits: list[dict[str, str]], seed: str) -> dict[str, str] | None:
    if not kits:
        return None
    return kits[string_hash(seed) % len(kits)]


def _kit_options(team_competition: TeamCompetition | None) -> list[dict[str, str]]:
    if team_competition is None:
        return []
    options = []
    for kit in team_competition.kits or []:
        if isinstance(kit, Mapping) and kit.get("image"):
            options.append({"image": kit["image"], "text_color": kit.get("color") or "#ffffff"})
    return options


def competitions_in_scope(competitions: list[Competition], scope: str) -> list[int] | None:
    """
    'all' -> None (nessun vincolo); only_div_N -> leghe di divisione N;
    only_type_X -> competizioni di tipo X; altrimenti un id di competizione.
    Uno scope che non seleziona nulla non vincola.
    """
    if not scope or scope == "all":
        return None
    if scope.startswith("only_div_"):
        division = parse_numeric_ref(scope[len("only_div_"):])
        ids = [c.id for c in competitions if c.type == "league" and c.division == division]
    elif scope.startswith("only_type_"):
        kind = scope[len("only_type_"):]
        ids = [c.id for c in competitions if c.type == kind]
    else:
        ref = parse_numeric_ref(scope)
        ids = [c.id for c in competitions if ref is not None and ref in (c.id, c.public_id)]
    return ids or None


def _filtered_player_ids(
    db: Session,
    competition_ids: list[int] | None,
    filters: list[StatFilter],
) -> set[str]:
    stmt = select(PlayerCompetition).join(TeamCompetition, PlayerCompetition.team_competition_id == TeamCompetition.id)
    if competition_ids is not None:
        stmt = stmt.where(TeamCompetition.competition_id.in_(competition_ids))
    rows = db.execute(stmt).scalars().all()
    groups = group_sum(rows, key_fn=lambda pc: pc.player_id, fields=_STAT_NAMES)
    return {
        key for key, acc in groups.items()
        if all(f.accepts(acc.totals[f.field]) for f in filters)
    }


def list_players(db: Session, params: Mapping[str, Any]) -> dict[str, Any]:
    """Contesto pagina /players dai parametri di query."""
    timer = StepTimer("players")
    q = (params.get("q") or "").strip()
    country = (params.get("country") or "").strip() or "all"
    sort = params.get("sort") if params.get("sort") in PLAYER_SORTS else "name_asc"
    scope = (params.get("competition") or "").strip() or "all"
    ui_rows, filters = parse_stat_filters(params)

    with timer.step("competitions"):
        competitions = list(db.execute(
            select(Competition).order_by(Competition.start_date.desc().nulls_last(), Competition.id.desc())
        ).scalars().all())

    stmt = select(Player)
    if q:
        stmt = stmt.where(func.lower(Player.name).contains(q.lower()))
    if country != "all":
        stmt = stmt.where(Player.country == country)

    with timer.step("filters"):
        competition_ids = competitions_in_scope(competitions, scope)
        if scope != "all" or filters:
            allowed = _filtered_player_ids(db, competition_ids, filters)
            stmt = stmt.where(Player.id.in_([int(i) for i in allowed]))

    with timer.step("players"):
        order = Player.name.desc() if sort == "name_desc" else Player.name.asc()
        players = list(db.execute(stmt.order_by(order, Player.id)).scalars().all())
        countries = sorted(c for c in db.execute(select(Player.country).distinct()).scalars().all() if c)
    page = paginate(players, params.get("page") or 1, PAGE_SIZE)

    with timer.step("kits"):
        page_ids = [p.id for p in page.items]
        pcs = repository.player_competitions_for(db, player_ids=page_ids) if page_ids else []
        tcs = {normalize_id(tc): tc for tc in repository.rows_by_ids(db, TeamCompetition, {pc.team_competition_id for pc in pcs})}
        options: dict[str, list[dict[str, str]]] = {}
        for pc in pcs:
            options.setdefault(normalize_id(pc.player_id), []).extend(
                _kit_options(tcs.get(normalize_id(pc.team_competition_id)))
            )
        fallback: list[dict[str, str]] = []
        if any(not options.get(normalize_id(p)) for p in page.items):
            for tc in repository.all_rows(db, TeamCompetition, order_by=TeamCompetition.id):
                fallback.extend(_kit_options(tc))

    rows = []
    for p in page.items:
        pid = normalize_id(p)
        rows.append({
            "id": pid,
            "public_id": p.public_id,
            "name": p.name or "Player",
            "country": p.country or "",
            "avatar": p.avatar or "",
            "kit": pick_kit(options.get(pid) or fallback, pid),
        })

    timer.total()
    return {
        "players": rows,
        "page": page,
        "q": q,
        "country": country,
        "sort": sort,
        "competition": scope,
        "countries": countries,
        "competitions": [{"id": c.public_id or c.id, "label": competition_title(c)} for c in competitions],
        "filter_rows": ui_rows,
        "base_query": urlencode([(k, v) for k, v in params.items() if k != "page"]),
        "stat_fields": STAT_FIELDS,
        "filter_ops": FILTER_OPS,
    }
