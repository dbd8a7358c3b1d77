"""
Ranking giocatori e squadre per metrica.

Catalogo unico di metriche raggruppate (impact, finishing, passing,
defense, progression, physical). Ogni metrica ha formato, funzione valore
e soglie minime. Due varianti di selezione:
  - home: giocatori con almeno 7 partite, metriche GK solo per chi ha
    giocato in porta, ordinamento desc
  - competizione: soglie per metrica (minuti, tiri, passaggi, ...)

I giocatori sono dict con i totali sommati (vedi player_totals nei service).
"""

from dataclasses import dataclass
from typing import Any, Callable

from ffl_stats.analytics.aggregation import is_number, safe_divide, to_number
from ffl_stats.analytics.formatting import format_value

TOP_LIMIT = 30
HOME_MIN_GAMES = 7


@dataclass(frozen=True)
class Metric:
    key: str
    label: str
    format: str
    value: Callable[[dict], float]
    min_games: int = 0
    min_minutes: int = 0
    min_shots: int = 0
    min_shots_against: int = 0
    min_passes: int = 0
    min_kicks: int = 0
    min_starts: int = 0
    allow_zero: bool = False
    allow_negative: bool = False
    gk_only: bool = False
    sort_direction: str = "desc"
    tie_break: Callable[[dict], tuple] | None = None


@dataclass(frozen=True)
class MetricGroup:
    key: str
    label: str
    metrics: tuple[Metric, ...]


def _g(name: str) -> Callable[[dict], float]:
    return lambda p: to_number(p.get(name))


def _per_min(name: str) -> Callable[[dict], float]:
    return lambda p: safe_divide(to_number(p.get(name)) * 60, p.get("minutes_played"))


def _shots(p: dict) -> float:
    return to_number(p.get("shots_on_goal")) + to_number(p.get("shots_off_goal"))


def _goals_conceded_tie_break(p: dict) -> tuple:
    return (-to_number(p.get("minutes_played")), -to_number(p.get("matches_played")))


# ---------------------------------------------------------------------------
# Catalogo giocatori
# ---------------------------------------------------------------------------

PLAYER_METRIC_GROUPS: tuple[MetricGroup, ...] = (
    MetricGroup("impact", "Impact", (
        Metric("games", "Games", "number", _g("matches_played")),
        Metric("won", "Won", "number", _g("won")),
        Metric("draw", "Draw", "number", _g("draw")),
        Metric("lost", "Lost", "number", _g("lost")),
        Metric("win_rate", "Win rate", "percent",
               lambda p: safe_divide(p.get("won"), p.get("matches_played")),
               min_games=5, allow_zero=True),
        Metric("avg", "Avg", "decimal", _g("avg"), min_games=5, allow_zero=True),
        Metric("gap", "G/A/P", "number",
               lambda p: to_number(p.get("goals")) + to_number(p.get("assists")) + to_number(p.get("preassists")),
               allow_zero=True),
        Metric("gi", "Team GI", "percent",
               lambda p: safe_divide(
                   to_number(p.get("goals")) + to_number(p.get("assists")) + to_number(p.get("preassists")),
                   p.get("team_goals"),
               ),
               allow_zero=True),
        Metric("totw", "TOTW", "number", _g("totw")),
        Metric("mvp", "MVP", "number", _g("mvp")),
    )),
    MetricGroup("finishing", "Finishing", (
        Metric("goals", "Goals", "number", _g("goals")),
        Metric("braces", "Braces", "number", _g("braces")),
        Metric("hat_tricks", "Hat tricks", "number", _g("hat_tricks")),
        Metric("pokers", "Pokers", "number", _g("pokers")),
        Metric("shots_on", "Shots on Goal", "number", _g("shots_on_goal")),
        Metric("shots_off", "Shots off Goal", "number", _g("shots_off_goal")),
        Metric("shots_per_min", "Shots per min", "decimal",
               lambda p: safe_divide(_shots(p) * 60, p.get("minutes_played")),
               min_minutes=60),
        Metric("on_target_pct", "% on target", "percent",
               lambda p: safe_divide(p.get("shots_on_goal"), _shots(p)),
               min_shots=10),
        Metric("goal_accuracy", "Goal accuracy", "percent",
               lambda p: safe_divide(p.get("goals"), _shots(p)),
               min_shots=10),
        Metric("owngoals", "Owngoals", "number", _g("owngoals"),
               allow_zero=True, sort_direction="asc"),
    )),
    MetricGroup("passing", "Passing", (
        Metric("assists", "Assists", "number", _g("assists")),
        Metric("preassists", "Pre-Assists", "number", _g("preassists")),
        Metric("passes", "Passes", "number", _g("passes")),
        Metric("passes_per_min", "Passes per min", "decimal", _per_min("passes"), min_minutes=60),
        Metric("pass_accuracy", "Pass accuracy", "percent",
               lambda p: safe_divide(p.get("passes"), to_number(p.get("passes")) + to_number(p.get("misspass"))),
               min_kicks=20),
        Metric("keypasses", "Keypasses", "number", _g("keypass")),
        Metric("keypass_pct", "% key passes", "percent",
               lambda p: safe_divide(p.get("keypass"), p.get("passes")),
               min_passes=30),
        Metric("autopasses", "Autopasses", "number", _g("autopass")),
        Metric("autopass_pct", "% autopass", "percent",
               lambda p: safe_divide(p.get("autopass"), p.get("kicks"))),
    )),
    MetricGroup("defense", "Defense", (
        Metric("recoveries", "Recoveries", "number", _g("recoveries")),
        Metric("recoveries_per_min", "Recoveries per min", "decimal", _per_min("recoveries"), min_minutes=60),
        Metric("clearances", "Clearances", "number", _g("clearances")),
        Metric("clearances_per_min", "Clearances per min", "decimal", _per_min("clearances"), min_minutes=60),
        Metric("saves", "Saves", "number", _g("saves")),
        Metric("goals_conceded", "Goals conceded", "number", _g("goals_conceded"),
               min_minutes=120, allow_zero=True, sort_direction="asc",
               tie_break=_goals_conceded_tie_break),
        Metric("save_pct", "% shots saved", "percent",
               lambda p: safe_divide(p.get("saves"), shots_against(p)),
               min_shots_against=10),
        Metric("cs", "Clean sheets", "number", _g("cs"), gk_only=True),
        Metric("cs_pct", "% games with CS", "percent",
               lambda p: safe_divide(p.get("cs"), p.get("matches_played")),
               gk_only=True, min_games=5, allow_zero=True),
    )),
    MetricGroup("progression", "Progression", (
        Metric("fwd", "Fwd", "number", _g("passes_forward")),
        Metric("fwd_per_min", "Fwd per min", "decimal", _per_min("passes_forward"), min_minutes=60),
        Metric("lat", "Lat", "number", _g("passes_lateral")),
        Metric("lat_per_min", "Lat per min", "decimal", _per_min("passes_lateral"), min_minutes=60),
        Metric("back", "Back", "number", _g("passes_backward")),
        Metric("back_per_min", "Back per min", "decimal", _per_min("passes_backward"), min_minutes=60),
        Metric("fwd_back_balance", "Fwd-Back balance", "number",
               lambda p: to_number(p.get("passes_forward")) - to_number(p.get("passes_backward")),
               min_passes=30, allow_negative=True),
        Metric("pct_forward", "% forward", "percent",
               lambda p: safe_divide(p.get("passes_forward"), p.get("passes")), min_passes=30),
        Metric("pct_lateral", "% lateral", "percent",
               lambda p: safe_divide(p.get("passes_lateral"), p.get("passes")), min_passes=30),
        Metric("pct_backward", "% backward", "percent",
               lambda p: safe_divide(p.get("passes_backward"), p.get("passes")), min_passes=30),
    )),
    MetricGroup("physical", "Physical", (
        Metric("minutes", "Minutes", "time", _g("minutes_played")),
        Metric("minutes_per_game", "Minutes per game", "time",
               lambda p: safe_divide(p.get("minutes_played"), p.get("matches_played")),
               min_games=5),
        Metric("starter", "Starter", "number", _g("starter")),
        Metric("substitute", "Substitute", "number", _g("substitute")),
        Metric("starter_pct", "% as starter", "percent",
               lambda p: safe_divide(p.get("starter"), p.get("matches_played")), min_starts=5),
        Metric("substitute_pct", "% as substitute", "percent",
               lambda p: safe_divide(p.get("substitute"), p.get("matches_played")), min_starts=5),
        Metric("kicks", "Kicks", "number", _g("kicks")),
        Metric("kicks_per_min", "Kicks per min", "decimal", _per_min("kicks"), min_minutes=60),
        Metric("misspasses", "Misspasses", "number", _g("misspass")),
        Metric("misspasses_per_min", "Misspasses per min", "decimal", _per_min("misspass"), min_minutes=60),
    )),
)

# ---------------------------------------------------------------------------
# Catalogo squadre
# ---------------------------------------------------------------------------

TEAM_METRIC_GROUPS: tuple[MetricGroup, ...] = (
    MetricGroup("impact", "Impact", (
        Metric("games", "Games", "number", _g("matches_played")),
        Metric("won", "Won", "number", _g("won")),
        Metric("draw", "Draw", "number", _g("draw")),
        Metric("lost", "Lost", "number", _g("lost")),
        Metric("win_rate", "Win rate", "percent",
               lambda t: safe_divide(t.get("won"), t.get("matches_played"))),
    )),
    MetricGroup("finishing", "Finishing", (
        Metric("goals_scored", "Goals scored", "number", _g("goals_scored")),
        Metric("shots_on", "Shots on Goal", "number", _g("shots_on_goal")),
        Metric("shots_off", "Shots off Goal", "number", _g("shots_off_goal")),
        Metric("on_target_pct", "% on target", "percent",
               lambda t: safe_divide(t.get("shots_on_goal"), _shots(t))),
    )),
    MetricGroup("passing", "Passing", (
        Metric("passes", "Passes", "number", _g("passes")),
        Metric("kicks", "Kicks", "number", _g("kicks")),
        Metric("possession", "Possession", "percent",
               lambda t: safe_divide(t.get("possession_avg"), 100)),
    )),
    MetricGroup("defense", "Defense", (
        Metric("goals_conceded", "Goals conceded", "number", _g("goals_conceded")),
        Metric("saves", "Saves", "number", _g("saves")),
        Metric("cs", "Clean sheets", "number", _g("cs")),
    )),
)


def shots_against(p: dict) -> float:
    """Tiri subiti: shots_defended, oppure parate + gol subiti se mancante."""
    defended = to_number(p.get("shots_defended"))
    if defended:
        return defended
    return to_number(p.get("saves")) + to_number(p.get("goals_conceded"))


def should_include_player(metric: Metric, player: dict, value: Any) -> bool:
    """Soglie della variante competizione."""
    if not is_number(value):
        return False
    if metric.gk_only and not player.get("has_gk"):
        return False
    if not metric.allow_negative:
        if metric.allow_zero:
            if value < 0:
                return False
        elif value <= 0:
            return False
    minutes = to_number(player.get("minutes_played")) / 60
    passes = to_number(player.get("passes"))
    kicks = to_number(player.get("kicks"))
    starts = to_number(player.get("starter")) + to_number(player.get("substitute"))
    if metric.min_games and to_number(player.get("matches_played")) < metric.min_games:
        return False
    if metric.min_minutes and minutes < metric.min_minutes:
        return False
    if metric.min_shots and _shots(player) < metric.min_shots:
        return False
    if metric.min_shots_against and shots_against(player) < metric.min_shots_against:
        return False
    if metric.min_passes and passes < metric.min_passes:
        return False
    if metric.min_kicks and kicks < metric.min_kicks:
        return False
    if metric.min_starts and starts < metric.min_starts:
        return False
    return True


def _ranking_row(metric: Metric, item: dict, value: float) -> dict:
    row = {
        "id": item.get("id"),
        "name": item.get("name"),
        "country": item.get("country"),
        "team": item.get("team"),
        "value": value,
        "display": format_value(value, metric.format),
    }
    if metric.key == "gap":
        row["goals"] = item.get("goals", 0)
        row["assists"] = item.get("assists", 0)
        row["preassists"] = item.get("preassists", 0)
    for name in ("won", "draw", "lost"):
        if name in item and "team" not in item:
            row[name] = item[name]
    return row


def _sorted_rows(metric: Metric, scored: list[tuple[dict, float]]) -> list[tuple[dict, float]]:
    sign = 1 if metric.sort_direction == "asc" else -1
    if metric.tie_break is not None:
        return sorted(scored, key=lambda pv: (sign * pv[1], metric.tie_break(pv[0])))
    return sorted(scored, key=lambda pv: sign * pv[1])


def build_competition_ranking(metric: Metric, players: list[dict], limit: int = TOP_LIMIT) -> list[dict]:
    scored = []
    for p in players:
        value = metric.value(p)
        if should_include_player(metric, p, value):
            scored.append((p, value))
    return [_ranking_row(metric, p, v) for p, v in _sorted_rows(metric, scored)[:limit]]


def build_home_ranking(metric: Metric, players: list[dict], limit: int = TOP_LIMIT) -> list[dict]:
    scored = []
    for p in players:
        if to_number(p.get("matches_played")) < HOME_MIN_GAMES:
            continue
        if metric.gk_only and not p.get("has_gk"):
            continue
        value = metric.value(p)
        if not is_number(value):
            continue
        scored.append((p, value))
    scored.sort(key=lambda pv: -pv[1])
    return [_ranking_row(metric, p, v) for p, v in scored[:limit]]


def build_team_ranking(metric: Metric, teams: list[dict], limit: int = TOP_LIMIT) -> list[dict]:
    scored = [(t, metric.value(t)) for t in teams]
    scored = [(t, v) for t, v in scored if is_number(v)]
    scored.sort(key=lambda tv: -tv[1])
    return [_ranking_row(metric, t, v) for t, v in scored[:limit]]


def rankings_by_metric(
    groups: tuple[MetricGroup, ...],
    items: list[dict],
    builder: Callable[[Metric, list[dict]], list[dict]],
) -> dict[str, list[dict]]:
    return {m.key: builder(m, items) for g in groups for m in g.metrics}
