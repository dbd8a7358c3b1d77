"""Etichette e formattazione per le pagine: competizioni, date, valori di ranking."""

import math
from datetime import date, datetime
from typing import Any

from ffl_stats.analytics.aggregation import to_number

DEFAULT_COMPETITION_IMAGE = "/static/default-tournament.svg"

TYPE_LABELS = {
    "league": "League",
    "cup": "Cup",
    "supercup": "Supercup",
    "summer_cup": "Summer Cup",
    "nations_cup": "Nations Cup",
}

STATUS_LABELS = {
    "upcoming": "Próximo",
    "active": "Active",
    "finished": "Finished",
}


def type_label(kind: str | None) -> str:
    return TYPE_LABELS.get(kind or "", kind or "")


def status_label(status: str | None) -> str:
    return STATUS_LABELS.get(status or "", status or "")


def season_name_for_date(value: date | datetime | None) -> str:
    """Marzo-maggio Spring, giugno-agosto Summer, settembre-novembre Autumn, resto Winter."""
    if value is None:
        return ""
    month = value.month
    if 3 <= month <= 5:
        return "Spring"
    if 6 <= month <= 8:
        return "Summer"
    if 9 <= month <= 11:
        return "Autumn"
    return "Winter"


def competition_title(comp: Any) -> str:
    """Titolo in testata pagina competizione."""
    if comp is None:
        return "Competition"
    kind = comp.type
    season = comp.season
    year = comp.start_date.year if comp.start_date else comp.year
    if kind == "league":
        if season is not None and comp.division:
            return f"Season {season}, div {comp.division}"
        if season is not None:
            return f"Season {season}"
    elif kind in ("cup", "supercup"):
        word = TYPE_LABELS[kind]
        return f"Season {season}, {word}" if season is not None else word
    elif kind in ("summer_cup", "nations_cup"):
        word = TYPE_LABELS[kind]
        return f"{word} {year}" if year else word
    return comp.name or "Competition"


def competition_label(comp: Any, lowercase_cups: bool = False) -> str:
    """
    Etichetta breve accanto a una partita o in un tab: "Season 3 - Div 1",
    "Season 3 - Cup". lowercase_cups per la variante giocatore ("- cup").
    """
    if comp is None:
        return ""
    kind = comp.type
    season = comp.season
    if kind in ("league", "cup", "supercup") and season is not None:
        if kind == "league":
            return f"Season {season} - Div {comp.division}" if comp.division else f"Season {season}"
        word = "Cup" if kind == "cup" else "Supercup"
        if lowercase_cups:
            word = word.lower()
        return f"Season {season} - {word}"
    return competition_title(comp)


def tab_label(team_name: str | None, comp: Any, lowercase_cups: bool = False) -> str:
    label = competition_label(comp, lowercase_cups=lowercase_cups)
    return f"{team_name or 'Team'} - {label}" if label else (team_name or "Team")


def competition_image(comp: Any) -> str:
    return (comp.image if comp is not None else None) or DEFAULT_COMPETITION_IMAGE


# ---------------------------------------------------------------------------
# Date e valori
# ---------------------------------------------------------------------------


def format_date(value: date | datetime | None) -> str:
    """dd/mm/yyyy, stringa vuota se assente."""
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


def format_minutes_seconds(seconds: Any) -> str:
    """Secondi giocati -> 'm:ss'."""
    total = int(round(to_number(seconds)))
    if total < 0:
        total = 0
    return f"{total // 60}:{total % 60:02d}"


def format_value(value: Any, fmt: str) -> str:
    """Valore di ranking: percent 'x.x%', decimal 2 cifre, time 'm:ss', intero altrimenti."""
    if value is None or isinstance(value, bool):
        return "-"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "-"
    if not math.isfinite(number):
        return "-"
    if fmt == "time":
        return format_minutes_seconds(number)
    if fmt == "percent":
        return f"{number * 100:.1f}%"
    if fmt == "decimal":
        return f"{number:.2f}"
    return str(math.floor(number + 0.5))


def percent(value: Any, digits: int = 1) -> str:
    return f"{to_number(value) * 100:.{digits}f}%"
