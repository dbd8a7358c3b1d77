"""
Formazioni 7v7 e coordinate sul campo (percentuali x/y).

La formazione si riconosce confrontando le posizioni ordinate dei giocatori
con gli slot di ogni schema. Fallback 1-2-1-3. La squadra in trasferta
attacca verso sinistra: x specchiata.
"""

from typing import Any

FALLBACK_FORMATION = "1-2-1-3"
LINE_Y_START = 20
LINE_Y_END = 80

FORMATIONS: dict[str, dict[str, tuple[int, int]]] = {
    "1-2-1-3": {
        "GK": (5, 50),
        "CB1": (25, 35),
        "CB2": (25, 65),
        "CM": (50, 50),
        "LW": (75, 25),
        "RW": (75, 75),
        "ST": (90, 50),
    },
    "1-3-1-2": {
        "GK": (5, 50),
        "LB": (25, 20),
        "CB": (25, 50),
        "RB": (25, 80),
        "CM": (50, 50),
        "ST1": (80, 40),
        "ST2": (80, 60),
    },
    "1-2-2-2": {
        "GK": (5, 50),
        "CB1": (25, 35),
        "CB2": (25, 65),
        "CM1": (55, 35),
        "CM2": (55, 65),
        "ST1": (85, 40),
        "ST2": (85, 60),
    },
    "1-1-2-3": {
        "GK": (5, 50),
        "CB": (25, 50),
        "CM1": (50, 35),
        "CM2": (50, 65),
        "LW": (75, 25),
        "RW": (75, 75),
        "ST": (90, 50),
    },
}


def _base_position(slot: str) -> str:
    return slot.rstrip("0123456789")


def detect_formation(positions: list[str | None]) -> str:
    """Le posizioni giocatore sono senza indice (CB), gli slot numerati (CB1, CB2)."""
    ordered = sorted(_base_position(p or "") for p in positions)
    for name, slots in FORMATIONS.items():
        if ordered == sorted(_base_position(s) for s in slots):
            return name
    return FALLBACK_FORMATION


def slot_coordinates(position: str, formation: str, index: int, total_in_line: int) -> tuple[float, float]:
    """Coordinate di un giocatore; più giocatori nella stessa posizione si distribuiscono su y 20..80."""
    slots = FORMATIONS.get(formation, FORMATIONS[FALLBACK_FORMATION])
    numbered = f"{position}{index + 1}"
    if position not in slots and numbered in slots:
        return slots[numbered]
    if position not in slots:
        return (50, 50)
    x, y = slots[position]
    if total_in_line <= 1:
        return (x, y)
    step = (LINE_Y_END - LINE_Y_START) / (total_in_line - 1)
    return (x, LINE_Y_START + index * step)


def initials(name: str | None) -> str:
    parts = [w for w in (name or "").split(" ") if w]
    return "".join(w[0] for w in parts) or "?"


def build_lineup(players: list[dict[str, Any]], mirrored: bool = False) -> dict[str, Any]:
    """
    players: dict con almeno 'position' e 'name'.
    Restituisce formazione e lista di pedine con x, y.
    """
    formation = detect_formation([p.get("position") for p in players])
    by_position: dict[str, list[dict[str, Any]]] = {}
    for p in players:
        by_position.setdefault(p.get("position") or "", []).append(p)

    tokens = []
    for position, group in by_position.items():
        for idx, p in enumerate(group):
            x, y = slot_coordinates(position, formation, idx, len(group))
            tokens.append({
                **p,
                "initials": initials(p.get("name")),
                "x": 100 - x if mirrored else x,
                "y": y,
            })
    return {"formation": formation, "players": tokens}


def stat_bar(value1: Any, value2: Any) -> tuple[float, float]:
    """Larghezze percentuali di una barra comparativa."""
    v1 = float(value1 or 0)
    v2 = float(value2 or 0)
    total = v1 + v2 or 1
    return (v1 / total * 100, v2 / total * 100)
