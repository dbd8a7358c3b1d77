"""
Motore di aggregazione in memoria: group-sum-derive.

Ogni report (grafici giocatore, classifiche, totali squadra/giocatore,
statistiche di stagione) segue lo stesso schema:
  1. righe piatte filtrate per id
  2. mappe di lookup per id normalizzato
  3. fold in accumulatori per chiave composta (somme + set di id distinti)
  4. metriche derivate con divisione sicura
  5. ordinamento e paginazione
"""

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ffl_stats.analytics.identifiers import normalize_id

# ---------------------------------------------------------------------------
# Helper numerici
# ---------------------------------------------------------------------------


def to_number(value: Any) -> float | int:
    """Coercizione a numero: None, stringhe non numeriche, NaN/inf -> 0."""
    if value is None or isinstance(value, bool):
        return int(bool(value))
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return number


def is_number(value: Any) -> bool:
    """True per int/float finiti (bool esclusi)."""
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def safe_divide(numerator: Any, denominator: Any) -> float:
    """n / d se d > 0, altrimenti 0. Mai NaN o infinito."""
    n = to_number(numerator)
    d = to_number(denominator)
    if d <= 0:
        return 0
    return n / d


def field_value(row: Any, name: str) -> Any:
    """Legge un campo da riga ORM o da dict."""
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def index_by(rows: Iterable[Any], key: Callable[[Any], Any] = normalize_id) -> dict[str, Any]:
    """Mappa chiave normalizzata -> riga. Righe con chiave vuota scartate."""
    out: dict[str, Any] = {}
    for row in rows:
        k = normalize_id(key(row))
        if k:
            out[k] = row
    return out


# ---------------------------------------------------------------------------
# Group-sum-derive
# ---------------------------------------------------------------------------


@dataclass
class Accumulator:
    key: str
    totals: dict[str, float] = field(default_factory=dict)
    count: int = 0
    distinct: dict[str, set[str]] = field(default_factory=dict)
    rows: list[Any] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        if name in self.derived:
            return self.derived[name]
        if name in self.totals:
            return self.totals[name]
        if name in self.distinct:
            return len(self.distinct[name])
        raise KeyError(name)

    def get(self, name: str, default: Any = 0) -> Any:
        try:
            return self[name]
        except KeyError:
            return default

    def as_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.totals)
        out.update({name: len(ids) for name, ids in self.distinct.items()})
        out.update(self.derived)
        out["rows"] = self.count
        return out


def group_sum(
    rows: Iterable[Any],
    key_fn: Callable[[Any], Any],
    fields: Iterable[str],
    distinct: Mapping[str, Callable[[Any], Any]] | None = None,
    value_fn: Callable[[Any, str], Any] = field_value,
) -> dict[str, Accumulator]:
    """
    Raggruppa righe per chiave e somma i campi numerici.

    key_fn restituisce la chiave (anche già composta); le righe con chiave
    vuota vengono scartate. distinct mappa un nome a un estrattore di id:
    l'accumulatore tiene il set dei valori distinti (es. partite giocate).
    L'ordine dei gruppi è quello di prima apparizione.
    """
    names = tuple(fields)
    distinct = distinct or {}
    groups: dict[str, Accumulator] = {}
    for row in rows:
        key = normalize_id(key_fn(row))
        if not key:
            continue
        acc = groups.get(key)
        if acc is None:
            acc = Accumulator(
                key=key,
                totals={name: 0 for name in names},
                distinct={name: set() for name in distinct},
            )
            groups[key] = acc
        for name in names:
            acc.totals[name] += to_number(value_fn(row, name))
        for name, extract in distinct.items():
            ref = normalize_id(extract(row))
            if ref:
                acc.distinct[name].add(ref)
        acc.count += 1
        acc.rows.append(row)
    return groups


def derive(acc: Accumulator, **formulas: Callable[[Accumulator], Any]) -> Accumulator:
    """Calcola metriche derivate (tassi, percentuali) su un accumulatore."""
    for name, formula in formulas.items():
        acc.derived[name] = formula(acc)
    return acc


def top_by(
    items: Iterable[Any],
    value: Callable[[Any], Any],
    limit: int | None = None,
    name: Callable[[Any], str] | None = None,
) -> list[Any]:
    """Ordina per valore desc (poi nome asc se fornito) e taglia a limit."""
    if name is None:
        ordered = sorted(items, key=lambda it: -to_number(value(it)))
    else:
        ordered = sorted(items, key=lambda it: (-to_number(value(it)), (name(it) or "").lower()))
    return ordered if limit is None else ordered[:limit]


# ---------------------------------------------------------------------------
# Paginazione
# ---------------------------------------------------------------------------


@dataclass
class Page:
    items: list[Any]
    page: int
    per_page: int
    total: int
    total_pages: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def paginate(items: list[Any], page: Any, per_page: int) -> Page:
    """
    Slice di una lista. La pagina viene portata dentro [1, total_pages];
    total_pages vale almeno 1 anche per liste vuote.
    """
    if per_page <= 0:
        raise ValueError("per_page must be positive")
    total = len(items)
    total_pages = max(1, math.ceil(total / per_page))
    try:
        current = int(page)
    except (TypeError, ValueError):
        current = 1
    current = min(max(current, 1), total_pages)
    start = (current - 1) * per_page
    return Page(
        items=items[start:start + per_page],
        page=current,
        per_page=per_page,
        total=total,
        total_pages=total_pages,
    )
