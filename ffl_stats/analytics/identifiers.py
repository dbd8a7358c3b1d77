"""
Normalizzazione identificatori per join in memoria.

Un riferimento può arrivare come stringa, intero, riga ORM, dict (riga
`.mappings()` o payload JSON) o None. Tutto diventa una chiave stringa
canonica; "" se non risolvibile. Mai eccezioni: chi raggruppa scarta le
righe con chiave vuota.
"""

from collections.abc import Mapping
from typing import Any

_ID_KEYS = ("id", "_id")


def normalize_id(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else ""
    if isinstance(value, Mapping):
        for key in _ID_KEYS:
            if key in value:
                return normalize_id(value[key])
        return ""
    ref = getattr(value, "id", None)
    if ref is not None and ref is not value:
        return normalize_id(ref)
    return ""


def composite_key(*parts: Any) -> str:
    """Chiave composta "a:b:c". Vuota se una parte non si risolve."""
    keys = [normalize_id(p) for p in parts]
    if not all(keys):
        return ""
    return ":".join(keys)


def normalize_ids(values) -> set[str]:
    """Set di id normalizzati, senza vuoti."""
    return {k for k in (normalize_id(v) for v in values) if k}


def parse_numeric_ref(ref: Any) -> int | None:
    """'42' -> 42; None se il riferimento non è un intero."""
    key = normalize_id(ref)
    if key.isdigit():
        return int(key)
    return None
