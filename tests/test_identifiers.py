"""Normalizzazione id: nessuna eccezione, chiave vuota se non risolvibile."""

from types import SimpleNamespace

from ffl_stats.analytics.identifiers import composite_key, normalize_id, normalize_ids, parse_numeric_ref


def test_normalize_id_scalars():
    assert normalize_id(" 42 ") == "42"
    assert normalize_id(42) == "42"
    assert normalize_id(7.0) == "7"
    assert normalize_id(7.5) == ""
    assert normalize_id(None) == ""
    assert normalize_id(True) == ""


def test_normalize_id_mappings_and_objects():
    assert normalize_id({"id": 3}) == "3"
    assert normalize_id({"_id": "abc"}) == "abc"
    assert normalize_id({"name": "x"}) == ""
    assert normalize_id(SimpleNamespace(id=9)) == "9"
    assert normalize_id(SimpleNamespace(name="no id")) == ""
    assert normalize_id(object()) == ""


def test_composite_key_empty_when_any_part_missing():
    assert composite_key(1, "2", {"id": 3}) == "1:2:3"
    assert composite_key(1, None) == ""


def test_normalize_ids_drops_empty():
    assert normalize_ids([1, "1", None, "", {"id": 2}]) == {"1", "2"}


def test_parse_numeric_ref():
    assert parse_numeric_ref("12") == 12
    assert parse_numeric_ref(12) == 12
    assert parse_numeric_ref("abc") is None
    assert parse_numeric_ref(None) is None
