"""Group-sum-derive, divisione sicura e paginazione."""

import math

import pytest

from ffl_stats.analytics.aggregation import (
    derive,
    group_sum,
    index_by,
    paginate,
    safe_divide,
    to_number,
    top_by,
)


def test_to_number_coercion():
    assert to_number(None) == 0
    assert to_number("3.5") == 3.5
    assert to_number("abc") == 0
    assert to_number(float("nan")) == 0
    assert to_number(float("inf")) == 0
    assert to_number(4) == 4


def test_safe_divide_zero_denominator():
    assert safe_divide(5, 0) == 0
    assert safe_divide(5, None) == 0
    assert safe_divide(5, -2) == 0
    assert safe_divide(3, 4) == 0.75
    assert not math.isnan(safe_divide(float("nan"), 2))


def test_group_sum_totals_equal_row_sums():
    rows = [
        {"pid": 1, "match": 10, "goals": 2, "kicks": 5},
        {"pid": 1, "match": 11, "goals": "1", "kicks": None},
        {"pid": 2, "match": 10, "goals": 0, "kicks": 3},
        {"pid": 1, "match": 11, "goals": 1, "kicks": 1},
        {"pid": None, "match": 12, "goals": 9, "kicks": 9},
    ]
    groups = group_sum(
        rows,
        key_fn=lambda r: r["pid"],
        fields=("goals", "kicks"),
        distinct={"matches": lambda r: r["match"]},
    )
    assert list(groups) == ["1", "2"]
    acc = groups["1"]
    assert acc.totals == {"goals": 4, "kicks": 6}
    assert acc.count == 3
    assert acc["matches"] == 2
    assert groups["2"].totals["goals"] == 0


def test_derive_attaches_rates():
    acc = group_sum([{"k": "a", "won": 3, "played": 4}], key_fn=lambda r: r["k"], fields=("won", "played"))["a"]
    derive(acc, win_rate=lambda a: safe_divide(a.totals["won"], a.totals["played"]))
    assert acc["win_rate"] == 0.75
    assert acc.as_dict()["win_rate"] == 0.75
    assert acc.get("missing", -1) == -1


def test_index_by_skips_empty_keys():
    rows = [{"id": 1}, {"id": None}, {"id": "2"}]
    assert set(index_by(rows)) == {"1", "2"}


def test_top_by_value_then_name():
    items = [{"n": "b", "v": 2}, {"n": "a", "v": 2}, {"n": "c", "v": 5}]
    ordered = top_by(items, lambda it: it["v"], limit=2, name=lambda it: it["n"])
    assert [it["n"] for it in ordered] == ["c", "a"]


@pytest.mark.parametrize("total,per_page", [(0, 7), (1, 7), (7, 7), (23, 7), (30, 30), (31, 30)])
def test_pagination_slices_are_disjoint_and_cover(total, per_page):
    items = list(range(total))
    first = paginate(items, 1, per_page)
    seen = []
    for n in range(1, first.total_pages + 1):
        seen.extend(paginate(items, n, per_page).items)
    assert seen == items
    assert first.total_pages >= 1


def test_paginate_clamps_page():
    items = list(range(10))
    assert paginate(items, 99, 3).page == 4
    assert paginate(items, 0, 3).page == 1
    assert paginate(items, "abc", 3).page == 1
    page = paginate(items, 2, 3)
    assert page.has_prev and page.has_next
    with pytest.raises(ValueError):
        paginate(items, 1, 0)
