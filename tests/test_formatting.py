"""Etichette competizione, date e valori di ranking."""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from ffl_stats.analytics.formatting import (
    DEFAULT_COMPETITION_IMAGE,
    TYPE_LABELS,
    competition_image,
    competition_label,
    competition_title,
    format_date,
    format_minutes_seconds,
    format_value,
    season_name_for_date,
    status_label,
    tab_label,
    type_label,
)
from ffl_stats.models.competition import COMPETITION_TYPES


def _comp(**kw):
    base = dict(id=1, public_id=None, name=None, type="league", season=None, division=None,
                year=None, start_date=None, image=None)
    base.update(kw)
    return SimpleNamespace(**base)


@pytest.mark.parametrize("comp,expected", [
    (_comp(season=3, division=1), "Season 3, div 1"),
    (_comp(season=3), "Season 3"),
    (_comp(type="cup", season=3), "Season 3, Cup"),
    (_comp(type="supercup", season=4), "Season 4, Supercup"),
    (_comp(type="summer_cup", start_date=date(2024, 7, 1)), "Summer Cup 2024"),
    (_comp(type="nations_cup", year=2023), "Nations Cup 2023"),
    (_comp(type="nations_cup"), "Nations Cup"),
    (_comp(type=None, name="Amistoso"), "Amistoso"),
    (_comp(type=None), "Competition"),
])
def test_competition_title(comp, expected):
    assert competition_title(comp) == expected


def test_competition_label_variants():
    league = _comp(season=3, division=2)
    cup = _comp(type="cup", season=3)
    assert competition_label(league) == "Season 3 - Div 2"
    assert competition_label(cup) == "Season 3 - Cup"
    assert competition_label(cup, lowercase_cups=True) == "Season 3 - cup"
    assert competition_label(None) == ""
    assert tab_label("Alpha", cup, lowercase_cups=True) == "Alpha - Season 3 - cup"
    assert tab_label(None, league) == "Team - Season 3 - Div 2"


def test_type_and_status_labels():
    assert set(TYPE_LABELS) == set(COMPETITION_TYPES)
    assert type_label("summer_cup") == "Summer Cup"
    assert type_label("other") == "other"
    assert status_label("upcoming") == "Próximo"
    assert status_label(None) == ""


@pytest.mark.parametrize("month,name", [(1, "Winter"), (3, "Spring"), (5, "Spring"), (6, "Summer"),
                                        (9, "Autumn"), (11, "Autumn"), (12, "Winter")])
def test_season_name_for_date(month, name):
    assert season_name_for_date(date(2024, month, 1)) == name


def test_dates_and_minutes():
    assert format_date(date(2024, 3, 5)) == "05/03/2024"
    assert format_date(datetime(2024, 12, 31, 23, 59)) == "31/12/2024"
    assert format_date(None) == ""
    assert format_minutes_seconds(125) == "2:05"
    assert format_minutes_seconds(None) == "0:00"


@pytest.mark.parametrize("value,fmt,expected", [
    (0.1234, "percent", "12.3%"),
    (1.5, "decimal", "1.50"),
    (125, "time", "2:05"),
    (2.5, "number", "3"),
    (7, "number", "7"),
    (float("nan"), "number", "-"),
    (float("inf"), "percent", "-"),
    (None, "number", "-"),
    ("abc", "decimal", "-"),
])
def test_format_value(value, fmt, expected):
    assert format_value(value, fmt) == expected


def test_default_competition_image():
    assert competition_image(None) == DEFAULT_COMPETITION_IMAGE
    assert competition_image(_comp(image="/x.png")) == "/x.png"
    assert competition_image(_comp()) == "/static/default-tournament.svg"
