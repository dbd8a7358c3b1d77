"""Lista e dettaglio squadra."""

import pytest

from ffl_stats.services.team_service import (
    get_team_detail,
    historic_seven,
    limit_series,
    outcome,
    search_teams,
)


def test_search_filters_sort_and_page(db_session):
    assert [t.name for t in search_teams(db_session, q="AL").teams] == ["Alpha"]
    assert [t.name for t in search_teams(db_session, country="ES").teams] == ["Alpha", "Gamma"]
    assert [t.name for t in search_teams(db_session, sort="name_desc").teams] == ["Gamma", "Beta", "Alpha"]
    result = search_teams(db_session, page=5, per_page=2)
    assert (result.page, result.total_pages, result.total) == (2, 2, 3)
    assert [t.name for t in result.teams] == ["Gamma"]
    assert result.countries == ["AR", "ES"]


def test_missing_team(db_session):
    assert get_team_detail(db_session, "999") is None


def test_totals_weight_possession_by_matches(db_session):
    detail = get_team_detail(db_session, "101")
    stats = detail["total_stats"]
    assert stats["matches_played"] == 4
    assert stats["won"] == 2
    assert stats["possession_avg"] == pytest.approx(52.5)
    assert detail["win_rate_label"] == "50%"
    assert detail["active_tab"] is None


def test_tabs_and_season_filters(db_session):
    detail = get_team_detail(db_session, "101")
    assert [t["label"] for t in detail["tabs"]] == ["Season 3, div 1"]
    tab = detail["tabs"][0]
    assert tab["season_filter_ids"] == {"all": ["1", "4"], "league": ["1"], "cup": ["4"], "supercup": []}

    cup = get_team_detail(db_session, "101", tab="1", season_filter="cup")
    assert cup["active_filter"] == "cup"
    assert cup["stats"]["matches_played"] == 1
    assert [s["match_id"] for s in cup["match_series"]] == ["5"]

    unknown = get_team_detail(db_session, "101", tab="1", season_filter="bogus")
    assert unknown["active_filter"] == "all"


def test_match_series_and_outcome_list(db_session):
    detail = get_team_detail(db_session, "101", outcome_filter="win")
    assert [s["outcome"] for s in detail["match_series"]] == ["win", "draw", "loss", "win"]
    assert detail["match_list"].total == 2
    assert detail["match_list"].items[0]["match_id"] == "5"
    assert detail["league_points"]["points"] == 4
    assert detail["league_points"]["max_points"] == 9

    league = get_team_detail(db_session, "101", tab="1", season_filter="league")
    assert len(league["match_series"]) == 3


def test_graph_lists(db_session):
    graphs = get_team_detail(db_session, "101")["graphs"]
    as_pairs = {key: [(it.name, it.value) for it in items] for key, items in graphs.items()}
    assert as_pairs["goals_by_opponent"] == [("Beta", 4), ("Gamma", 1)]
    assert as_pairs["goals_conceded_by_opponent"] == [("Gamma", 3), ("Beta", 1)]
    assert as_pairs["top_scorers"] == [("Ana Lopez", 3)]
    assert as_pairs["conceding_scorers"] == [("Dario Gil", 3), ("Carla Ruiz", 1)]
    assert as_pairs["matches_by_player"] == [("Ana Lopez", 4), ("Bruno Diaz", 4)]


def test_roster_orders_by_position(db_session):
    detail = get_team_detail(db_session, "101")
    roster = detail["roster"].items
    assert [(p["name"], p["position"], p["matches_played"]) for p in roster] == [
        ("Bruno Diaz", "GK", 4),
        ("Ana Lopez", "ST", 4),
    ]
    assert len(detail["historic_lineup"]["players"]) == 2


def test_outcome_and_limit_series():
    assert outcome(2, 1) == "win"
    assert outcome(1, 1) == "draw"
    assert outcome(0, 3) == "loss"
    series = [
        {"team_competition_id": "1", "date": 3},
        {"team_competition_id": "1", "date": 1},
        {"team_competition_id": "1", "date": 2},
        {"team_competition_id": "2", "date": 5},
    ]
    limited = limit_series(series, ["1", "2"], {"1": 2, "2": 0})
    assert [s["date"] for s in limited] == [2, 3, 5]


def test_historic_seven_keeps_a_goalkeeper():
    roster = [{"name": f"P{i}", "position": "ST", "matches_played": 20 - i} for i in range(8)]
    roster.append({"name": "Keeper", "position": "GK", "matches_played": 1})
    seven = historic_seven(roster)
    assert len(seven) == 7
    assert seven[-1]["name"] == "Keeper"
