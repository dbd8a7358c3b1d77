"""Pagina giocatore: totali, tab, filtri stagione e serie."""

import pytest

from ffl_stats.services.player_service import get_player_detail


def test_missing_player(db_session):
    assert get_player_detail(db_session, "999") is None


def test_totals_weight_avg_by_matches(db_session):
    detail = get_player_detail(db_session, "201")
    stats = detail["total_stats"]
    assert stats["matches_played"] == 4
    assert stats["goals"] == 3
    assert stats["avg"] == pytest.approx(7.25)
    assert stats["minutes_label"] == "30:00"
    assert detail["win_rate_label"] == "50%"
    assert not detail["is_goalkeeper"]
    assert detail["player_competition_ids"] == ["1", "5"]


def test_tabs_use_lowercase_cup_label(db_session):
    detail = get_player_detail(db_session, "201")
    assert [t["label"] for t in detail["tabs"]] == ["Alpha - Season 3 - Div 1"]
    assert detail["tabs"][0]["season_filter_ids"]["cup"] == ["5"]
    assert detail["tabs"][0]["logo"] == "/alpha.png"


def test_season_filter_limits_series_and_graphs(db_session):
    detail = get_player_detail(db_session, "201", tab="1", season_filter="league")
    assert detail["stats"]["matches_played"] == 3
    assert len(detail["match_series"]) == 3
    goals = [(it.name, it.value) for it in detail["graphs"]["goals_by_opponent"]]
    assert goals == [("Beta", 1), ("Gamma", 1)]


def test_outcome_list_and_positions(db_session):
    detail = get_player_detail(db_session, "201", outcome_filter="loss")
    assert [s["outcome"] for s in detail["match_series"]] == ["win", "draw", "loss", "win"]
    assert detail["match_list"].total == 1
    assert detail["match_list"].items[0]["position"] == "ST"


def test_goalkeeper_flag_and_partners(db_session):
    detail = get_player_detail(db_session, "202")
    assert detail["is_goalkeeper"]
    assists = [(it.name, it.value) for it in detail["graphs"]["assists_by_player"]]
    assert assists == [("Ana Lopez", 2)]
