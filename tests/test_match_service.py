"""Dettaglio partita."""

import pytest

from ffl_stats.services.match_service import format_team_stat, get_match_detail


def test_missing_match(db_session):
    assert get_match_detail(db_session, "999") is None
    assert get_match_detail(db_session, "x") is None


def test_match_sides_and_bars(db_session):
    detail = get_match_detail(db_session, "1")
    assert (detail["team1"]["name"], detail["team2"]["name"]) == ("Alpha", "Beta")
    assert (detail["score1"], detail["score2"]) == (2, 1)
    assert detail["date"] == "10/03/2024"
    assert detail["competition_label"] == "Season 3 - Div 1"
    possession = detail["stat_bars"][0]
    assert (possession["display1"], possession["display2"]) == ("55.0%", "45.0%")
    assert possession["width1"] == pytest.approx(55)


def test_player_rows_and_lineups(db_session):
    detail = get_match_detail(db_session, "1")
    assert [p["name"] for p in detail["team1_players"]] == ["Ana Lopez", "Bruno Diaz"]
    assert detail["team1_players"][0]["minutes"] == "10:00"
    assert [p["name"] for p in detail["team2_players"]] == ["Carla Ruiz"]
    away = detail["lineup2"]["players"][0]
    assert away["x"] == 10


def test_format_team_stat():
    assert format_team_stat("possession", 555) == "55.5%"
    assert format_team_stat("kicks", 12.0) == "12"
