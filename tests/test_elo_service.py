"""Classifica Elo: stagione attiva o complessiva."""

from ffl_stats.models import EloSeason
from ffl_stats.services.elo_service import get_elo_leaderboard


def test_active_season_leaderboard(db_session):
    board = get_elo_leaderboard(db_session)
    assert board["using_season"]
    assert board["season_label"] == "Season: S1"
    assert [r["name"] for r in board["by_elo"]] == ["Bruno", "Ana"]
    assert [r["name"] for r in board["by_matches"]] == ["Bruno", "Ana"]
    assert [r["name"] for r in board["by_win_rate"]] == ["Ana", "Bruno"]
    assert board["by_elo"][0]["win_rate"] == 0.25


def test_overall_table_without_active_season(db_session):
    season = db_session.get(EloSeason, 1)
    season.is_active = False
    db_session.commit()
    board = get_elo_leaderboard(db_session)
    assert not board["using_season"]
    assert [r["name"] for r in board["by_elo"]] == ["Ana", "Bruno"]
    assert board["by_elo"][0]["matches"] == 15
