"""Home: conteggi, ultima lega, partite e ranking globali."""

from datetime import datetime

from ffl_stats.services.home_service import STATUS_FINISHED, STATUS_UPCOMING, get_home, match_status


def test_match_status():
    now = datetime(2024, 3, 20)
    assert match_status(datetime(2024, 4, 1), now) == STATUS_UPCOMING
    assert match_status(datetime(2024, 3, 1), now) == STATUS_FINISHED
    assert match_status(None, now) == STATUS_FINISHED


def test_home_context(db_session):
    home = get_home(db_session, now=datetime(2024, 3, 20))
    assert home["counts"] == {"teams": 3, "players": 5, "matches": 5, "competitions": 3}
    assert home["latest_league_href"] == "/competitions/11"
    assert home["latest_season_label"] == "Season 3"
    assert [row["name"] for row in home["standings"]] == ["Alpha", "Gamma", "Beta"]
    assert [m["id"] for m in home["historic_matches"]] == [1]

    recent = home["recent_matches"]
    assert [m["id"] for m in recent] == [5, 4, 3, 2, 1]
    assert recent[0]["status"] == STATUS_UPCOMING
    assert recent[-1]["status"] == STATUS_FINISHED
    assert home["today"] == "20/03/2024"


def test_home_rankings(db_session):
    home = get_home(db_session, now=datetime(2024, 3, 20))
    # nessun giocatore raggiunge le 7 partite
    assert home["player_rankings"]["goals"] == []
    assert home["team_rankings"]["won"][0]["name"] == "Alpha"
