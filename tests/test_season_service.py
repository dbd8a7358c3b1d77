"""Raggruppamento stagioni, riepilogo e API stagione."""

from ffl_stats.services.season_service import (
    get_season_api,
    get_season_summary,
    list_competition_groups,
    parse_season_ref,
)


def test_groups_merge_one_season_and_sort_by_start(db_session):
    groups = list_competition_groups(db_session)
    assert [g["title"] for g in groups] == ["Summer Cup", "Season 3"]

    summer, season = groups
    assert summer["link"] == "/competitions/13"
    assert [c["label"] for c in season["competitions"]] == ["Div 1", "Cup"]
    assert season["competitions"][0]["champion"] == "Alpha"
    assert season["start"] == "01/03/2024"
    assert season["team_count"] == 5
    assert season["match_count"] == 5
    assert season["link"] == "/seasons/season-3"
    assert season["season_name"] == "Spring"
    assert summer["season_name"] == "Summer"


def test_parse_season_ref():
    assert parse_season_ref("season-3") == 3
    assert parse_season_ref("3") == 3
    assert parse_season_ref("season-x") is None


def test_season_summary_defaults_to_first_division(db_session):
    summary = get_season_summary(db_session, "season-3")
    assert summary["highlight"] == "div1"
    assert [t.name for t in summary["teams"]] == ["Alpha", "Gamma", "Beta"]
    assert len(summary["matches"]) == 4
    assert summary["statistics"]["top_scorers"][0]["name"] == "Dario Gil"
    assert [p["name"] for p in summary["statistics"]["top_cs"]] == ["Bruno Diaz"]


def test_season_summary_highlight(db_session):
    summary = get_season_summary(db_session, "season-3", highlight="cup")
    assert summary["competition"].type == "cup"
    assert [c["active"] for c in summary["competitions"]] == [False, True]
    assert summary["statistics"]["top_scorers"][0] == {
        "player_id": "1", "public_id": 201, "name": "Ana Lopez", "value": 1,
    }


def test_missing_season(db_session):
    assert get_season_summary(db_session, "season-9") is None
    assert get_season_summary(db_session, "abc") is None


def test_season_api(db_session):
    data = get_season_api(db_session, "11", highlight="1")
    assert [t.name for t in data.teams] == ["Alpha", "Gamma", "Beta"]
    assert len(data.matches) == 4
    first = data.matches[0]
    assert first.highlighted
    assert {s.team_competition_id for s in first.team_stats} == {"1", "2"}
    assert not data.matches[1].highlighted
    assert data.matches[3].score_team1 is None
    assert get_season_api(db_session, "999") is None
