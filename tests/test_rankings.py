"""Ranking giocatori/squadre: soglie, ordinamento e tie break."""

from ffl_stats.analytics.rankings import (
    HOME_MIN_GAMES,
    PLAYER_METRIC_GROUPS,
    TEAM_METRIC_GROUPS,
    TOP_LIMIT,
    build_competition_ranking,
    build_home_ranking,
    build_team_ranking,
    rankings_by_metric,
    shots_against,
    should_include_player,
)


def metric(key, groups=PLAYER_METRIC_GROUPS):
    return next(m for g in groups for m in g.metrics if m.key == key)


def player(id_, **stats):
    row = {"id": str(id_), "name": f"P{id_}", "country": "ES", "matches_played": 10, "minutes_played": 0}
    row.update(stats)
    return row


def test_home_ranking_requires_min_games_and_sorts_desc():
    players = [
        player(1, goals=5),
        player(2, goals=9, matches_played=HOME_MIN_GAMES - 1),
        player(3, goals=7),
    ]
    rows = build_home_ranking(metric("goals"), players)
    assert [r["id"] for r in rows] == ["3", "1"]
    assert rows[0]["display"] == "7"


def test_home_ranking_gk_only_metrics():
    players = [player(1, cs=4, has_gk=False), player(2, cs=2, has_gk=True)]
    rows = build_home_ranking(metric("cs"), players)
    assert [r["id"] for r in rows] == ["2"]


def test_competition_ranking_excludes_zero_unless_allowed():
    players = [player(1, goals=0), player(2, goals=2)]
    assert [r["id"] for r in build_competition_ranking(metric("goals"), players)] == ["2"]
    owngoals = build_competition_ranking(metric("owngoals"), [player(1, owngoals=0), player(2, owngoals=1)])
    assert [r["id"] for r in owngoals] == ["1", "2"]


def test_goals_conceded_ascending_with_minutes_tie_break():
    players = [
        player(1, goals_conceded=3, minutes_played=9000),
        player(2, goals_conceded=3, minutes_played=12000),
        player(3, goals_conceded=1, minutes_played=7200),
        player(4, goals_conceded=0, minutes_played=100),
    ]
    rows = build_competition_ranking(metric("goals_conceded"), players)
    assert [r["id"] for r in rows] == ["3", "2", "1"]


def test_save_pct_uses_shots_against():
    assert shots_against({"saves": 6, "goals_conceded": 4}) == 10
    assert shots_against({"saves": 6, "goals_conceded": 4, "shots_defended": 20}) == 20
    m = metric("save_pct")
    keeper = player(1, saves=6, goals_conceded=4)
    assert m.value(keeper) == 0.6
    assert should_include_player(m, keeper, m.value(keeper))
    assert not should_include_player(m, player(2, saves=2, goals_conceded=1), 2 / 3)


def test_fwd_back_balance_allows_negative():
    m = metric("fwd_back_balance")
    p = player(1, passes=40, passes_forward=5, passes_backward=15)
    assert m.value(p) == -10
    assert should_include_player(m, p, m.value(p))


def test_gap_rows_carry_breakdown():
    rows = build_competition_ranking(metric("gap"), [player(1, goals=2, assists=1, preassists=1)])
    assert rows[0]["value"] == 4
    assert (rows[0]["goals"], rows[0]["assists"], rows[0]["preassists"]) == (2, 1, 1)


def test_rankings_are_capped():
    players = [player(i, goals=i + 1) for i in range(TOP_LIMIT + 5)]
    assert len(build_competition_ranking(metric("goals"), players)) == TOP_LIMIT


def test_team_ranking_and_catalog():
    teams = [
        {"id": "1", "name": "Alpha", "team": None, "won": 3, "matches_played": 4, "possession_avg": 55},
        {"id": "2", "name": "Beta", "team": None, "won": 1, "matches_played": 4, "possession_avg": 45},
    ]
    rows = build_team_ranking(metric("win_rate", TEAM_METRIC_GROUPS), teams)
    assert [r["name"] for r in rows] == ["Alpha", "Beta"]
    assert rows[0]["display"] == "75.0%"
    by_metric = rankings_by_metric(TEAM_METRIC_GROUPS, teams, build_team_ranking)
    assert by_metric["possession"][0]["display"] == "55.0%"
    assert {g.key for g in PLAYER_METRIC_GROUPS} == {
        "impact", "finishing", "passing", "defense", "progression", "physical",
    }
