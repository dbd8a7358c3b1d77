"""Classifica calcolata dalle partite."""

from types import SimpleNamespace

from ffl_stats.analytics.standings import StandingRow, compute_standings, sort_standings


def _tc(id_, team_id):
    return SimpleNamespace(id=id_, team_id=team_id)


def _match(t1, t2, s1, s2):
    return SimpleNamespace(team1_competition_id=t1, team2_competition_id=t2, score_team1=s1, score_team2=s2)


def test_three_results_fold_into_one_row():
    tcs = [_tc(1, 10), _tc(2, 20), _tc(3, 30), _tc(4, 40)]
    teams = {"10": SimpleNamespace(name="Alpha", image=None)}
    matches = [_match(1, 2, 2, 1), _match(3, 1, 0, 0), _match(1, 4, 1, 3)]
    table = {row.team_competition_id: row for row in compute_standings(tcs, matches, teams)}
    row = table["1"]
    assert row.matches_played == 3
    assert (row.matches_won, row.matches_draw, row.matches_lost) == (1, 1, 1)
    assert row.points == 4
    assert (row.goals_scored, row.goals_conceded) == (3, 4)
    assert row.name == "Alpha"
    assert table["2"].name == "Team"


def test_invalid_matches_are_skipped():
    tcs = [_tc(1, 10), _tc(2, 20)]
    matches = [
        _match(1, 2, None, 1),
        _match(1, 2, "2", 1),
        _match(1, 99, 3, 0),
        _match(None, 2, 1, 0),
        _match(1, 1, 1, 0),
    ]
    rows = compute_standings(tcs, matches, {})
    assert all(r.matches_played == 0 and r.points == 0 for r in rows)
    assert len(rows) == 2


def test_sort_order_points_gd_goals_name():
    rows = [
        StandingRow("a", "1", "Zeta", points=6, goals_scored=5, goals_conceded=2),
        StandingRow("b", "2", "Beta", points=6, goals_scored=4, goals_conceded=1),
        StandingRow("c", "3", "Alfa", points=6, goals_scored=4, goals_conceded=1),
        StandingRow("d", "4", "Omega", points=9, goals_scored=1, goals_conceded=5),
        StandingRow("e", "5", "Delta", points=6, goals_scored=6, goals_conceded=3),
    ]
    assert [r.name for r in sort_standings(rows)] == ["Omega", "Delta", "Zeta", "Alfa", "Beta"]
