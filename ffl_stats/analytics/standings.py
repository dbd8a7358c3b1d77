"""
Classifica di competizione calcolata dalle partite.

Vittoria 3 punti, pareggio 1. Partite con un lato mancante o un punteggio
non numerico vengono ignorate. Le squadre senza partite restano a zero.
"""

from dataclasses import dataclass
from typing import Any

from ffl_stats.analytics.aggregation import is_number
from ffl_stats.analytics.identifiers import normalize_id

POINTS_WIN = 3
POINTS_DRAW = 1


@dataclass
class StandingRow:
    team_competition_id: str
    team_id: str
    name: str
    image: str | None = None
    matches_played: int = 0
    matches_won: int = 0
    matches_draw: int = 0
    matches_lost: int = 0
    goals_scored: int = 0
    goals_conceded: int = 0
    points: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_scored - self.goals_conceded

    def record(self, scored: int, conceded: int) -> None:
        self.matches_played += 1
        self.goals_scored += scored
        self.goals_conceded += conceded
        if scored > conceded:
            self.matches_won += 1
            self.points += POINTS_WIN
        elif scored == conceded:
            self.matches_draw += 1
            self.points += POINTS_DRAW
        else:
            self.matches_lost += 1

    def as_dict(self) -> dict[str, Any]:
        return {
            "team_competition_id": self.team_competition_id,
            "team_id": self.team_id,
            "name": self.name,
            "image": self.image,
            "matches_played": self.matches_played,
            "matches_won": self.matches_won,
            "matches_draw": self.matches_draw,
            "matches_lost": self.matches_lost,
            "goals_scored": self.goals_scored,
            "goals_conceded": self.goals_conceded,
            "goal_difference": self.goal_difference,
            "points": self.points,
        }


def standing_sort_key(row: StandingRow) -> tuple:
    """Punti desc, differenza reti desc, gol fatti desc, nome asc."""
    return (-row.points, -row.goal_difference, -row.goals_scored, (row.name or "").lower(), row.name or "")


def sort_standings(rows: list[StandingRow]) -> list[StandingRow]:
    return sorted(rows, key=standing_sort_key)


def compute_standings(
    team_competitions: list[Any],
    matches: list[Any],
    teams_by_id: dict[str, Any],
) -> list[StandingRow]:
    """
    Una riga per team-competition partecipante, ordinata.
    teams_by_id: team id normalizzato -> Team (nome "Team" se assente).
    """
    table: dict[str, StandingRow] = {}
    for tc in team_competitions:
        tc_id = normalize_id(tc)
        if not tc_id:
            continue
        team_id = normalize_id(tc.team_id)
        team = teams_by_id.get(team_id)
        table[tc_id] = StandingRow(
            team_competition_id=tc_id,
            team_id=team_id,
            name=team.name if team is not None and team.name else "Team",
            image=team.image if team is not None else None,
        )

    for m in matches:
        side1 = table.get(normalize_id(m.team1_competition_id))
        side2 = table.get(normalize_id(m.team2_competition_id))
        if side1 is None or side2 is None or side1 is side2:
            continue
        if not is_number(m.score_team1) or not is_number(m.score_team2):
            continue
        s1, s2 = int(m.score_team1), int(m.score_team2)
        side1.record(s1, s2)
        side2.record(s2, s1)

    return sort_standings(list(table.values()))
