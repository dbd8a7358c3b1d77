"""Pydantic schemas per API Competitions e Seasons."""

from datetime import datetime

from pydantic import BaseModel


class StandingRowOut(BaseModel):
    position: int
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
    goal_difference: int = 0
    points: int = 0


class CompetitionInfo(BaseModel):
    id: int
    public_id: int | None = None
    name: str
    title: str
    type: str
    type_label: str
    status: str | None = None
    status_label: str = ""
    season: int | None = None
    division: int | None = None
    start_date: str | None = None
    end_date: str | None = None
    image: str


class StandingsResponse(BaseModel):
    competition: CompetitionInfo
    standings: list[StandingRowOut]


class SeasonTeamRow(BaseModel):
    """Team-competition di stagione con la sua squadra."""
    team_competition_id: str
    team_id: str
    name: str
    image: str | None = None
    matches_played: int = 0
    won: int = 0
    draw: int = 0
    lost: int = 0
    goals_scored: int = 0
    goals_conceded: int = 0
    points: int = 0

    class Config:
        from_attributes = True


class SeasonMatchTeamStats(BaseModel):
    team_competition_id: str
    goals_scored: int = 0
    goals_conceded: int = 0
    possession: float | None = None
    kicks: int = 0
    passes: int = 0
    shots_on_goal: int = 0
    saves: int = 0


class SeasonMatchRow(BaseModel):
    id: int
    date: datetime | None = None
    team1_competition_id: str
    team2_competition_id: str
    team1_name: str = "Team A"
    team2_name: str = "Team B"
    score_team1: int | None = None
    score_team2: int | None = None
    highlighted: bool = False
    team_stats: list[SeasonMatchTeamStats] = []


class SeasonApiResponse(BaseModel):
    competition: CompetitionInfo
    highlight: str | None = None
    teams: list[SeasonTeamRow]
    matches: list[SeasonMatchRow]
