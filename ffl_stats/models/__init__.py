from ffl_stats.models.competition import Competition
from ffl_stats.models.elo import EloPlayer, EloPlayerSeason, EloSeason
from ffl_stats.models.goal import Goal
from ffl_stats.models.match import Match
from ffl_stats.models.player import Player
from ffl_stats.models.player_competition import PlayerCompetition
from ffl_stats.models.player_match_stats import PlayerMatchStats
from ffl_stats.models.team import Team
from ffl_stats.models.team_competition import TeamCompetition
from ffl_stats.models.team_match_stats import TeamMatchStats

__all__ = [
    "Player",
    "Team",
    "Competition",
    "TeamCompetition",
    "PlayerCompetition",
    "Match",
    "PlayerMatchStats",
    "TeamMatchStats",
    "Goal",
    "EloPlayer",
    "EloSeason",
    "EloPlayerSeason",
]
