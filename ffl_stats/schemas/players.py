"""Pydantic schemas per API Players (grafici giocatore)."""

from pydantic import BaseModel


class GoalByOpponentRow(BaseModel):
    """Un gol del giocatore contro un avversario."""
    player_competition_id: str
    opponent_id: str = ""
    opponent_name: str = "Team"
    opponent_image: str = ""
    match_id: str = ""


class KicksByOpponentRow(GoalByOpponentRow):
    kicks: int = 0


class GoalsConcededByOpponentRow(GoalByOpponentRow):
    goals_conceded: int = 0


class AssistedPlayerRow(BaseModel):
    """Assist (o pre-assist) del giocatore verso un compagno."""
    player_competition_id: str
    assisted_id: str
    assisted_name: str = "Player"
    assisted_avatar: str = ""


class TeamContributionRow(BaseModel):
    """Riga per partita: contributo del giocatore con la sua squadra."""
    player_competition_id: str
    team_id: str
    team_name: str = "Team"
    team_image: str = ""
    match_id: str = ""
    goals: int = 0
    assists: int = 0
    preassists: int = 0


class GkPartnerRow(BaseModel):
    """Portiere compagno in una partita con clean sheet condiviso."""
    player_competition_id: str
    keeper_player_id: str
    keeper_id: str
    keeper_name: str = "Player"
    keeper_avatar: str = ""
    match_id: str = ""
    cs: int = 0


class PlayerGraphsResponse(BaseModel):
    goals_by_opponent: list[GoalByOpponentRow] = []
    assists_by_player: list[AssistedPlayerRow] = []
    preassists_by_player: list[AssistedPlayerRow] = []
    goals_by_team: list[TeamContributionRow] = []
    assists_by_team: list[TeamContributionRow] = []
    preassists_by_team: list[TeamContributionRow] = []
    kicks_by_opponent: list[KicksByOpponentRow] = []
    goals_conceded_by_opponent: list[GoalsConcededByOpponentRow] = []
    gk_partners: list[GkPartnerRow] = []


class GraphSummaryItem(BaseModel):
    """Totale per entità collegata (avversario, compagno, squadra)."""
    id: str
    name: str
    image: str = ""
    value: int = 0
