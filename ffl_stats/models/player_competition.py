"""PlayerCompetition: aggregato stagionale di un giocatore dentro una team-competition."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from ffl_stats.core.database import Base
from ffl_stats.models.mixins import PlayerCounterColumns

POSITIONS = ("GK", "CB", "LB", "RB", "DM", "CM", "AM", "LW", "RW", "ST")


class PlayerCompetition(PlayerCounterColumns, Base):
    __tablename__ = "player_competitions"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False, index=True)
    team_competition_id = Column(
        Integer,
        ForeignKey("team_competitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(String(8), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_captain = Column(Boolean, nullable=False, default=False)
    is_subcaptain = Column(Boolean, nullable=False, default=False)
    matches_played = Column(Integer, nullable=False, default=0)
    totw = Column(Integer, nullable=False, default=0)
    mvp = Column(Integer, nullable=False, default=0)
