"""Statistiche di un giocatore in una singola partita."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ffl_stats.core.database import Base
from ffl_stats.models.mixins import PlayerCounterColumns


class PlayerMatchStats(PlayerCounterColumns, Base):
    __tablename__ = "player_match_stats"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(
        Integer,
        ForeignKey("matches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    player_competition_id = Column(
        Integer, ForeignKey("player_competitions.id"), nullable=False, index=True
    )
    team_competition_id = Column(
        Integer, ForeignKey("team_competitions.id"), nullable=False, index=True
    )
    position = Column(String(8), nullable=True)

    match = relationship("Match", backref="player_match_stats")
