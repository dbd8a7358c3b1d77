"""Classifica Elo: giocatori, stagioni Elo e righe giocatore-stagione."""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ffl_stats.core.database import Base


class EloPlayer(Base):
    __tablename__ = "elo_players"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    elo = Column(Float, nullable=False, default=1000)
    matches = Column(Integer, nullable=False, default=0)
    wins = Column(Integer, nullable=False, default=0)
    losses = Column(Integer, nullable=False, default=0)
    draws = Column(Integer, nullable=False, default=0)
    streaks = Column(Integer, nullable=False, default=0)


class EloSeason(Base):
    __tablename__ = "elo_seasons"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)


class EloPlayerSeason(Base):
    __tablename__ = "elo_player_seasons"

    id = Column(Integer, primary_key=True, index=True)
    elo_player_id = Column(Integer, ForeignKey("elo_players.id", ondelete="CASCADE"), nullable=False, index=True)
    elo_season_id = Column(Integer, ForeignKey("elo_seasons.id", ondelete="CASCADE"), nullable=False, index=True)
    elo = Column(Float, nullable=False, default=1000)
    matches = Column(Integer, nullable=False, default=0)
    wins = Column(Integer, nullable=False, default=0)
    losses = Column(Integer, nullable=False, default=0)
    draws = Column(Integer, nullable=False, default=0)
    streaks = Column(Integer, nullable=False, default=0)

    player = relationship("EloPlayer", backref="season_rows")
