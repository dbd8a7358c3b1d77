"""Competition ORM model: league, cup, supercup, summer_cup, nations_cup."""

from sqlalchemy import Column, Date, ForeignKey, Index, Integer, String

from ffl_stats.core.database import Base

COMPETITION_TYPES = ("league", "cup", "supercup", "summer_cup", "nations_cup")
COMPETITION_STATUSES = ("upcoming", "active", "finished")


class Competition(Base):
    __tablename__ = "competitions"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(Integer, unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=True)
    type = Column(String(32), nullable=False, default="league")
    season = Column(Integer, nullable=True, index=True)
    division = Column(Integer, nullable=True)
    year = Column(Integer, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(String(16), nullable=True)
    champion_team_id = Column(Integer, ForeignKey("teams.id"), nullable=True)
    team_count = Column(Integer, nullable=False, default=0)
    match_count = Column(Integer, nullable=False, default=0)
    image = Column(String(512), nullable=True)

    __table_args__ = (
        Index("ix_competitions_season_type", "season", "type"),
    )
