"""Team match statistics ORM model."""

from sqlalchemy import Column, Float, ForeignKey, Integer

from ffl_stats.core.database import Base


class TeamMatchStats(Base):
    __tablename__ = "team_match_stats"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(
        Integer,
        ForeignKey("matches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    team_competition_id = Column(
        Integer, ForeignKey("team_competitions.id"), nullable=False, index=True
    )
    won = Column(Integer, nullable=False, default=0)
    draw = Column(Integer, nullable=False, default=0)
    lost = Column(Integer, nullable=False, default=0)
    goals_scored = Column(Integer, nullable=False, default=0)
    goals_conceded = Column(Integer, nullable=False, default=0)
    cs = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=0)
    possession = Column(Float, nullable=True)
    kicks = Column(Integer, nullable=False, default=0)
    passes = Column(Integer, nullable=False, default=0)
    shots_on_goal = Column(Integer, nullable=False, default=0)
    shots_off_goal = Column(Integer, nullable=False, default=0)
    saves = Column(Integer, nullable=False, default=0)
