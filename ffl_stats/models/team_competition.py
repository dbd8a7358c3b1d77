"""
TeamCompetition: partecipazione di una squadra a una competizione.
Statistiche aggregate di competizione + varianti kit.
"""

from sqlalchemy import JSON, Column, Float, ForeignKey, Integer, UniqueConstraint

from ffl_stats.core.database import Base

# Contatori squadra sommabili (possession_avg si media a parte).
TEAM_COUNTER_FIELDS = (
    "matches_played",
    "won",
    "draw",
    "lost",
    "goals_scored",
    "goals_conceded",
    "cs",
    "points",
    "kicks",
    "passes",
    "shots_on_goal",
    "shots_off_goal",
    "saves",
)


class TeamCompetition(Base):
    __tablename__ = "team_competitions"

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    competition_id = Column(
        Integer,
        ForeignKey("competitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    matches_played = Column(Integer, nullable=False, default=0)
    won = Column(Integer, nullable=False, default=0)
    draw = Column(Integer, nullable=False, default=0)
    lost = Column(Integer, nullable=False, default=0)
    goals_scored = Column(Integer, nullable=False, default=0)
    goals_conceded = Column(Integer, nullable=False, default=0)
    cs = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=0)
    possession_avg = Column(Float, nullable=False, default=0)
    kicks = Column(Integer, nullable=False, default=0)
    passes = Column(Integer, nullable=False, default=0)
    shots_on_goal = Column(Integer, nullable=False, default=0)
    shots_off_goal = Column(Integer, nullable=False, default=0)
    saves = Column(Integer, nullable=False, default=0)
    # [{"image": "...", "color": "#ffffff"}, ...]
    kits = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        UniqueConstraint("team_id", "competition_id", name="uq_team_competition"),
    )
