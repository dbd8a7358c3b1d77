"""Goal ORM model: marcatore, assist, pre-assist (tutti player_competitions)."""

from sqlalchemy import Column, ForeignKey, Integer

from ffl_stats.core.database import Base


class Goal(Base):
    __tablename__ = "goals"

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
    scorer_id = Column(Integer, ForeignKey("player_competitions.id"), nullable=True, index=True)
    assist_id = Column(Integer, ForeignKey("player_competitions.id"), nullable=True)
    preassist_id = Column(Integer, ForeignKey("player_competitions.id"), nullable=True)
    minute = Column(Integer, nullable=True)
