"""Match ORM model. Due lati team-competition, punteggio, data, commenti liberi."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from ffl_stats.core.database import Base


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    competition_id = Column(
        Integer,
        ForeignKey("competitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    team1_competition_id = Column(Integer, ForeignKey("team_competitions.id"), nullable=True, index=True)
    team2_competition_id = Column(Integer, ForeignKey("team_competitions.id"), nullable=True, index=True)
    date = Column(DateTime, nullable=True, index=True)
    score_team1 = Column(Integer, nullable=True)
    score_team2 = Column(Integer, nullable=True)
    # Flag liberi: "Historic", "deffwin" (vittoria a tavolino)
    comments = Column(String(512), nullable=True)
