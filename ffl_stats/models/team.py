"""Team ORM model."""

from sqlalchemy import Column, Integer, String

from ffl_stats.core.database import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(Integer, unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=False)
    country = Column(String(128), nullable=True)
    image = Column(String(512), nullable=True)
    text_color = Column(String(32), nullable=True)
