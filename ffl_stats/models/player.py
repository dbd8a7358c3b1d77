"""Player ORM model. Dati anagrafici giocatore."""

from sqlalchemy import Column, Integer, String

from ffl_stats.core.database import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(Integer, unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=False)
    country = Column(String(128), nullable=True)
    avatar = Column(String(512), nullable=True)
