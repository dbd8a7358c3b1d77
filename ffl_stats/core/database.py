"""SQLAlchemy engine, session e dependency."""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ffl_stats.core.config import get_database_url

logger = logging.getLogger(__name__)

engine = create_engine(
    get_database_url(),
    pool_pre_ping=True,
    echo=False,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Dependency that yields a DB session. Caller must close."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Crea le tabelle mancanti. Nessuna migrazione: il database è popolato
    da servizi esterni, l'app legge soltanto.
    I modelli devono essere importati prima per registrare i metadata.
    """
    from ffl_stats.models import (  # noqa: F401
        competition,
        elo,
        goal,
        match,
        player,
        player_competition,
        player_match_stats,
        team,
        team_competition,
        team_match_stats,
    )

    Base.metadata.create_all(bind=engine)
    logger.info("create_all completato")
