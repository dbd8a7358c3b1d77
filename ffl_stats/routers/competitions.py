"""API Competitions: classifica calcolata dalle partite."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ffl_stats.core.database import get_db
from ffl_stats.schemas.competitions import StandingsResponse
from ffl_stats.services.competition_service import get_competition_standings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/competitions", tags=["competitions"])


@router.get("/{competition_id}/standings", response_model=StandingsResponse)
def competition_standings(competition_id: str, db: Session = Depends(get_db)):
    """
    Classifica ordinata per punti, differenza reti, gol fatti, nome.
    Partite senza punteggio numerico o con lati mancanti sono ignorate.
    """
    standings = get_competition_standings(db, competition_id)
    if standings is None:
        raise HTTPException(status_code=404, detail="Competizione non trovata")
    return standings
