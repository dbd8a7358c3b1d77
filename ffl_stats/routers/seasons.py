"""API Seasons: competizione con squadre, partite e statistiche di squadra per partita."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ffl_stats.core.database import get_db
from ffl_stats.schemas.competitions import SeasonApiResponse
from ffl_stats.services.season_service import get_season_api

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/seasons", tags=["seasons"])


@router.get("/{competition_id}", response_model=SeasonApiResponse)
def season_detail(competition_id: str, highlight: str | None = None, db: Session = Depends(get_db)):
    """highlight: id partita da evidenziare nella lista."""
    try:
        data = get_season_api(db, competition_id, highlight=highlight)
    except SQLAlchemyError as e:
        logger.exception("Errore DB stagione competition_id=%s: %s", competition_id, e)
        return JSONResponse(status_code=500, content={"error": "Error interno del servidor"})
    if data is None:
        return JSONResponse(status_code=404, content={"error": "Competición no encontrada"})
    return data
