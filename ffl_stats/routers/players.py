"""
API Players: grafici del giocatore come righe evento per competizione.
La pagina somma le righe del tab attivo (player_competition_id).
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ffl_stats.core.database import get_db
from ffl_stats.schemas.players import PlayerGraphsResponse
from ffl_stats.services.player_graphs_service import get_player_graphs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/players", tags=["players"])


@router.get("/{player_id}/graphs", response_model=PlayerGraphsResponse)
def player_graphs(player_id: str, db: Session = Depends(get_db)):
    """
    Gol per avversario, assist e pre-assist per compagno, contributi per
    squadra, kicks e gol subiti per avversario, portieri partner.
    404 {"error": "not_found"} se il giocatore non esiste.
    """
    try:
        graphs = get_player_graphs(db, player_id)
    except SQLAlchemyError as e:
        logger.exception("Errore DB grafici player_id=%s: %s", player_id, e)
        return JSONResponse(status_code=500, content={"error": "database_error"})
    if graphs is None:
        return JSONResponse(status_code=404, content={"error": "not_found"})
    return graphs
