"""API Teams: ricerca squadre per nome e paese, ordinamento e paginazione."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ffl_stats.core.database import get_db
from ffl_stats.schemas.teams import TeamListResponse
from ffl_stats.services.team_service import search_teams

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.get("", response_model=TeamListResponse)
def list_teams(
    q: str | None = None,
    country: str | None = None,
    sort: str = "name_asc",
    page: int = 1,
    db: Session = Depends(get_db),
):
    """Pagina fuori range riportata nell'intervallo valido."""
    return search_teams(db, q=q, country=country, sort=sort, page=page)
