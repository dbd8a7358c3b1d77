"""
Pagine HTML server-side: home, competizioni, stagioni, squadre, giocatori,
partite, Elo. Entità mancante -> 404 (pagina not_found dal gestore in main).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ffl_stats.core.database import get_db
from ffl_stats.core.templating import templates
from ffl_stats.services.competition_service import get_competition_detail
from ffl_stats.services.elo_service import get_elo_leaderboard
from ffl_stats.services.home_service import get_home
from ffl_stats.services.listing_service import list_players
from ffl_stats.services.match_service import get_match_detail
from ffl_stats.services.player_service import get_player_detail
from ffl_stats.services.season_service import get_season_summary, list_competition_groups
from ffl_stats.services.team_service import get_team_detail, search_teams

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)


@router.get("/")
def page_home(request: Request, db: Session = Depends(get_db)):
    return templates.TemplateResponse(request, "home.html", get_home(db))


@router.get("/competitions")
def page_competitions(request: Request, db: Session = Depends(get_db)):
    return templates.TemplateResponse(
        request,
        "competitions.html",
        {"groups": list_competition_groups(db)},
    )


@router.get("/competitions/{competition_id}")
def page_competition_detail(request: Request, competition_id: str, page: str | None = None, db: Session = Depends(get_db)):
    """Partecipanti, classifica, partite (7 per pagina), statistiche e ranking."""
    detail = get_competition_detail(db, competition_id, matches_page=page)
    if detail is None:
        raise HTTPException(status_code=404, detail="Competizione non trovata")
    return templates.TemplateResponse(request, "competition_detail.html", detail)


@router.get("/seasons/{season_id}")
def page_season_detail(request: Request, season_id: str, highlight: str | None = None, db: Session = Depends(get_db)):
    summary = get_season_summary(db, season_id, highlight=highlight)
    if summary is None:
        raise HTTPException(status_code=404, detail="Stagione non trovata")
    return templates.TemplateResponse(request, "season_detail.html", summary)


@router.get("/teams")
def page_teams(
    request: Request,
    q: str | None = None,
    country: str | None = None,
    sort: str = "name_asc",
    page: str | None = None,
    db: Session = Depends(get_db),
):
    result = search_teams(db, q=q, country=country, sort=sort, page=page)
    return templates.TemplateResponse(
        request,
        "teams.html",
        {"result": result, "q": q or "", "country": country or "", "sort": sort},
    )


@router.get("/teams/{team_id}")
def page_team_detail(
    request: Request,
    team_id: str,
    tab: str | None = None,
    filter: str | None = None,
    outcome: str | None = None,
    page: str | None = None,
    roster_page: str | None = None,
    db: Session = Depends(get_db),
):
    """Totali, tab per competizione con filtri stagione, serie partite, rosa."""
    detail = get_team_detail(
        db,
        team_id,
        tab=tab,
        season_filter=filter,
        outcome_filter=outcome,
        matches_page=page,
        roster_page=roster_page,
    )
    if detail is None:
        raise HTTPException(status_code=404, detail="Squadra non trovata")
    return templates.TemplateResponse(request, "team_detail.html", detail)


@router.get("/players")
def page_players(request: Request, db: Session = Depends(get_db)):
    """Filtri statistici dinamici statN/opN/valN: letti direttamente dalla query string."""
    context = list_players(db, request.query_params)
    return templates.TemplateResponse(request, "players.html", context)


@router.get("/players/{player_id}")
def page_player_detail(
    request: Request,
    player_id: str,
    tab: str | None = None,
    filter: str | None = None,
    outcome: str | None = None,
    page: str | None = None,
    db: Session = Depends(get_db),
):
    detail = get_player_detail(
        db, player_id, tab=tab, season_filter=filter, outcome_filter=outcome, matches_page=page
    )
    if detail is None:
        raise HTTPException(status_code=404, detail="Giocatore non trovato")
    return templates.TemplateResponse(request, "player_detail.html", detail)


@router.get("/matches/{match_id}")
def page_match_detail(request: Request, match_id: str, db: Session = Depends(get_db)):
    detail = get_match_detail(db, match_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Partido no encontrado")
    return templates.TemplateResponse(request, "match_detail.html", detail)


@router.get("/elo")
def page_elo(request: Request, db: Session = Depends(get_db)):
    return templates.TemplateResponse(request, "elo.html", get_elo_leaderboard(db))
