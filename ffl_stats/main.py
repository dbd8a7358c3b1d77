"""FFL Stats: statistiche di leghe, squadre, giocatori e partite."""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from ffl_stats.core.database import init_db
from ffl_stats.core.templating import templates
from ffl_stats.routers import (
    competitions_router,
    health_router,
    pages_router,
    players_router,
    seasons_router,
    teams_router,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="FFL Stats",
    description="Statistiche di competizioni, squadre, giocatori e partite calcolate dai dati grezzi.",
    version="0.1.0",
)

app.include_router(health_router)
app.include_router(players_router)
app.include_router(competitions_router)
app.include_router(seasons_router)
app.include_router(teams_router)
app.include_router(pages_router)

static_dir = Path(__file__).parent / "static"
if static_dir.exists():
    app.mount("/static", StaticFiles(directory=str(static_dir), html=True), name="static")


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    """Le pagine HTML mostrano not_found.html; /api resta JSON."""
    if exc.status_code == 404 and not request.url.path.startswith("/api"):
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"message": exc.detail if isinstance(exc.detail, str) else "Not Found"},
            status_code=404,
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))


@app.on_event("startup")
def on_startup():
    """Crea le tabelle mancanti all'avvio."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    init_db()
