from ffl_stats.routers.competitions import router as competitions_router
from ffl_stats.routers.health import router as health_router
from ffl_stats.routers.pages import router as pages_router
from ffl_stats.routers.players import router as players_router
from ffl_stats.routers.seasons import router as seasons_router
from ffl_stats.routers.teams import router as teams_router

__all__ = ["health_router", "players_router", "competitions_router", "seasons_router", "teams_router", "pages_router"]
