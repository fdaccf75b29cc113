from fastapi import APIRouter
from loguru import logger

from src.api.v1.endpoints import games, players, reports, settlements

logger.info("Initializing API v1 router")
api_router = APIRouter(prefix="/api/v1")

logger.debug("Registering games endpoint")
api_router.include_router(games.router, prefix="/games", tags=["games"])
logger.debug("Registering players endpoint")
api_router.include_router(players.router, prefix="/players", tags=["players"])
logger.debug("Registering settlements endpoint")
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
logger.debug("Registering reports endpoint")
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
logger.success("API v1 router initialized successfully")
