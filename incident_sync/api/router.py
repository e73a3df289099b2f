"""Master API router — includes all sub-routers."""

from fastapi import APIRouter

from .routes.catalog import router as catalog_router
from .routes.incidents import router as incidents_router
from .websockets.events import router as ws_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(incidents_router)
api_router.include_router(catalog_router)

# WebSocket router is mounted at root level (no prefix)
websocket_router = ws_router
