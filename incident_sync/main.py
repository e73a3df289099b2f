"""Incident Sync — real-time incident board hub.

FastAPI entry point with lifespan management, hub seeding and CORS.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.router import api_router, websocket_router
from .dependencies import get_app_config, get_hub, get_telemetry_simulator
from .engine.seed import default_catalog, seed_incidents
from .middleware.error_handler import register_error_handlers
from .utils.logging import get_logger, setup_logging

logger = get_logger("incident_sync.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    config = get_app_config()
    hub = get_hub()
    hub.seed(seed_incidents() if config.seed_on_startup else [], default_catalog())

    simulator = None
    if config.telemetry_enabled:
        simulator = get_telemetry_simulator()
        await simulator.start()

    logger.info(
        "incident_sync_started",
        host=config.host,
        port=config.port,
        incidents=len(hub.store),
        telemetry=config.telemetry_enabled,
    )
    yield

    if simulator is not None:
        await simulator.stop()
    await hub.connections.close_all()
    logger.info("incident_sync_stopped", **hub.get_stats())


def create_app() -> FastAPI:
    config = get_app_config()
    setup_logging(config)

    application = FastAPI(
        title=config.app_name,
        version=__version__,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    register_error_handlers(application)
    application.include_router(api_router)
    application.include_router(websocket_router)

    @application.get("/health")
    async def health():
        hub = get_hub()
        modules = []
        if config.telemetry_enabled:
            modules.append(get_telemetry_simulator().get_status())
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "hub": hub.get_stats(),
            "modules": modules,
        }

    return application


app = create_app()


def main():
    """Run the Incident Sync hub."""
    config = get_app_config()
    uvicorn.run(
        "incident_sync.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
