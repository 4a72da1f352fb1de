from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from core.config import get_settings
from core.logging import get_logger
from live.poller import LivePoller

from api.routes.health import router as health_router
from api.routes.live import router as live_router
from api.routes.metrics import router as metrics_router

logger = get_logger("api.app")


def create_app(poller: Optional[LivePoller] = None, *, autostart: bool = True) -> FastAPI:
    """
    App FastAPI che espone lo snapshot live.
    Il poller (creato in lifespan se non passato) vive quanto l'app.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.poller is None:
            try:
                app.state.poller = LivePoller()
            except Exception as exc:
                logger.error("Impossibile creare il poller live: %s", exc)
        current = app.state.poller
        if current is not None and autostart:
            await current.start()
        try:
            yield
        finally:
            if current is not None and autostart:
                await current.stop()

    app = FastAPI(title="Live Dangerous Attacks API", version="0.1.0", lifespan=lifespan)
    app.state.poller = poller
    try:
        get_settings()
    except Exception as exc:
        logger.error("Impossibile caricare settings: %s", exc)

    app.include_router(health_router)
    app.include_router(live_router)
    app.include_router(metrics_router)
    return app


app = create_app()
