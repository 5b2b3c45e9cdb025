import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scalelog.core.config import Settings, get_settings
from scalelog.core.db import MeasurementStore
from scalelog.core.errors import register_error_handlers
from scalelog.api.v1.health import router as health_router
from scalelog.api.v1.measurements import router as measurements_router

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[MeasurementStore] = None) -> FastAPI:
    settings = settings or get_settings()
    store = store or MeasurementStore(settings)

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        store.close()

    app = FastAPI(title="scalelog", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(measurements_router)

    log.info("Using %s.%s (%s)", settings.MONGODB_DATABASE, settings.MONGODB_COLLECTION, settings.ENVIRONMENT)
    return app


app = create_app()
