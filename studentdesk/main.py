import asyncio
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from studentdesk.api.endpoints import system
from studentdesk.api.router import api_router
from studentdesk.core.config import Settings, settings as default_settings
from studentdesk.core.handlers import register_exception_handlers
from studentdesk.core.logging import handle_loop_exception, logger, setup_logging
from studentdesk.core.metrics import RequestMetrics
from studentdesk.core.middleware import RequestObservabilityMiddleware
from studentdesk.services.store.base import StudentStore
from studentdesk.services.store.factory import build_store


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[StudentStore] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    ``store`` lets callers (tests, the seed script) hand in an already built
    record store; otherwise one is built from ``settings.STORE_BACKEND``.
    """
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT, settings.SERVICE_NAME)

    store = store or build_store(settings)
    metrics = RequestMetrics()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        asyncio.get_running_loop().set_exception_handler(handle_loop_exception)
        store.startup()
        if store.backend == "sql":
            logger.info(
                "Record store ready",
                extra={"context": {"backend": store.backend, "uri": settings.masked_database_url()}},
            )
        logger.info(
            "Server started",
            extra={"context": {"port": settings.PORT, "backend": store.backend, "debug": settings.DEBUG}},
        )
        yield
        store.shutdown()
        logger.info("Server stopped")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.metrics = metrics
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added last so it wraps everything, CORS preflights included
    app.add_middleware(RequestObservabilityMiddleware, metrics=metrics)

    register_exception_handlers(app)

    app.include_router(system.router, tags=["system"])
    app.include_router(api_router, prefix="/api")

    # Browser client; mounted last so API routes win
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

    return app


app = create_app()
