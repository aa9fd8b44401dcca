from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from gym_billing.api.v1.router import router as api_v1_router
from gym_billing.config.settings import settings
from gym_billing.core.logging import configure_logging, get_logger
from gym_billing.core.middleware import register_exception_handlers, register_middlewares
from gym_billing.db.init_db import init_db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema bootstrap for development; production runs migrations
    if not settings.is_production():
        init_db()
    logger.info("app.started", environment=settings.ENVIRONMENT)
    yield


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers core middleware and the service error handler.
    - Includes the versioned API router under /api/v1.
    """
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    register_middlewares(app)
    register_exception_handlers(app)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok", "environment": settings.ENVIRONMENT}

    return app


app = create_app()
