"""
FastAPI Application Factory.

Usage:
    # Development
    uvicorn api.app:create_app --factory --reload

    # Production
    uvicorn api.app:create_app --factory --host 0.0.0.0 --port 8080
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import get_settings
from core.logging import configure_logging, get_logger
from core.middleware import RequestTracingMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Configures logging on startup. The Supabase client is created lazily
    on the first request that needs it.
    """
    settings = get_settings()

    configure_logging(
        json_logs=settings.is_production or settings.log_json,
        log_level="DEBUG" if settings.debug else "INFO",
    )

    logger.info(
        "Starting theme mapping API",
        environment=settings.environment,
        port=settings.port,
        products_table=settings.products_table,
    )

    yield

    logger.info("Shutting down theme mapping API")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="Creator Theme Mapping API",
        description="""
        Assigns content themes (festive, party, workwear, ...) to the products
        recommended to creators.

        ## Main Endpoints

        - `POST /api/themes/map` - Map one batch of products; call repeatedly with
          the returned `lastProcessedId` until `status` is not `processing`
        - `POST /api/themes/classify` - Preview themes for a single product
        - `GET /api/themes` - Theme catalog

        ## Health Checks

        - `/health`, `/health/detailed`, `/ready`, `/live`
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # =========================================================================
    # Middleware (order matters - first added = outermost)
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestTracingMiddleware)

    # =========================================================================
    # Routes
    # =========================================================================

    from api.routes.health import router as health_router
    app.include_router(health_router, tags=["Health"])

    from api.routes.themes import router as themes_router
    app.include_router(themes_router)

    return app
