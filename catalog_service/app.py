"""FastAPI application factory for the Catalog Service API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_service.config import settings
from catalog_service.database.base import Base
from catalog_service.database.engine import engine
from catalog_service.log_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Optionally create the schema on startup, dispose async engine on shutdown."""
    if settings.auto_create_schema:
        import catalog_service.models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.project_name,
        description="Category and product catalog with validated writes and a uniform error envelope.",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.expose_docs else None,
        redoc_url="/api/redoc" if settings.expose_docs else None,
        openapi_url="/api/openapi.json" if settings.expose_docs else None,
    )

    # Validators are resolved per request shape from this explicit mapping
    from catalog_service.modules.product.validators import build_validation_stage

    application.state.validation_stage = build_validation_stage()

    # --- Exception handling ---
    from catalog_service.middleware.error_handler import (
        ErrorTranslationMiddleware,
        ErrorTranslator,
        register_exception_handlers,
    )

    translator = ErrorTranslator()
    register_exception_handlers(application, translator)

    # --- Middleware (last added = outermost in Starlette) ---

    application.add_middleware(ErrorTranslationMiddleware, translator=translator)

    # CORS: origins come from the CORS_ORIGINS env var
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID: registered last so it runs first (outermost)
    from catalog_service.middleware.request_id import RequestIdMiddleware

    application.add_middleware(RequestIdMiddleware)

    # --- Routers ---
    from catalog_service.api.v1 import v1_router

    application.include_router(v1_router)

    # Health check
    @application.get("/health")
    async def health_check() -> dict:
        return {"status": "ok"}

    logger.info("%s %s configured (%s)", settings.project_name, settings.version, settings.environment)
    return application


app = create_app()
