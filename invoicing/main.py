"""
Main FastAPI application entry point.
Configures the app, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoicing.application.dto.base_dto import HealthCheckResponseDTO
from invoicing.config import Settings, get_settings
from invoicing.domain.services.payment_link_issuer import PaymentLinkIssuer
from invoicing.infrastructure.web.dependencies import build_container
from invoicing.infrastructure.web.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers
)
from invoicing.infrastructure.web.routers import catalog, invoices


logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_application(
    settings: Optional[Settings] = None,
    payment_link_issuer: Optional[PaymentLinkIssuer] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.
    Each application owns its repositories, locks and event dispatcher.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    container = build_container(settings, payment_link_issuer=payment_link_issuer)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(f"Starting {settings.api_title} v{settings.api_version}")
        logger.info(f"Environment: {settings.environment}")
        logger.info(
            f"Payment links: {settings.payment_link_provider}, "
            f"strict catalog references: {settings.strict_catalog_references}"
        )

        yield

        # Shutdown
        logger.info("Shutting down application")
        container.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=f"{settings.api_prefix}/docs" if settings.debug else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.debug else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.debug else None,
        lifespan=lifespan
    )
    app.state.container = container

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom error handler middleware
    app.add_middleware(ErrorHandlerMiddleware, debug=settings.debug)
    register_exception_handlers(app)

    # Include routers
    app.include_router(
        invoices.router,
        prefix=f"{settings.api_prefix}/invoices",
        tags=["Invoices"]
    )
    app.include_router(
        catalog.router,
        prefix=f"{settings.api_prefix}/catalog",
        tags=["Catalog"]
    )

    # Root endpoint
    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs" if settings.debug else None,
            "health": f"{settings.api_prefix}/health"
        }

    # Health check endpoint
    @app.get(f"{settings.api_prefix}/health", response_model=HealthCheckResponseDTO)
    async def health_check() -> HealthCheckResponseDTO:
        """Health check endpoint for monitoring."""
        return HealthCheckResponseDTO(
            status="healthy",
            version=settings.api_version,
            dependencies={
                "storage": settings.storage_backend,
                "payment_links": settings.payment_link_provider,
            }
        )

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "invoicing.main:create_application",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
