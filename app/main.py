"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (health, admin session, qualitative screening)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Override store schema bootstrap

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from app.core.config import settings
from app.infrastructure.qualitative.override_repository import create_schema
from app.interfaces.admin import router as admin_router
from app.interfaces.health import router as health_router
from app.interfaces.qualitative.dependencies import get_db_engine
from app.interfaces.qualitative.router import router as qualitative_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: ensure the override table exists."""
    try:
        create_schema(get_db_engine())
    except Exception:
        logger.warning(
            "Override store could not be initialized. "
            "Override and review endpoints will fail until it is reachable.",
            exc_info=True,
        )
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(admin_router, prefix="/api/v1")
    app.include_router(qualitative_router, prefix="/api/v1")

    return app


app = create_app()
