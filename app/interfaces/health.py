"""
Health check router.

``/health`` is the liveness check and never touches dependencies.
``/health/ready`` is the readiness check and checks that the override
store answers a trivial query.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.interfaces.qualitative.dependencies import get_db_engine
from app.interfaces.qualitative.schemas import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status and version.",
)
def health_check() -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(status="ok", version=settings.version)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
    summary="Readiness check",
    description="Returns 503 while the override store is unreachable.",
)
def readiness_check(engine: Engine = Depends(get_db_engine)):
    """Report whether the override store can serve queries."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Readiness check failed: %s", type(exc).__name__)
        body = ReadinessResponse(status="unavailable", version=settings.version, store="down")
        return JSONResponse(status_code=503, content=body.model_dump())
    return ReadinessResponse(status="ok", version=settings.version, store="up")
