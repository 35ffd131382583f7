"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from storefront.api.deps import get_app_settings, get_database
from storefront.infrastructure.config import Settings
from storefront.infrastructure.database import Database

logger = structlog.get_logger()

router = APIRouter()

SERVICE_NAME = "storefront-catalog"


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=settings.api_version,
    )


@router.get("/ready", responses={503: {"description": "Database unreachable"}})
async def readiness_check(
    database: Annotated[Database, Depends(get_database)],
) -> JSONResponse:
    """Check if service is ready to accept requests.

    Returns:
        Readiness status; 503 when the database cannot be reached.
    """
    try:
        await database.ping()
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Readiness check failed", error=str(e))
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return JSONResponse(content={"status": "ready"})
