import time
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from bakery.core.config.settings import settings
from bakery.core.logging import logger
from bakery.infrastructure.database import check_database_health

router = APIRouter()
root_router = APIRouter()

_STARTED_AT = time.monotonic()


class HealthResponse(BaseModel):
    status: str
    environment: str
    version: str
    uptime_seconds: float
    timestamp: datetime


class ReadinessResponse(BaseModel):
    status: str
    database: str


@root_router.get("/", include_in_schema=False)
async def banner():
    return {"message": f"{settings.PROJECT_NAME} API", "version": settings.VERSION}


@router.get("", response_model=HealthResponse)
async def health_check():
    """Liveness probe. Answers without touching any dependency."""
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        version=settings.VERSION,
        uptime_seconds=round(time.monotonic() - _STARTED_AT, 3),
        timestamp=datetime.now(timezone.utc),
    )


@router.get("/ready", response_model=ReadinessResponse, responses={503: {"model": ReadinessResponse}})
async def readiness_check():
    """Readiness probe. Reports 503 while the database is unreachable."""
    if await check_database_health():
        return ReadinessResponse(status="ok", database="healthy")
    logger.error("readiness_check_failed", database="unhealthy")
    return JSONResponse(
        status_code=503,
        content=ReadinessResponse(status="degraded", database="unhealthy").model_dump(),
    )
