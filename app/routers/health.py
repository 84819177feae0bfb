# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Probes for load balancers and container orchestrators:
# - /health: the process answers and reports its environment
# - /health/ready: MongoDB answers a ping and photos can be written
# - /health/live: the event loop is not wedged
# =============================================================================

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from lib.database import Database

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessChecks(BaseModel):
    """Outcome per dependency: "healthy" or "unhealthy: <reason>"."""
    database: str
    uploads: str


class ReadinessResponse(BaseModel):
    status: str
    checks: ReadinessChecks
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_database() -> str:
    try:
        Database.ping()
    except Exception as e:
        logger.warning(f"Database ping failed: {e}")
        return f"unhealthy: {str(e)[:50]}"
    return "healthy"


def _check_uploads() -> str:
    path = Path(settings.FILE_UPLOAD_PATH)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Upload directory {path} unavailable: {e}")
        return f"unhealthy: {str(e)[:50]}"
    if not os.access(path, os.W_OK):
        return "unhealthy: upload directory is read-only"
    return "healthy"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Report that the API process is up."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Report whether requests can be served.

    Always answers 200; a failing dependency turns the status to
    "degraded" so the probe can tell a slow start from a dead process.
    """
    checks = ReadinessChecks(database=_check_database(), uploads=_check_uploads())
    healthy = all(value == "healthy" for value in checks.model_dump().values())

    return ReadinessResponse(
        status="ready" if healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(status="alive", timestamp=_now())
