"""Health check API routes."""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_database_session
from app.settings import get_settings
from .schemas import (
    CredentialStoreHealth,
    DetailedHealthResponse,
    HealthResponse,
    LivenessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health Check"])

_started = time.monotonic()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _backend_name() -> str:
    return get_settings().database_url.split(":", 1)[0].split("+", 1)[0]


async def _check_credential_store(session: AsyncSession) -> CredentialStoreHealth:
    """Time a trivial query against the user database."""
    backend = _backend_name()
    start = time.perf_counter()
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Credential store check failed: {e}")
        return CredentialStoreHealth(status="unhealthy", backend=backend)

    latency_ms = round((time.perf_counter() - start) * 1000, 2)
    return CredentialStoreHealth(status="healthy", backend=backend, latency_ms=latency_ms)


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Answer without touching any dependency.",
)
async def basic_health_check() -> HealthResponse:
    """Cheap check for load balancers."""
    return HealthResponse(status="healthy", timestamp=_timestamp())


@router.get(
    "/detailed",
    response_model=DetailedHealthResponse,
    summary="Detailed health check",
    description="Report uptime and check the credential store.",
)
async def detailed_health_check(
    session: AsyncSession = Depends(get_database_session),
) -> DetailedHealthResponse:
    """
    Perform detailed health check of the service.

    The credential store is the only external dependency, so its check
    decides the overall status.
    """
    settings = get_settings()
    store = await _check_credential_store(session)

    return DetailedHealthResponse(
        status=store.status,
        version=settings.api_version,
        environment=settings.environment,
        timestamp=_timestamp(),
        uptime_seconds=round(time.monotonic() - _started, 3),
        credential_store=store,
    )


@router.get(
    "/live",
    response_model=LivenessResponse,
    summary="Liveness check",
    description="Check that the process is serving requests.",
)
async def liveness_check() -> LivenessResponse:
    return LivenessResponse(alive=True, timestamp=_timestamp())
