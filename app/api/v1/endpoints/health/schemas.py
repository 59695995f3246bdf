"""Health check API schemas."""

from typing import Literal, Optional
from pydantic import BaseModel, Field

HealthStatus = Literal["healthy", "unhealthy"]


class HealthResponse(BaseModel):
    """Basic health check response schema."""

    status: HealthStatus = Field(
        ...,
        description="Service health status",
        examples=["healthy"],
    )
    timestamp: str = Field(
        ...,
        description="Response timestamp (UTC, ISO 8601)",
        examples=["2025-09-06T15:00:00Z"],
    )


class CredentialStoreHealth(BaseModel):
    """Check result for the user database."""

    status: HealthStatus
    backend: str = Field(..., description="SQL dialect in use", examples=["sqlite"])
    latency_ms: Optional[float] = Field(
        None,
        description="Round trip of a trivial query, absent when the check failed",
        examples=[1.7],
    )


class DetailedHealthResponse(BaseModel):
    """Detailed health check response schema."""

    status: HealthStatus = Field(
        ...,
        description="Overall service health status",
        examples=["healthy"],
    )
    version: str = Field(..., examples=["1.0.0"])
    environment: str = Field(..., examples=["development"])
    timestamp: str = Field(..., examples=["2025-09-06T15:00:00Z"])
    uptime_seconds: float = Field(
        ...,
        description="Seconds since the process started serving",
        examples=[3600.5],
    )
    credential_store: CredentialStoreHealth


class LivenessResponse(BaseModel):
    """Liveness check response schema."""

    alive: bool = Field(..., examples=[True])
    timestamp: str = Field(..., examples=["2025-09-06T15:00:00Z"])
