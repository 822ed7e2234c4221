"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="tiktok-orders-dashboard",
        version=request.app.state.settings.api_version,
    )


@router.get("/ready")
async def readiness_check(request: Request) -> dict[str, str]:
    """Ready once the first order fetch has succeeded."""
    store = request.app.state.order_store
    return {"status": "ready" if store.loaded else "loading"}
