"""Health check endpoints — Service and backend health monitoring."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from docsearcher import __version__
from docsearcher.api.deps import get_client
from docsearcher.backends.base.client import BackendHealth, ServiceClient

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str = Field(description="Health status (e.g. 'healthy')")
    version: str = Field(description="doc-searcher server version")
    service: str = Field(description="Service name ('doc-searcher')")
    backend: str = Field(description="Name of the active search backend")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service Health Check",
    description="Returns service status, version and the name of the active backend.",
)
async def health_check(client: ServiceClient = Depends(get_client)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        service="doc-searcher",
        backend=client.name,
    )


@router.get(
    "/health/backend",
    response_model=BackendHealth,
    summary="Backend Health Check",
    description="Run a health check against the search engine behind the active backend.",
)
async def backend_health(client: ServiceClient = Depends(get_client)) -> BackendHealth:
    return await client.health_check()
