"""Health check endpoints for Kubernetes probes."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..services.weather import WeatherClient
from .dependencies import get_weather_client

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model.

    Example:
        >>> HealthResponse(status="ok").providers
        []
    """

    status: str
    providers: list[str] = []


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application process is running",
)
async def health_check() -> HealthResponse:
    """Liveness probe; never touches upstream APIs."""
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness probe",
    description="Check that the weather client is up and list its providers in order",
)
async def readiness_check(
    client: Annotated[WeatherClient, Depends(get_weather_client)],
) -> HealthResponse:
    """Readiness probe for Kubernetes.

    Reports the configured providers without probing them, so an upstream
    outage does not take the service out of rotation.

    Example:
        >>> # GET /ready
        >>> # Returns: {"status": "ok", "providers": ["NWS", "Open-Meteo"]}
    """
    return HealthResponse(
        status="ok",
        providers=[provider.info.name for provider in client.providers],
    )
