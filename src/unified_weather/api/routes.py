"""API routes for weather endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from pydantic import BaseModel

from ..core.errors import (
    APIError,
    DecodingError,
    LocationNotFoundError,
    NetworkError,
    NoDataAvailableError,
    NoProviderAvailableError,
    RateLimitedError,
    UnsupportedLocationError,
    WeatherError,
)
from ..models.location import CityLocation, CoordinateLocation
from ..models.weather import CurrentWeather, Forecast, HourlyForecast
from ..services.weather import WeatherClient
from .dependencies import get_location, get_weather_client

router = APIRouter()

LocationParam = Annotated[CoordinateLocation | CityLocation, Depends(get_location)]
ClientParam = Annotated[WeatherClient, Depends(get_weather_client)]

_STATUS_BY_ERROR: tuple[tuple[type[WeatherError], int], ...] = (
    (LocationNotFoundError, 404),
    (UnsupportedLocationError, 422),
    (NoProviderAvailableError, 422),
    (RateLimitedError, 429),
    (NetworkError, 504),
    (APIError, 502),
    (DecodingError, 502),
    (NoDataAvailableError, 502),
)

_ERROR_RESPONSES = {
    400: {"description": "Missing or conflicting location parameters"},
    404: {"description": "City not found by the geocoder"},
    422: {"description": "No configured provider covers the location"},
    429: {"description": "Upstream rate limit reached"},
    502: {"description": "Upstream API error"},
    504: {"description": "Upstream API unreachable"},
}


class CurrentWeatherResponse(BaseModel):
    """Current conditions plus the temperature rendered in the configured unit.

    Example:
        >>> CurrentWeatherResponse.model_fields.keys()
        dict_keys(['weather', 'display_temperature'])
    """

    weather: CurrentWeather
    display_temperature: str


def error_status(error: WeatherError) -> int:
    """Map a WeatherError to the HTTP status returned to API callers.

    Example:
        >>> error_status(RateLimitedError())
        429
        >>> error_status(LocationNotFoundError("Atlantis"))
        404
    """
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 502


def _to_http_exception(error: WeatherError) -> HTTPException:
    status_code = error_status(error)
    logger.warning("Weather request failed", status_code=status_code, error=str(error))
    return HTTPException(status_code=status_code, detail={"error": str(error)})


@router.get(
    "/v1/current",
    response_model=CurrentWeatherResponse,
    summary="Get current weather conditions",
    description="Current conditions from NWS for US locations, Open-Meteo elsewhere",
    responses=_ERROR_RESPONSES,
)
async def get_current_weather(location: LocationParam, client: ClientParam) -> CurrentWeatherResponse:
    """Get current weather for ``lat``/``lon`` or ``city``.

    Example:
        >>> # GET /v1/current?city=Seattle,%20WA
        >>> # Returns: {"weather": {...}, "display_temperature": "52°F"}
    """
    logger.info("Current weather request received", kind=location.kind)
    try:
        weather = await client.current(location)
    except WeatherError as e:
        raise _to_http_exception(e) from e

    return CurrentWeatherResponse(
        weather=weather,
        display_temperature=client.format_temperature(weather.temperature),
    )


@router.get(
    "/v1/forecast",
    response_model=Forecast,
    summary="Get daily forecast",
    responses=_ERROR_RESPONSES,
)
async def get_forecast(
    location: LocationParam,
    client: ClientParam,
    days: Annotated[int, Query(description="Number of days (clamped per provider)", ge=1, le=16)] = 7,
) -> Forecast:
    logger.info("Forecast request received", kind=location.kind, days=days)
    try:
        return await client.forecast(location, days)
    except WeatherError as e:
        raise _to_http_exception(e) from e


@router.get(
    "/v1/hourly",
    response_model=list[HourlyForecast],
    summary="Get hourly forecast",
    responses=_ERROR_RESPONSES,
)
async def get_hourly_forecast(
    location: LocationParam,
    client: ClientParam,
    hours: Annotated[int, Query(description="Number of hours (clamped per provider)", ge=1, le=168)] = 24,
) -> list[HourlyForecast]:
    logger.info("Hourly forecast request received", kind=location.kind, hours=hours)
    try:
        return await client.hourly_forecast(location, hours)
    except WeatherError as e:
        raise _to_http_exception(e) from e
