"""FastAPI dependencies for request handling."""

from typing import Annotated

from fastapi import HTTPException, Query, Request

from ..models.location import CityLocation, CoordinateLocation
from ..services.weather import WeatherClient


def get_weather_client(request: Request) -> WeatherClient:
    """The WeatherClient created by the application lifespan."""
    return request.app.state.weather_client


def get_location(
    lat: Annotated[
        float | None,
        Query(description="Latitude in decimal degrees (-90 to 90)", ge=-90.0, le=90.0, examples=[47.6062]),
    ] = None,
    lon: Annotated[
        float | None,
        Query(description="Longitude in decimal degrees (-180 to 180)", ge=-180.0, le=180.0, examples=[-122.3321]),
    ] = None,
    city: Annotated[
        str | None,
        Query(description='City name, e.g. "Seattle, WA" or "Paris, France"', min_length=1),
    ] = None,
) -> CoordinateLocation | CityLocation:
    """Build a location from either ``lat``/``lon`` or ``city``.

    Raises:
        HTTPException: 400 if both forms, neither, or only one coordinate is given

    Example:
        >>> get_location(lat=52.52, lon=13.41)
        CoordinateLocation(kind='coordinates', latitude=52.52, longitude=13.41)
        >>> get_location(city="Berlin").name
        'Berlin'
    """
    has_coordinates = lat is not None or lon is not None
    if city is not None and has_coordinates:
        raise HTTPException(
            status_code=400,
            detail={"error": "Provide either lat/lon or city, not both"},
        )
    if city is not None:
        return CityLocation(name=city)
    if lat is None or lon is None:
        raise HTTPException(
            status_code=400,
            detail={"error": "Location required (lat and lon, or city)"},
        )
    return CoordinateLocation(latitude=lat, longitude=lon)
