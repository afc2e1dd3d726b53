"""City-name geocoding and location resolution."""

import httpx
from loguru import logger

from ..core.config import settings
from ..core.errors import LocationNotFoundError
from ..models.location import CityLocation, CoordinateLocation
from ..models.openmeteo import GeocodingResponse
from .http import decode, get_json

# (latitude, longitude, display name)
ResolvedCoordinates = tuple[float, float, str | None]


class GeocodingService:
    """Resolves free-text city names to coordinates with the Open-Meteo geocoder.

    The geocoder is free and needs no key. A lookup asks for the single best
    match only.

    Example:
        >>> async def example(client):
        ...     geocoder = GeocodingService(client)
        ...     lat, lon, name = await geocoder.geocode("Paris, France")
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str | None = None):
        self._client = client
        self._base_url = base_url or settings.GEOCODING_BASE_URL

    async def geocode(self, city: str) -> ResolvedCoordinates:
        """Look up ``city`` and return its coordinates and display name.

        The display name joins the non-empty parts of (name, admin region, country).

        Raises:
            LocationNotFoundError: If the geocoder has no match
            APIError: On any other non-2xx status, 404 included
        """
        data = await get_json(
            self._client,
            self._base_url,
            source="Open-Meteo geocoding",
            params={"name": city, "count": 1},
            not_found_unsupported=False,
        )
        response = decode(GeocodingResponse, data)

        if not response.results:
            logger.info("City not found by geocoder", city=city)
            raise LocationNotFoundError(city)

        result = response.results[0]
        name = ", ".join(part for part in (result.name, result.admin1, result.country) if part)
        return result.latitude, result.longitude, name or None

    async def resolve(self, location: CoordinateLocation | CityLocation) -> ResolvedCoordinates:
        """Turn any location into coordinates; coordinates pass through unnamed."""
        if isinstance(location, CoordinateLocation):
            return location.latitude, location.longitude, None
        return await self.geocode(location.name)
