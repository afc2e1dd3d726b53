"""Open-Meteo provider: global coverage, no API key."""

import math
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
from loguru import logger
from pydantic import ValidationError

from ...core.config import settings
from ...core.errors import DecodingError, NoDataAvailableError
from ...core.retry import RetryPolicy
from ...models.location import CityLocation, CoordinateLocation, ResolvedLocation
from ...models.openmeteo import OpenMeteoResponse
from ...models.weather import (
    CurrentWeather,
    DailyForecast,
    Forecast,
    HourlyForecast,
    Temperature,
    WeatherCondition,
    WeatherProviderInfo,
)
from ..geocoding import GeocodingService
from ..http import fetch_model
from .base import clamp

MAX_FORECAST_DAYS = 16
MAX_FORECAST_HOURS = 168

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "weather_code",
    "wind_speed_10m",
    "wind_direction_10m",
    "is_day",
)
DAILY_FIELDS = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "precipitation_probability_max",
    "sunrise",
    "sunset",
    "uv_index_max",
)
HOURLY_FIELDS = (
    "temperature_2m",
    "apparent_temperature",
    "weather_code",
    "precipitation_probability",
    "relative_humidity_2m",
    "wind_speed_10m",
    "wind_direction_10m",
    "is_day",
)


def _get_at(values: Sequence[Any], index: int) -> Any:
    """Positional lookup that tolerates short arrays.

    Example:
        >>> _get_at([1, 2], 1), _get_at([1, 2], 5)
        (2, None)
    """
    return values[index] if index < len(values) else None


def _response_timezone(response: OpenMeteoResponse) -> tzinfo:
    if response.timezone:
        try:
            return ZoneInfo(response.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Unknown timezone, using UTC offset", timezone=response.timezone)
    return timezone(timedelta(seconds=response.utc_offset_seconds))


def _localize(text: str | None, tz: tzinfo) -> datetime | None:
    """Parse an Open-Meteo local timestamp ("2026-01-11T10:15") in ``tz``."""
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise DecodingError(e) from e
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=tz)


class OpenMeteoProvider:
    """Weather provider backed by Open-Meteo.

    Each operation is a single request to the forecast endpoint. Daily and
    hourly data arrive as parallel arrays; an index missing from a required
    array is skipped. ``timezone=auto`` makes timestamps local to the location.

    API documentation: https://open-meteo.com/en/docs
    """

    info = WeatherProviderInfo.OPEN_METEO

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        geocoder: GeocodingService | None = None,
        base_url: str | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self._client = client
        self._geocoder = geocoder or GeocodingService(client)
        self._base_url = base_url or settings.OPENMETEO_BASE_URL
        self._retry_policy = retry_policy or RetryPolicy.from_settings(settings)

    def supports(self, location: CoordinateLocation | CityLocation) -> bool:
        return True

    async def current_weather(self, location: CoordinateLocation | CityLocation) -> CurrentWeather:
        latitude, longitude, name = await self._geocoder.resolve(location)
        response = await self._fetch(latitude, longitude, current=",".join(CURRENT_FIELDS))

        current = response.current
        if current is None or current.temperature_2m is None:
            raise NoDataAvailableError()

        tz = _response_timezone(response)
        condition = WeatherCondition.from_wmo_code(
            current.weather_code if current.weather_code is not None else -1
        )
        try:
            return CurrentWeather(
                temperature=Temperature(celsius=current.temperature_2m),
                condition=condition,
                condition_description=condition.description,
                humidity=current.relative_humidity_2m,
                wind_speed=current.wind_speed_10m,
                wind_direction=current.wind_direction_10m,
                is_daytime=current.is_day == 1 if current.is_day is not None else True,
                location=self._resolved_location(response, name),
                observation_time=_localize(current.time, tz) or datetime.now(timezone.utc),
                provider=self.info,
            )
        except ValidationError as e:
            raise DecodingError(e) from e

    async def forecast(self, location: CoordinateLocation | CityLocation, days: int) -> Forecast:
        days = clamp(days, 1, MAX_FORECAST_DAYS)
        latitude, longitude, name = await self._geocoder.resolve(location)
        response = await self._fetch(
            latitude,
            longitude,
            daily=",".join(DAILY_FIELDS),
            forecast_days=days,
        )
        if response.daily is None:
            raise NoDataAvailableError()

        data = response.daily
        tz = _response_timezone(response)
        daily: list[DailyForecast] = []
        try:
            for index, day_text in enumerate(data.time):
                code = _get_at(data.weather_code, index)
                high = _get_at(data.temperature_2m_max, index)
                low = _get_at(data.temperature_2m_min, index)
                if code is None or high is None or low is None:
                    continue

                condition = WeatherCondition.from_wmo_code(code)
                daily.append(
                    DailyForecast(
                        date=date.fromisoformat(day_text),
                        high_temperature=Temperature(celsius=high),
                        low_temperature=Temperature(celsius=low),
                        condition=condition,
                        condition_description=condition.description,
                        precipitation_probability=_get_at(data.precipitation_probability_max, index),
                        precipitation_amount=_get_at(data.precipitation_sum, index),
                        sunrise=_localize(_get_at(data.sunrise, index), tz),
                        sunset=_localize(_get_at(data.sunset, index), tz),
                        uv_index=_get_at(data.uv_index_max, index),
                    )
                )
        except (ValidationError, ValueError) as e:
            raise DecodingError(e) from e

        return Forecast(
            location=self._resolved_location(response, name),
            daily=tuple(daily[:days]),
            provider=self.info,
        )

    async def hourly_forecast(
        self,
        location: CoordinateLocation | CityLocation,
        hours: int,
    ) -> list[HourlyForecast]:
        hours = clamp(hours, 1, MAX_FORECAST_HOURS)
        latitude, longitude, _ = await self._geocoder.resolve(location)
        response = await self._fetch(
            latitude,
            longitude,
            hourly=",".join(HOURLY_FIELDS),
            forecast_days=math.ceil(hours / 24),
        )
        if response.hourly is None:
            raise NoDataAvailableError()

        data = response.hourly
        tz = _response_timezone(response)
        hourly: list[HourlyForecast] = []
        try:
            for index, time_text in enumerate(data.time[:hours]):
                temperature = _get_at(data.temperature_2m, index)
                code = _get_at(data.weather_code, index)
                if temperature is None or code is None:
                    continue

                apparent = _get_at(data.apparent_temperature, index)
                is_day = _get_at(data.is_day, index)
                condition = WeatherCondition.from_wmo_code(code)
                hourly.append(
                    HourlyForecast(
                        time=_localize(time_text, tz),
                        temperature=Temperature(celsius=temperature),
                        apparent_temperature=Temperature(celsius=apparent) if apparent is not None else None,
                        condition=condition,
                        condition_description=condition.description,
                        precipitation_probability=_get_at(data.precipitation_probability, index),
                        humidity=_get_at(data.relative_humidity_2m, index),
                        wind_speed=_get_at(data.wind_speed_10m, index),
                        wind_direction=_get_at(data.wind_direction_10m, index),
                        is_daytime=is_day == 1 if is_day is not None else True,
                    )
                )
        except ValidationError as e:
            raise DecodingError(e) from e
        return hourly

    async def _fetch(self, latitude: float, longitude: float, **fields: Any) -> OpenMeteoResponse:
        params: dict[str, Any] = {
            "latitude": latitude,
            "longitude": longitude,
            "timezone": "auto",
            **fields,
        }
        return await fetch_model(
            self._client,
            self._base_url,
            OpenMeteoResponse,
            source="Open-Meteo",
            policy=self._retry_policy,
            params=params,
        )

    @staticmethod
    def _resolved_location(response: OpenMeteoResponse, name: str | None) -> ResolvedLocation:
        return ResolvedLocation(
            latitude=response.latitude,
            longitude=response.longitude,
            name=name,
            timezone=response.timezone,
        )
