"""National Weather Service (api.weather.gov) provider."""

import re
from datetime import date, datetime, timezone

import httpx
from loguru import logger
from pydantic import ValidationError

from ...core.config import settings
from ...core.errors import DecodingError, NoDataAvailableError
from ...core.retry import RetryPolicy
from ...models.location import CityLocation, CoordinateLocation, ResolvedLocation
from ...models.nws import (
    ForecastPeriod,
    ForecastResponse,
    Observation,
    ObservationResponse,
    PointsProperties,
    PointsResponse,
    StationsResponse,
)
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

MAX_FORECAST_DAYS = 7
MAX_FORECAST_HOURS = 156

MPH_TO_KMH = 1.60934

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)
COMPASS_DEGREES = {point: index * 22.5 for index, point in enumerate(COMPASS_POINTS)}

_LEADING_NUMBER = re.compile(r"\s*(\d+(?:\.\d+)?)")


def parse_wind_speed(text: str | None) -> float | None:
    """Convert NWS wind text such as "10 mph" or "10 to 15 mph" to km/h.

    Only the leading number is used.

    Example:
        >>> round(parse_wind_speed("10 to 15 mph"), 4)
        16.0934
        >>> parse_wind_speed("calm") is None
        True
    """
    if not text:
        return None
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    return float(match.group(1)) * MPH_TO_KMH


def compass_to_degrees(text: str | None) -> float | None:
    """Map a 16-point compass direction to degrees.

    Example:
        >>> compass_to_degrees("NNE"), compass_to_degrees("W")
        (22.5, 270.0)
    """
    if not text:
        return None
    return COMPASS_DEGREES.get(text.strip().upper())


def _period_temperature(period: ForecastPeriod) -> Temperature | None:
    if period.temperature is None:
        return None
    if period.temperatureUnit.upper() == "C":
        return Temperature(celsius=period.temperature)
    return Temperature.from_fahrenheit(period.temperature)


def _precipitation_probability(period: ForecastPeriod | None) -> float | None:
    if period is None or period.probabilityOfPrecipitation is None:
        return None
    return period.probabilityOfPrecipitation.value


def merge_periods(periods: list[ForecastPeriod]) -> list[DailyForecast]:
    """Fold alternating day/night periods into one record per local calendar date.

    High comes from the day period and low from the night period, each falling
    back to the other when missing. Condition text prefers the day period.
    Precipitation probability is the larger of the two and is omitted when
    both are zero or absent.
    """
    by_date: dict[date, dict[str, ForecastPeriod]] = {}
    for period in periods:
        slot = "night" if period.isDaytime is False else "day"
        by_date.setdefault(period.startTime.date(), {}).setdefault(slot, period)

    daily: list[DailyForecast] = []
    for day_date in sorted(by_date):
        day = by_date[day_date].get("day")
        night = by_date[day_date].get("night")

        day_temp = _period_temperature(day) if day else None
        night_temp = _period_temperature(night) if night else None
        high = day_temp or night_temp
        low = night_temp or day_temp
        if high is None or low is None:
            logger.debug("Skipping forecast date without temperatures", date=str(day_date))
            continue

        primary = day or night
        text = primary.shortForecast or "Unknown"

        chances = [
            value
            for value in (_precipitation_probability(day), _precipitation_probability(night))
            if value is not None
        ]
        precipitation = max(chances) if chances and max(chances) > 0 else None

        daily.append(
            DailyForecast(
                date=day_date,
                high_temperature=high,
                low_temperature=low,
                condition=WeatherCondition.from_nws_text(text),
                condition_description=text,
                precipitation_probability=precipitation,
            )
        )
    return daily


class NWSProvider:
    """Weather provider backed by the US National Weather Service.

    Free, US-only, and every request must carry an identifying User-Agent.
    Each operation starts from the grid point lookup for the coordinates, which
    links to the station list and the forecast resources. A 404 from any step
    means the coordinates are outside NWS coverage.

    API documentation: https://www.weather.gov/documentation/services-web-api

    Example:
        >>> async def example(client):
        ...     provider = NWSProvider("(MyApp, me@example.com)", client)
        ...     weather = await provider.current_weather(
        ...         CoordinateLocation(latitude=47.6, longitude=-122.3)
        ...     )
    """

    info = WeatherProviderInfo.NWS

    def __init__(
        self,
        user_agent: str,
        client: httpx.AsyncClient,
        *,
        geocoder: GeocodingService | None = None,
        base_url: str | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self._client = client
        self._geocoder = geocoder or GeocodingService(client)
        self._base_url = (base_url or settings.NWS_BASE_URL).rstrip("/")
        self._retry_policy = retry_policy or RetryPolicy.from_settings(settings)
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "application/geo+json",
        }

    def supports(self, location: CoordinateLocation | CityLocation) -> bool:
        return location.is_likely_us

    async def current_weather(self, location: CoordinateLocation | CityLocation) -> CurrentWeather:
        """Latest observation from the station nearest to the location.

        Raises:
            UnsupportedLocationError: If NWS does not cover the coordinates
            NoDataAvailableError: If no station or temperature is available
        """
        latitude, longitude, name = await self._geocoder.resolve(location)
        grid = await self._grid_point(latitude, longitude)

        if not grid.observationStations:
            raise NoDataAvailableError()
        stations = await self._fetch(grid.observationStations, StationsResponse)
        if not stations.features or not stations.features[0].properties.stationIdentifier:
            raise NoDataAvailableError()
        station_id = stations.features[0].properties.stationIdentifier

        observation = await self._fetch(
            f"{self._base_url}/stations/{station_id}/observations/latest",
            ObservationResponse,
        )
        logger.debug("NWS observation received", station=station_id)

        return self._transform_observation(
            observation.properties,
            ResolvedLocation(
                latitude=latitude,
                longitude=longitude,
                name=name or grid.location_name,
                timezone=grid.timeZone,
            ),
        )

    async def forecast(self, location: CoordinateLocation | CityLocation, days: int) -> Forecast:
        days = clamp(days, 1, MAX_FORECAST_DAYS)
        latitude, longitude, name = await self._geocoder.resolve(location)
        grid = await self._grid_point(latitude, longitude)
        if not grid.forecast:
            raise NoDataAvailableError()

        response = await self._fetch(grid.forecast, ForecastResponse)
        try:
            daily = merge_periods(response.properties.periods)[:days]
            return Forecast(
                location=ResolvedLocation(
                    latitude=latitude,
                    longitude=longitude,
                    name=name or grid.location_name,
                    timezone=grid.timeZone,
                ),
                daily=tuple(daily),
                provider=self.info,
            )
        except ValidationError as e:
            raise DecodingError(e) from e

    async def hourly_forecast(
        self,
        location: CoordinateLocation | CityLocation,
        hours: int,
    ) -> list[HourlyForecast]:
        hours = clamp(hours, 1, MAX_FORECAST_HOURS)
        latitude, longitude, _ = await self._geocoder.resolve(location)
        grid = await self._grid_point(latitude, longitude)
        if not grid.forecastHourly:
            raise NoDataAvailableError()

        response = await self._fetch(grid.forecastHourly, ForecastResponse)
        try:
            return [
                self._transform_hourly(period)
                for period in response.properties.periods[:hours]
                if period.temperature is not None
            ]
        except ValidationError as e:
            raise DecodingError(e) from e

    async def _grid_point(self, latitude: float, longitude: float) -> PointsProperties:
        # NWS redirects requests with more than four decimal places
        url = f"{self._base_url}/points/{round(latitude, 4)},{round(longitude, 4)}"
        response = await self._fetch(url, PointsResponse)
        return response.properties

    async def _fetch(self, url: str, model):
        return await fetch_model(
            self._client,
            url,
            model,
            source="NWS",
            policy=self._retry_policy,
            headers=self._headers,
        )

    def _transform_observation(
        self,
        observation: Observation,
        location: ResolvedLocation,
    ) -> CurrentWeather:
        if observation.temperature is None or observation.temperature.value is None:
            raise NoDataAvailableError()

        text = observation.textDescription or "Unknown"
        try:
            return CurrentWeather(
                temperature=Temperature(celsius=observation.temperature.value),
                condition=WeatherCondition.from_nws_text(text),
                condition_description=text,
                humidity=observation.relativeHumidity.value if observation.relativeHumidity else None,
                wind_speed=observation.windSpeed.value if observation.windSpeed else None,
                wind_direction=observation.windDirection.value if observation.windDirection else None,
                is_daytime="day" in observation.icon if observation.icon else True,
                location=location,
                observation_time=observation.timestamp or datetime.now(timezone.utc),
                provider=self.info,
            )
        except ValidationError as e:
            raise DecodingError(e) from e

    def _transform_hourly(self, period: ForecastPeriod) -> HourlyForecast:
        text = period.shortForecast or "Unknown"
        return HourlyForecast(
            time=period.startTime,
            temperature=_period_temperature(period),
            condition=WeatherCondition.from_nws_text(text),
            condition_description=text,
            precipitation_probability=_precipitation_probability(period),
            humidity=period.relativeHumidity.value if period.relativeHumidity else None,
            wind_speed=parse_wind_speed(period.windSpeed),
            wind_direction=compass_to_degrees(period.windDirection),
            is_daytime=period.isDaytime if period.isDaytime is not None else True,
        )
