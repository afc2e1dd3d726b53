"""Tests for the Open-Meteo provider."""

import re
from datetime import date, timedelta

import pytest
from pytest_httpx import HTTPXMock

from unified_weather.core.errors import APIError, DecodingError, NoDataAvailableError
from unified_weather.models.location import CityLocation, CoordinateLocation
from unified_weather.models.weather import WeatherCondition, WeatherProviderInfo
from unified_weather.services.providers.openmeteo import OpenMeteoProvider

BERLIN = CoordinateLocation(latitude=52.52, longitude=13.41)
FORECAST_URL = re.compile(r"https://api\.open-meteo\.com/v1/forecast\?.*")
GEOCODING_URL = re.compile(r"https://geocoding-api\.open-meteo\.com/v1/search\?.*")

RESPONSE_BASE = {
    "latitude": 52.52,
    "longitude": 13.419998,
    "generationtime_ms": 0.123,
    "utc_offset_seconds": 3600,
    "timezone": "Europe/Berlin",
    "timezone_abbreviation": "CET",
    "elevation": 38.0,
}
CURRENT = {
    **RESPONSE_BASE,
    "current": {
        "time": "2026-01-11T10:15",
        "interval": 900,
        "temperature_2m": 1.2,
        "relative_humidity_2m": 81,
        "weather_code": 3,
        "wind_speed_10m": 9.7,
        "wind_direction_10m": 250,
        "is_day": 1,
    },
}
DAILY = {
    **RESPONSE_BASE,
    "daily": {
        "time": ["2026-01-11", "2026-01-12", "2026-01-13"],
        "weather_code": [61, 71, 0],
        "temperature_2m_max": [4.1, 1.0, None],
        "temperature_2m_min": [-0.5, -3.2, -6.0],
        "precipitation_sum": [3.4, 1.2],
        "precipitation_probability_max": [90, 40, 5],
        "sunrise": ["2026-01-11T08:14", "2026-01-12T08:13", "2026-01-13T08:13"],
        "sunset": ["2026-01-11T16:15", "2026-01-12T16:17", "2026-01-13T16:18"],
        "uv_index_max": [0.6, 0.8, 1.0],
    },
}
HOURLY = {
    **RESPONSE_BASE,
    "hourly": {
        "time": [f"2026-01-11T{hour:02d}:00" for hour in range(24)] + [f"2026-01-12T{hour:02d}:00" for hour in range(24)],
        "temperature_2m": [float(hour % 24) for hour in range(48)],
        "apparent_temperature": [float(hour % 24) - 2 for hour in range(48)],
        "weather_code": [2] * 48,
        "precipitation_probability": [10] * 48,
        "relative_humidity_2m": [70] * 48,
        "wind_speed_10m": [12.0] * 48,
        "wind_direction_10m": [90] * 48,
        "is_day": [0] * 8 + [1] * 8 + [0] * 32,
    },
}


@pytest.fixture
def provider(http_client, fast_retry):
    return OpenMeteoProvider(http_client, retry_policy=fast_retry)


class TestOpenMeteoProvider:
    """Test OpenMeteoProvider against a mocked forecast endpoint."""

    def test_supports_everything(self, provider):
        assert provider.info == WeatherProviderInfo.OPEN_METEO
        assert provider.supports(BERLIN)
        assert provider.supports(CoordinateLocation(latitude=47.6, longitude=-122.3))
        assert provider.supports(CityLocation(name="Seattle, WA"))

    @pytest.mark.asyncio
    async def test_current_weather(self, provider, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=FORECAST_URL, json=CURRENT)

        weather = await provider.current_weather(BERLIN)

        assert weather.temperature.celsius == 1.2
        assert weather.condition is WeatherCondition.CLOUDY
        assert weather.condition_description == "Cloudy"
        assert weather.humidity == 81
        assert weather.wind_speed == 9.7
        assert weather.wind_direction == 250
        assert weather.is_daytime is True
        assert weather.provider == WeatherProviderInfo.OPEN_METEO
        assert weather.location.timezone == "Europe/Berlin"
        assert weather.location.longitude == 13.419998
        assert weather.observation_time.utcoffset() == timedelta(hours=1)

        params = httpx_mock.get_request().url.params
        assert params["latitude"] == "52.52"
        assert params["longitude"] == "13.41"
        assert params["timezone"] == "auto"
        assert params["current"].split(",") == [
            "temperature_2m",
            "relative_humidity_2m",
            "weather_code",
            "wind_speed_10m",
            "wind_direction_10m",
            "is_day",
        ]

    @pytest.mark.asyncio
    async def test_unknown_timezone_uses_offset(self, provider, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=FORECAST_URL,
            json={**CURRENT, "timezone": "Not/AZone", "utc_offset_seconds": -18000},
        )

        weather = await provider.current_weather(BERLIN)

        assert weather.observation_time.utcoffset() == timedelta(hours=-5)

    @pytest.mark.asyncio
    async def test_current_without_temperature(self, provider, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=FORECAST_URL,
            json={**RESPONSE_BASE, "current": {"time": "2026-01-11T10:15", "temperature_2m": None}},
        )

        with pytest.raises(NoDataAvailableError):
            await provider.current_weather(BERLIN)

    @pytest.mark.asyncio
    async def test_current_with_night_and_unmapped_code(self, provider, httpx_mock: HTTPXMock):
        night = {**CURRENT, "current": {**CURRENT["current"], "is_day": 0, "weather_code": 42}}
        httpx_mock.add_response(url=FORECAST_URL, json=night)

        weather = await provider.current_weather(BERLIN)

        assert weather.is_daytime is False
        assert weather.condition is WeatherCondition.UNKNOWN

    @pytest.mark.asyncio
    async def test_forecast(self, provider, httpx_mock: HTTPXMock):
        """Test positional arrays and skipping of incomplete days."""
        httpx_mock.add_response(url=FORECAST_URL, json=DAILY)

        forecast = await provider.forecast(BERLIN, days=3)

        # day 3 has no maximum temperature
        assert len(forecast.daily) == 2

        today = forecast.today
        assert today.date == date(2026, 1, 11)
        assert today.high_temperature.celsius == 4.1
        assert today.low_temperature.celsius == -0.5
        assert today.condition is WeatherCondition.RAIN
        assert today.precipitation_probability == 90
        assert today.precipitation_amount == 3.4
        assert today.uv_index == 0.6
        assert today.sunrise.hour == 8
        assert today.sunrise.utcoffset() == timedelta(hours=1)

        assert forecast.tomorrow.condition is WeatherCondition.SNOW
        assert forecast.provider == WeatherProviderInfo.OPEN_METEO

        params = httpx_mock.get_request().url.params
        assert params["forecast_days"] == "3"
        assert "temperature_2m_max" in params["daily"]

    @pytest.mark.asyncio
    async def test_forecast_days_are_clamped(self, provider, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=FORECAST_URL, json=DAILY)

        await provider.forecast(BERLIN, days=30)

        assert httpx_mock.get_request().url.params["forecast_days"] == "16"

    @pytest.mark.asyncio
    async def test_short_optional_arrays(self, provider, httpx_mock: HTTPXMock):
        """Optional arrays shorter than the time axis yield missing values."""
        data = {**DAILY, "daily": {**DAILY["daily"], "temperature_2m_max": [4.1, 1.0, 2.0]}}
        httpx_mock.add_response(url=FORECAST_URL, json=data)

        forecast = await provider.forecast(BERLIN, days=3)

        assert len(forecast.daily) == 3
        assert forecast.daily[2].precipitation_amount is None
        assert forecast.daily[2].condition is WeatherCondition.CLEAR

    @pytest.mark.asyncio
    async def test_hourly_forecast(self, provider, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=FORECAST_URL, json=HOURLY)

        hourly = await provider.hourly_forecast(BERLIN, hours=30)

        assert len(hourly) == 30
        assert hourly[0].time.hour == 0
        assert hourly[0].time.utcoffset() == timedelta(hours=1)
        assert hourly[10].temperature.celsius == 10.0
        assert hourly[10].apparent_temperature.celsius == 8.0
        assert hourly[10].is_daytime is True
        assert hourly[0].is_daytime is False
        assert hourly[0].condition is WeatherCondition.PARTLY_CLOUDY
        assert hourly[0].humidity == 70

        params = httpx_mock.get_request().url.params
        assert params["forecast_days"] == "2"
        assert "apparent_temperature" in params["hourly"]

    @pytest.mark.asyncio
    async def test_hourly_skips_incomplete_hours(self, provider, httpx_mock: HTTPXMock):
        data = {
            **RESPONSE_BASE,
            "hourly": {
                "time": ["2026-01-11T00:00", "2026-01-11T01:00", "2026-01-11T02:00"],
                "temperature_2m": [1.0, None, 3.0],
                "weather_code": [0, 0],
            },
        }
        httpx_mock.add_response(url=FORECAST_URL, json=data)

        hourly = await provider.hourly_forecast(BERLIN, hours=3)

        assert [h.temperature.celsius for h in hourly] == [1.0]
        assert hourly[0].is_daytime is True
        assert hourly[0].apparent_temperature is None

    @pytest.mark.asyncio
    async def test_hourly_request_is_day_granular(self, provider, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=FORECAST_URL, json=HOURLY)

        await provider.hourly_forecast(BERLIN, hours=500)

        assert httpx_mock.get_request().url.params["forecast_days"] == "7"

    @pytest.mark.asyncio
    async def test_city_uses_geocoded_name(self, provider, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=GEOCODING_URL,
            json={"results": [{"name": "Berlin", "latitude": 52.52, "longitude": 13.41, "country": "Germany"}]},
        )
        httpx_mock.add_response(url=FORECAST_URL, json=CURRENT)

        weather = await provider.current_weather(CityLocation(name="Berlin"))

        assert weather.location.name == "Berlin, Germany"

    @pytest.mark.asyncio
    async def test_server_errors_are_retried(self, provider, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=FORECAST_URL, status_code=500)
        httpx_mock.add_response(url=FORECAST_URL, json=CURRENT)

        weather = await provider.current_weather(BERLIN)

        assert weather.temperature.celsius == 1.2
        assert len(httpx_mock.get_requests()) == 2

    @pytest.mark.asyncio
    async def test_client_error_is_retried_without_message(self, provider, httpx_mock: HTTPXMock):
        for _ in range(3):
            httpx_mock.add_response(url=FORECAST_URL, status_code=400, json={"error": True, "reason": "bad"})

        with pytest.raises(APIError) as exc_info:
            await provider.current_weather(BERLIN)

        assert exc_info.value == APIError(400)

    @pytest.mark.asyncio
    async def test_bad_timestamp(self, provider, httpx_mock: HTTPXMock):
        broken = {**CURRENT, "current": {**CURRENT["current"], "time": "yesterday"}}
        httpx_mock.add_response(url=FORECAST_URL, json=broken)

        with pytest.raises(DecodingError):
            await provider.current_weather(BERLIN)
