"""Pytest configuration and fixtures."""

from datetime import date, datetime, timezone

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from unified_weather.api.dependencies import get_weather_client
from unified_weather.app import app
from unified_weather.core.retry import RetryPolicy
from unified_weather.models.configuration import WeatherConfiguration
from unified_weather.models.location import ResolvedLocation
from unified_weather.models.weather import (
    CurrentWeather,
    DailyForecast,
    Forecast,
    HourlyForecast,
    Temperature,
    WeatherCondition,
    WeatherProviderInfo,
)
from unified_weather.services.weather import WeatherClient

USER_AGENT = "(unified-weather-tests, tests@example.com)"


def make_current(provider: WeatherProviderInfo = WeatherProviderInfo.NWS, celsius: float = 20.0) -> CurrentWeather:
    return CurrentWeather(
        temperature=Temperature(celsius=celsius),
        condition=WeatherCondition.CLEAR,
        condition_description="Clear",
        humidity=50.0,
        wind_speed=10.0,
        wind_direction=180.0,
        is_daytime=True,
        location=ResolvedLocation(latitude=47.6062, longitude=-122.3321, name="Seattle, WA"),
        observation_time=datetime(2026, 1, 11, 10, 0, tzinfo=timezone.utc),
        provider=provider,
    )


def make_forecast(provider: WeatherProviderInfo = WeatherProviderInfo.NWS, days: int = 2) -> Forecast:
    return Forecast(
        location=ResolvedLocation(latitude=47.6062, longitude=-122.3321),
        daily=tuple(
            DailyForecast(
                date=date(2026, 1, 11 + offset),
                high_temperature=Temperature(celsius=10.0),
                low_temperature=Temperature(celsius=2.0),
                condition=WeatherCondition.RAIN,
                condition_description="Rain",
            )
            for offset in range(days)
        ),
        provider=provider,
    )


def make_hourly(hours: int = 3) -> list[HourlyForecast]:
    return [
        HourlyForecast(
            time=datetime(2026, 1, 11, hour, 0, tzinfo=timezone.utc),
            temperature=Temperature(celsius=5.0 + hour),
            condition=WeatherCondition.CLOUDY,
            condition_description="Cloudy",
        )
        for hour in range(hours)
    ]


class FakeProvider:
    """Scriptable provider: each call pops the next outcome, an exception is raised."""

    def __init__(self, info: WeatherProviderInfo, *, supported: bool = True, outcomes=None):
        self.info = info
        self.supported = supported
        self.outcomes = list(outcomes or [])
        self.calls: list[str] = []

    def supports(self, location) -> bool:
        return self.supported

    def _next(self, operation: str):
        self.calls.append(operation)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def current_weather(self, location):
        return self._next("current")

    async def forecast(self, location, days):
        return self._next("forecast")

    async def hourly_forecast(self, location, hours):
        return self._next("hourly")


@pytest.fixture
def fast_retry():
    """Retry policy without backoff delays."""
    return RetryPolicy(max_attempts=3, base_delay=0.0, multiplier=2.0)


@pytest.fixture
def configuration():
    return WeatherConfiguration.us(USER_AGENT)


@pytest_asyncio.fixture
async def http_client():
    async with httpx.AsyncClient(follow_redirects=True) as client:
        yield client


@pytest.fixture
def nws_fake():
    return FakeProvider(WeatherProviderInfo.NWS, outcomes=[make_current(WeatherProviderInfo.NWS)])


@pytest.fixture
def open_meteo_fake():
    return FakeProvider(
        WeatherProviderInfo.OPEN_METEO,
        outcomes=[make_current(WeatherProviderInfo.OPEN_METEO)],
    )


@pytest.fixture(scope="function")
def client(configuration, nws_fake, open_meteo_fake):
    """Test client whose WeatherClient is backed by fake providers."""
    weather_client = WeatherClient(
        configuration,
        http_client=httpx.AsyncClient(),
        providers=[nws_fake, open_meteo_fake],
    )
    app.dependency_overrides[get_weather_client] = lambda: weather_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
