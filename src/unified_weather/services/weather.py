"""Weather client orchestrating providers with fallback."""

from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import httpx
from loguru import logger
from opentelemetry import metrics

from ..core.config import settings
from ..core.errors import NoProviderAvailableError, WeatherError
from ..core.retry import RetryPolicy
from ..models.configuration import ProviderStrategy, WeatherConfiguration
from ..models.location import CityLocation, CoordinateLocation
from ..models.weather import CurrentWeather, Forecast, HourlyForecast, Temperature
from .geocoding import GeocodingService
from .providers.base import WeatherProvider
from .providers.nws import NWSProvider
from .providers.openmeteo import OpenMeteoProvider
from .updates import WeatherUpdates

T = TypeVar("T")

meter = metrics.get_meter(__name__)
provider_requests = meter.create_counter(
    "weather.provider.requests",
    description="Provider calls made by the weather client",
)


class WeatherClient:
    """Unified entry point for current conditions and forecasts.

    Providers are consulted in the order given by the configured strategy.
    A provider that does not support the location is skipped; the first
    successful answer wins and failures fall through to the next provider.

    The client owns its HTTP connection pool unless ``http_client`` is given,
    in which case the caller is responsible for closing it.

    Example:
        >>> async def example():
        ...     config = WeatherConfiguration.us("(MyApp, me@example.com)")
        ...     async with WeatherClient(config) as client:
        ...         weather = await client.current_in("Seattle, WA")
        ...         return client.format_temperature(weather.temperature)
    """

    def __init__(
        self,
        configuration: WeatherConfiguration,
        *,
        http_client: httpx.AsyncClient | None = None,
        providers: Sequence[WeatherProvider] | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        self.configuration = configuration
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.UPSTREAM_TIMEOUT),
            follow_redirects=True,
        )
        self._retry_policy = retry_policy or RetryPolicy.from_settings(settings)
        if providers is None:
            providers = self._build_providers(configuration.provider_strategy)
        self.providers: tuple[WeatherProvider, ...] = tuple(providers)

    def _build_providers(self, strategy: ProviderStrategy) -> list[WeatherProvider]:
        geocoder = GeocodingService(self._http_client)
        nws = NWSProvider(
            self.configuration.user_agent,
            self._http_client,
            geocoder=geocoder,
            retry_policy=self._retry_policy,
        )
        open_meteo = OpenMeteoProvider(
            self._http_client,
            geocoder=geocoder,
            retry_policy=self._retry_policy,
        )
        if strategy is ProviderStrategy.US_ONLY:
            return [nws]
        if strategy is ProviderStrategy.GLOBAL_ONLY:
            return [open_meteo]
        return [nws, open_meteo]

    async def current(self, location: CoordinateLocation | CityLocation) -> CurrentWeather:
        """Current conditions from the first provider that can deliver them.

        Raises:
            WeatherError: The last provider failure, or NoProviderAvailableError
                when no provider supports the location
        """
        return await self._first_success(
            "current",
            location,
            lambda provider: provider.current_weather(location),
        )

    async def current_at(self, latitude: float, longitude: float) -> CurrentWeather:
        return await self.current(CoordinateLocation(latitude=latitude, longitude=longitude))

    async def current_in(self, city: str) -> CurrentWeather:
        return await self.current(CityLocation(name=city))

    async def forecast(
        self,
        location: CoordinateLocation | CityLocation,
        days: int = 7,
    ) -> Forecast:
        return await self._first_success(
            "forecast",
            location,
            lambda provider: provider.forecast(location, days),
        )

    async def hourly_forecast(
        self,
        location: CoordinateLocation | CityLocation,
        hours: int = 24,
    ) -> list[HourlyForecast]:
        return await self._first_success(
            "hourly_forecast",
            location,
            lambda provider: provider.hourly_forecast(location, hours),
        )

    def weather_updates(
        self,
        location: CoordinateLocation | CityLocation,
        interval_seconds: float | None = None,
    ) -> WeatherUpdates:
        """Stream of current conditions, refreshed every ``interval_seconds``."""
        interval = interval_seconds if interval_seconds is not None else settings.UPDATE_INTERVAL
        return WeatherUpdates(lambda: self.current(location), interval)

    def format_temperature(self, temperature: Temperature, decimal_places: int = 0) -> str:
        return temperature.formatted(self.configuration.temperature_unit, decimal_places)

    async def _first_success(
        self,
        operation: str,
        location: CoordinateLocation | CityLocation,
        call: Callable[[WeatherProvider], Awaitable[T]],
    ) -> T:
        last_error: WeatherError | None = None

        for provider in self.providers:
            name = provider.info.name
            if not provider.supports(location):
                logger.debug("Provider does not support location", provider=name, operation=operation)
                continue

            try:
                result = await call(provider)
            except WeatherError as e:
                provider_requests.add(1, {"provider": name, "operation": operation, "outcome": "failure"})
                logger.warning(
                    "Provider failed, trying next",
                    provider=name,
                    operation=operation,
                    error=str(e),
                )
                last_error = e
                continue

            provider_requests.add(1, {"provider": name, "operation": operation, "outcome": "success"})
            logger.debug("Provider succeeded", provider=name, operation=operation)
            return result

        if last_error is not None:
            raise last_error
        raise NoProviderAvailableError()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> "WeatherClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
