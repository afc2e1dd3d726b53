"""Contract shared by every weather provider."""

from typing import Protocol, runtime_checkable

from ...models.location import CityLocation, CoordinateLocation
from ...models.weather import CurrentWeather, Forecast, HourlyForecast, WeatherProviderInfo


@runtime_checkable
class WeatherProvider(Protocol):
    """A source of current conditions and forecasts.

    Implement this protocol to plug a custom data source into WeatherClient.
    Methods raise WeatherError subclasses on failure.
    """

    info: WeatherProviderInfo

    def supports(self, location: CoordinateLocation | CityLocation) -> bool:
        """Return True if this provider can serve ``location``."""
        ...

    async def current_weather(self, location: CoordinateLocation | CityLocation) -> CurrentWeather:
        ...

    async def forecast(self, location: CoordinateLocation | CityLocation, days: int) -> Forecast:
        """Daily forecast; ``days`` is clamped to the provider's range."""
        ...

    async def hourly_forecast(
        self,
        location: CoordinateLocation | CityLocation,
        hours: int,
    ) -> list[HourlyForecast]:
        """Hourly forecast; ``hours`` is clamped to the provider's range."""
        ...


def clamp(value: int, low: int, high: int) -> int:
    """Clamp ``value`` into ``[low, high]``.

    Example:
        >>> clamp(0, 1, 7), clamp(10, 1, 7)
        (1, 7)
    """
    return max(low, min(high, value))
