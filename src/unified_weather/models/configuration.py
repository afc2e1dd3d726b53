"""Client configuration and provider selection strategy."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.config import Settings, check_user_agent
from .weather import TemperatureUnit


class ProviderStrategy(str, Enum):
    """Which providers the client consults, and in what order.

    AUTOMATIC tries NWS first for US locations and falls back to Open-Meteo;
    US_ONLY fails outside the US; GLOBAL_ONLY uses Open-Meteo everywhere.
    """

    AUTOMATIC = "automatic"
    US_ONLY = "us_only"
    GLOBAL_ONLY = "global_only"


class WeatherConfiguration(BaseModel):
    """Configuration for a WeatherClient.

    Example:
        >>> config = WeatherConfiguration(user_agent="(MyApp, me@example.com)")
        >>> config.temperature_unit, config.provider_strategy
        (<TemperatureUnit.FAHRENHEIT: 'fahrenheit'>, <ProviderStrategy.AUTOMATIC: 'automatic'>)
        >>> WeatherConfiguration.international("(MyApp, me@example.com)").provider_strategy
        <ProviderStrategy.GLOBAL_ONLY: 'global_only'>
    """

    model_config = ConfigDict(frozen=True)

    user_agent: str = Field(
        ...,
        description='Identifying User-Agent for NWS, format "(AppName, contact)"',
    )
    temperature_unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT
    provider_strategy: ProviderStrategy = ProviderStrategy.AUTOMATIC

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        return check_user_agent(v)

    @classmethod
    def us(cls, user_agent: str) -> "WeatherConfiguration":
        """NWS first with Open-Meteo fallback, Fahrenheit display."""
        return cls(
            user_agent=user_agent,
            temperature_unit=TemperatureUnit.FAHRENHEIT,
            provider_strategy=ProviderStrategy.AUTOMATIC,
        )

    @classmethod
    def international(cls, user_agent: str) -> "WeatherConfiguration":
        """Open-Meteo only, Celsius display."""
        return cls(
            user_agent=user_agent,
            temperature_unit=TemperatureUnit.CELSIUS,
            provider_strategy=ProviderStrategy.GLOBAL_ONLY,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "WeatherConfiguration":
        return cls(
            user_agent=settings.USER_AGENT,
            temperature_unit=TemperatureUnit(settings.TEMPERATURE_UNIT),
            provider_strategy=ProviderStrategy(settings.PROVIDER_STRATEGY),
        )
