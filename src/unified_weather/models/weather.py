"""Normalized weather data models returned to callers."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .location import ResolvedLocation


class TemperatureUnit(str, Enum):
    """Display unit for temperatures."""

    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @property
    def symbol(self) -> str:
        return "C" if self is TemperatureUnit.CELSIUS else "F"


class Temperature(BaseModel):
    """Temperature stored canonically in Celsius.

    Example:
        >>> Temperature(celsius=100).fahrenheit
        212.0
        >>> Temperature.from_fahrenheit(68).celsius
        20.0
        >>> Temperature(celsius=20).formatted(TemperatureUnit.CELSIUS, decimal_places=1)
        '20.0°C'
    """

    model_config = ConfigDict(frozen=True)

    celsius: float

    @computed_field
    @property
    def fahrenheit(self) -> float:
        return self.celsius * 9.0 / 5.0 + 32.0

    @computed_field
    @property
    def kelvin(self) -> float:
        return self.celsius + 273.15

    @classmethod
    def from_fahrenheit(cls, fahrenheit: float) -> "Temperature":
        return cls(celsius=(fahrenheit - 32.0) * 5.0 / 9.0)

    @classmethod
    def from_kelvin(cls, kelvin: float) -> "Temperature":
        return cls(celsius=kelvin - 273.15)

    def formatted(
        self,
        unit: TemperatureUnit = TemperatureUnit.FAHRENHEIT,
        decimal_places: int = 0,
    ) -> str:
        value = self.celsius if unit is TemperatureUnit.CELSIUS else self.fahrenheit
        return f"{value:.{decimal_places}f}°{unit.symbol}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Temperature):
            return NotImplemented
        return self.celsius == other.celsius

    def __hash__(self) -> int:
        return hash(self.celsius)


class WeatherCondition(str, Enum):
    """Provider-independent weather condition categories."""

    CLEAR = "clear"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    FOG = "fog"
    DRIZZLE = "drizzle"
    RAIN = "rain"
    FREEZING_RAIN = "freezing_rain"
    SNOW = "snow"
    SLEET = "sleet"
    THUNDERSTORM = "thunderstorm"
    UNKNOWN = "unknown"

    @property
    def description(self) -> str:
        """Human-readable name, e.g. "Partly Cloudy"."""
        return self.value.replace("_", " ").title()

    @classmethod
    def from_wmo_code(cls, code: int) -> "WeatherCondition":
        """Map a WMO weather code (as used by Open-Meteo) to a condition.

        Unmapped codes yield UNKNOWN.

        Example:
            >>> WeatherCondition.from_wmo_code(63)
            <WeatherCondition.RAIN: 'rain'>
            >>> WeatherCondition.from_wmo_code(999)
            <WeatherCondition.UNKNOWN: 'unknown'>
        """
        return _WMO_CODES.get(code, cls.UNKNOWN)

    @classmethod
    def from_nws_text(cls, text: str) -> "WeatherCondition":
        """Classify NWS free-text conditions by substring.

        Rules are checked in order so the more specific phrase wins:
        "Thunderstorms and Rain" is a thunderstorm, not rain.

        Example:
            >>> WeatherCondition.from_nws_text("Light Rain Showers")
            <WeatherCondition.RAIN: 'rain'>
        """
        lower = text.lower()
        for needles, condition in _NWS_TEXT_RULES:
            if any(needle in lower for needle in needles):
                return condition
        return cls.UNKNOWN


_WMO_CODES: dict[int, WeatherCondition] = {
    0: WeatherCondition.CLEAR,
    1: WeatherCondition.PARTLY_CLOUDY,
    2: WeatherCondition.PARTLY_CLOUDY,
    3: WeatherCondition.CLOUDY,
    45: WeatherCondition.FOG,
    48: WeatherCondition.FOG,
    51: WeatherCondition.DRIZZLE,
    53: WeatherCondition.DRIZZLE,
    55: WeatherCondition.DRIZZLE,
    56: WeatherCondition.FREEZING_RAIN,
    57: WeatherCondition.FREEZING_RAIN,
    61: WeatherCondition.RAIN,
    63: WeatherCondition.RAIN,
    65: WeatherCondition.RAIN,
    66: WeatherCondition.FREEZING_RAIN,
    67: WeatherCondition.FREEZING_RAIN,
    71: WeatherCondition.SNOW,
    73: WeatherCondition.SNOW,
    75: WeatherCondition.SNOW,
    77: WeatherCondition.SNOW,
    79: WeatherCondition.SLEET,
    80: WeatherCondition.RAIN,
    81: WeatherCondition.RAIN,
    82: WeatherCondition.RAIN,
    85: WeatherCondition.SNOW,
    86: WeatherCondition.SNOW,
    95: WeatherCondition.THUNDERSTORM,
    96: WeatherCondition.THUNDERSTORM,
    99: WeatherCondition.THUNDERSTORM,
}

_NWS_TEXT_RULES: tuple[tuple[tuple[str, ...], WeatherCondition], ...] = (
    (("thunder",), WeatherCondition.THUNDERSTORM),
    (("freezing rain", "ice"), WeatherCondition.FREEZING_RAIN),
    (("sleet",), WeatherCondition.SLEET),
    (("snow", "flurr"), WeatherCondition.SNOW),
    (("drizzle",), WeatherCondition.DRIZZLE),
    (("rain", "shower"), WeatherCondition.RAIN),
    (("fog", "mist", "haze"), WeatherCondition.FOG),
    (("overcast",), WeatherCondition.CLOUDY),
    (("cloud", "partly"), WeatherCondition.PARTLY_CLOUDY),
    (("clear", "sunny", "fair"), WeatherCondition.CLEAR),
)


class WeatherProviderInfo(BaseModel):
    """Identity and attribution of a weather data source."""

    model_config = ConfigDict(frozen=True)

    NWS: ClassVar["WeatherProviderInfo"]
    OPEN_METEO: ClassVar["WeatherProviderInfo"]

    name: str
    attribution: str | None = None


WeatherProviderInfo.NWS = WeatherProviderInfo(name="NWS", attribution="National Weather Service")
WeatherProviderInfo.OPEN_METEO = WeatherProviderInfo(name="Open-Meteo", attribution="Open-Meteo.com")


class CurrentWeather(BaseModel):
    """Current conditions at a location."""

    model_config = ConfigDict(frozen=True)

    temperature: Temperature
    condition: WeatherCondition
    condition_description: str = Field(..., description="Provider's original condition text")
    humidity: float | None = Field(default=None, ge=0.0, le=100.0, description="Relative humidity %")
    wind_speed: float | None = Field(default=None, description="Wind speed in km/h")
    wind_direction: float | None = Field(default=None, description="Wind direction in degrees")
    is_daytime: bool
    location: ResolvedLocation
    observation_time: datetime
    provider: WeatherProviderInfo


class DailyForecast(BaseModel):
    """High/low and conditions for one calendar day."""

    model_config = ConfigDict(frozen=True)

    date: date
    high_temperature: Temperature
    low_temperature: Temperature
    condition: WeatherCondition
    condition_description: str
    precipitation_probability: float | None = Field(default=None, ge=0.0, le=100.0)
    precipitation_amount: float | None = Field(default=None, description="Precipitation in mm")
    sunrise: datetime | None = None
    sunset: datetime | None = None
    uv_index: float | None = None


class HourlyForecast(BaseModel):
    """Forecast for a single hour."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    temperature: Temperature
    apparent_temperature: Temperature | None = None
    condition: WeatherCondition
    condition_description: str
    precipitation_probability: float | None = Field(default=None, ge=0.0, le=100.0)
    humidity: float | None = Field(default=None, ge=0.0, le=100.0)
    wind_speed: float | None = Field(default=None, description="Wind speed in km/h")
    wind_direction: float | None = Field(default=None, description="Wind direction in degrees")
    is_daytime: bool = True


class Forecast(BaseModel):
    """Multi-day forecast, ordered from today onwards.

    Example:
        >>> forecast = Forecast(
        ...     location=ResolvedLocation(latitude=47.6, longitude=-122.3),
        ...     daily=[],
        ...     provider=WeatherProviderInfo.NWS,
        ... )
        >>> forecast.today is None
        True
    """

    model_config = ConfigDict(frozen=True)

    location: ResolvedLocation
    daily: tuple[DailyForecast, ...]
    provider: WeatherProviderInfo
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def today(self) -> DailyForecast | None:
        return self.daily[0] if self.daily else None

    @property
    def tomorrow(self) -> DailyForecast | None:
        return self.daily[1] if len(self.daily) > 1 else None
