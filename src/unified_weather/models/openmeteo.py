"""Response schemas for the Open-Meteo forecast and geocoding APIs."""

from pydantic import BaseModel, Field


class OpenMeteoCurrentData(BaseModel):
    """The ``current`` block of a forecast response.

    Example:
        >>> data = OpenMeteoCurrentData(time="2026-01-11T10:15", temperature_2m=1.2, weather_code=3)
        >>> data.temperature_2m
        1.2
    """

    time: str
    temperature_2m: float | None = None
    relative_humidity_2m: float | None = None
    weather_code: int | None = None
    wind_speed_10m: float | None = None
    wind_direction_10m: float | None = None
    is_day: int | None = None


class OpenMeteoDailyData(BaseModel):
    """Column-oriented ``daily`` block; every list is indexed by day."""

    time: list[str] = Field(default_factory=list)
    weather_code: list[int | None] = Field(default_factory=list)
    temperature_2m_max: list[float | None] = Field(default_factory=list)
    temperature_2m_min: list[float | None] = Field(default_factory=list)
    precipitation_sum: list[float | None] = Field(default_factory=list)
    precipitation_probability_max: list[float | None] = Field(default_factory=list)
    sunrise: list[str | None] = Field(default_factory=list)
    sunset: list[str | None] = Field(default_factory=list)
    uv_index_max: list[float | None] = Field(default_factory=list)


class OpenMeteoHourlyData(BaseModel):
    """Column-oriented ``hourly`` block; every list is indexed by hour."""

    time: list[str] = Field(default_factory=list)
    temperature_2m: list[float | None] = Field(default_factory=list)
    apparent_temperature: list[float | None] = Field(default_factory=list)
    weather_code: list[int | None] = Field(default_factory=list)
    precipitation_probability: list[float | None] = Field(default_factory=list)
    relative_humidity_2m: list[float | None] = Field(default_factory=list)
    wind_speed_10m: list[float | None] = Field(default_factory=list)
    wind_direction_10m: list[float | None] = Field(default_factory=list)
    is_day: list[int | None] = Field(default_factory=list)


class OpenMeteoResponse(BaseModel):
    """Forecast endpoint response; exactly one of the data blocks is requested per call."""

    latitude: float
    longitude: float
    timezone: str | None = None
    utc_offset_seconds: int = 0
    current: OpenMeteoCurrentData | None = None
    daily: OpenMeteoDailyData | None = None
    hourly: OpenMeteoHourlyData | None = None


class GeocodingResult(BaseModel):
    name: str
    latitude: float
    longitude: float
    country: str | None = None
    admin1: str | None = None
    timezone: str | None = None


class GeocodingResponse(BaseModel):
    """Search response; ``results`` is omitted entirely when nothing matched."""

    results: list[GeocodingResult] | None = None
