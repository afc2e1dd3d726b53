"""Response schemas for the National Weather Service API (GeoJSON flavour)."""

from datetime import datetime

from pydantic import BaseModel, Field


class QuantitativeValue(BaseModel):
    """NWS measurement with a WMO unit code, e.g. ``wmoUnit:degC``."""

    value: float | None = None
    unitCode: str | None = None


class RelativeLocationProperties(BaseModel):
    city: str | None = None
    state: str | None = None


class RelativeLocation(BaseModel):
    properties: RelativeLocationProperties


class PointsProperties(BaseModel):
    """Grid point metadata linking a coordinate to its forecast resources."""

    forecast: str | None = None
    forecastHourly: str | None = None
    observationStations: str | None = None
    timeZone: str | None = None
    relativeLocation: RelativeLocation | None = None

    @property
    def location_name(self) -> str | None:
        if self.relativeLocation is None:
            return None
        props = self.relativeLocation.properties
        parts = [part for part in (props.city, props.state) if part]
        return ", ".join(parts) or None


class PointsResponse(BaseModel):
    properties: PointsProperties


class StationProperties(BaseModel):
    stationIdentifier: str | None = None
    name: str | None = None


class StationFeature(BaseModel):
    properties: StationProperties


class StationsResponse(BaseModel):
    features: list[StationFeature] = Field(default_factory=list)


class Observation(BaseModel):
    timestamp: datetime | None = None
    textDescription: str | None = None
    icon: str | None = None
    temperature: QuantitativeValue | None = None
    relativeHumidity: QuantitativeValue | None = None
    windSpeed: QuantitativeValue | None = None
    windDirection: QuantitativeValue | None = None


class ObservationResponse(BaseModel):
    properties: Observation


class ForecastPeriod(BaseModel):
    """One day/night (or one hour) segment of an NWS forecast."""

    number: int | None = None
    name: str | None = None
    startTime: datetime
    endTime: datetime | None = None
    isDaytime: bool | None = None
    temperature: float | None = None
    temperatureUnit: str = "F"
    probabilityOfPrecipitation: QuantitativeValue | None = None
    relativeHumidity: QuantitativeValue | None = None
    windSpeed: str | None = None
    windDirection: str | None = None
    icon: str | None = None
    shortForecast: str | None = None
    detailedForecast: str | None = None


class ForecastProperties(BaseModel):
    periods: list[ForecastPeriod] = Field(default_factory=list)


class ForecastResponse(BaseModel):
    properties: ForecastProperties
