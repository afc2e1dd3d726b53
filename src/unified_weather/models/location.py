"""Location value types and US detection heuristics."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class USRegion(BaseModel):
    """Inclusive latitude/longitude bounding box for part of the United States.

    Example:
        >>> CONTIGUOUS_US.contains(47.6, -122.3)
        True
    """

    model_config = ConfigDict(frozen=True)

    name: str
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )


CONTIGUOUS_US = USRegion(
    name="contiguous_us",
    min_latitude=24.5,
    max_latitude=49.5,
    min_longitude=-125.0,
    max_longitude=-66.0,
)
ALASKA = USRegion(
    name="alaska",
    min_latitude=51.0,
    max_latitude=71.5,
    min_longitude=-180.0,
    max_longitude=-129.0,
)
HAWAII = USRegion(
    name="hawaii",
    min_latitude=18.5,
    max_latitude=22.5,
    min_longitude=-160.5,
    max_longitude=-154.5,
)
# Puerto Rico and the US Virgin Islands
CARIBBEAN = USRegion(
    name="caribbean",
    min_latitude=17.5,
    max_latitude=18.6,
    min_longitude=-68.0,
    max_longitude=-64.5,
)

US_REGIONS = (CONTIGUOUS_US, ALASKA, HAWAII, CARIBBEAN)

# 50 states, the District of Columbia and Puerto Rico
US_STATE_CODES = frozenset(
    {
        "al", "ak", "az", "ar", "ca", "co", "ct", "de", "fl", "ga",
        "hi", "id", "il", "in", "ia", "ks", "ky", "la", "me", "md",
        "ma", "mi", "mn", "ms", "mo", "mt", "ne", "nv", "nh", "nj",
        "nm", "ny", "nc", "nd", "oh", "ok", "or", "pa", "ri", "sc",
        "sd", "tn", "tx", "ut", "vt", "va", "wa", "wv", "wi", "wy",
        "dc", "pr",
    }
)

US_COUNTRY_MARKERS = (", us", ", usa", "united states")


def coordinates_in_us(latitude: float, longitude: float) -> bool:
    """Check whether coordinates fall inside any US bounding box.

    Example:
        >>> coordinates_in_us(24.5, -100.0)
        True
        >>> coordinates_in_us(24.4, -100.0)
        False
    """
    return any(region.contains(latitude, longitude) for region in US_REGIONS)


def is_us_city(name: str) -> bool:
    """Guess whether a free-text city name refers to a US location.

    Example:
        >>> is_us_city("Seattle, wa")
        True
        >>> is_us_city("Paris, France")
        False
    """
    lower = name.lower()
    if any(marker in lower for marker in US_COUNTRY_MARKERS):
        return True
    return any(lower.endswith(f", {code}") for code in US_STATE_CODES)


class CoordinateLocation(BaseModel):
    """A location given as latitude/longitude.

    Example:
        >>> CoordinateLocation(latitude=21.3, longitude=-157.8).is_likely_us
        True
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["coordinates"] = "coordinates"
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    @property
    def is_likely_us(self) -> bool:
        return coordinates_in_us(self.latitude, self.longitude)

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"


class CityLocation(BaseModel):
    """A location given as a free-text city name such as "Seattle, WA".

    Example:
        >>> CityLocation(name="London").is_likely_us
        False
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["city"] = "city"
    name: str = Field(..., min_length=1)

    @property
    def is_likely_us(self) -> bool:
        return is_us_city(self.name)

    def __str__(self) -> str:
        return self.name


Location = Annotated[Union[CoordinateLocation, CityLocation], Field(discriminator="kind")]


class ResolvedLocation(BaseModel):
    """Location as reported back to callers after a provider answered."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    name: str | None = None
    timezone: str | None = None
