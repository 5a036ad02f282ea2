from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Airport(str, Enum):
    """Supported destination airports."""

    JFK = "JFK"
    LGA = "LGA"
    EWR = "EWR"


class TransportMode(str, Enum):
    """How the traveler gets to the airport."""

    SELF = "self"
    CAB = "cab"


class WeatherSource(str, Enum):
    """Where the weather penalty comes from."""

    AUTO = "auto"
    MANUAL = "manual"


class WeatherCategory(str, Enum):
    """Weather buckets, each carrying a fixed extra-minutes penalty."""

    CLEAR = "Clear"
    LIGHT_RAIN = "Light rain"
    HEAVY_RAIN = "Heavy rain"
    SNOW_OR_ICE = "Snow or ice"
    SEVERE = "Severe weather"


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


AIRPORT_COORDINATES: dict[Airport, Coordinate] = {
    Airport.JFK: Coordinate(latitude=40.6413111, longitude=-73.7781391),
    Airport.LGA: Coordinate(latitude=40.7769271, longitude=-73.8739659),
    Airport.EWR: Coordinate(latitude=40.6895314, longitude=-74.1744624),
}


class Origin(BaseModel):
    """Trip origin: a resolved place reference and/or free-text address.

    When both are set the place reference wins.
    """

    model_config = ConfigDict(frozen=True)

    place_id: str | None = None
    address_text: str | None = None

    @property
    def has_place_id(self) -> bool:
        return bool(self.place_id)


class PreviewRequest(BaseModel):
    """Validated weather-preview request (destination and deadline only)."""

    model_config = ConfigDict(frozen=True)

    airport: Airport
    arrival_deadline: datetime

    @property
    def destination(self) -> Coordinate:
        return AIRPORT_COORDINATES[self.airport]


class TripRequest(BaseModel):
    """Validated full trip request."""

    model_config = ConfigDict(frozen=True)

    origin: Origin
    airport: Airport
    arrival_deadline: datetime = Field(description="Aware datetime in the airport's local zone")
    transport_mode: TransportMode
    cab_buffer_minutes: int = Field(
        ge=0, description="Effective cab buffer (always 0 for self-drive)"
    )
    weather_source: WeatherSource
    manual_weather_category: str | None = None

    @property
    def destination(self) -> Coordinate:
        return AIRPORT_COORDINATES[self.airport]


class WeatherAssessment(BaseModel):
    """Extra minutes and summary label derived from a weather signal."""

    model_config = ConfigDict(frozen=True)

    extra_minutes: int
    summary_label: str


class DepartureResult(BaseModel):
    """Recommended departure and its minute-by-minute breakdown."""

    model_config = ConfigDict(frozen=True)

    recommended_leave_at: datetime
    arrival_deadline: datetime
    base_travel_minutes: int
    cab_buffer_minutes_used: int
    weather_extra_minutes: int
    weather_summary: str
    total_minutes: int


def format_instant(dt: datetime) -> str:
    """Format an aware datetime as an ISO-8601 UTC instant.

    Milliseconds are included only when non-zero, e.g. "2025-12-25T20:00:00Z"
    or "2025-12-25T19:08:00.125Z".
    """
    utc = dt.astimezone(UTC)
    if utc.microsecond // 1000 == 0:
        return utc.strftime("%Y-%m-%dT%H:%M:%SZ")
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")
