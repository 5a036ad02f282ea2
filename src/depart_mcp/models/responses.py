from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorKind(str, Enum):
    """Category of a failed request."""

    VALIDATION = "validation"
    PROVIDER = "provider"
    CONFIGURATION = "configuration"


class _PayloadModel(BaseModel):
    """Response payloads are serialized with stable camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )


class EstimateBreakdown(_PayloadModel):
    """Itemized minutes behind a recommended departure."""

    base_travel_minutes: int = Field(description="Traffic-aware driving time from the route lookup")
    cab_buffer_minutes: int = Field(description="Cab wait buffer used (0 when self-driving)")
    weather_extra_minutes: int = Field(description="Weather penalty (0, 5, 12, 18 or 25)")
    weather_summary: str = Field(description="Weather category label, e.g. 'Heavy rain'")
    total_minutes: int = Field(description="base + cab buffer + weather")


class EstimateResponse(_PayloadModel):
    """Response from the estimate_departure tool."""

    recommended_leave_date_time: str | None = Field(
        default=None, description="Latest departure as an ISO-8601 UTC instant"
    )
    arrival_date_time: str | None = Field(
        default=None, description="Requested arrival deadline as an ISO-8601 UTC instant"
    )
    breakdown: EstimateBreakdown | None = None

    # Status
    success: bool
    error: str | None = None
    error_kind: ErrorKind | None = None
    error_field: str | None = Field(
        default=None, description="Offending request field for validation errors"
    )


class WeatherPreviewBreakdown(_PayloadModel):
    weather_extra_minutes: int
    weather_summary: str


class WeatherPreviewResponse(_PayloadModel):
    """Response from the preview_weather tool."""

    arrival_date_time: str | None = None
    breakdown: WeatherPreviewBreakdown | None = None

    success: bool
    error: str | None = None
    error_kind: ErrorKind | None = None
    error_field: str | None = None


class PlaceSuggestion(BaseModel):
    id: str = Field(description="Place reference, usable as selectedPlaceId")
    label: str = Field(description="Human-readable address")


class SuggestPlacesResponse(BaseModel):
    """Response from the suggest_places tool."""

    suggestions: list[PlaceSuggestion] = Field(default_factory=list)
    count: int = Field(description="Number of suggestions returned")
    api_available: bool = Field(
        description="Whether the places API was reachable (false if API key missing or error)"
    )
