"""Pydantic models for the Google provider payloads we consume.

Only the fields used by the planner are modeled; everything else is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Base for Google APIs that use camelCase JSON keys."""

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


# Routes API (directions/v2:computeRoutes)


class Route(_CamelModel):
    duration: str = Field(description="Duration in seconds with an 's' suffix, e.g. '2700s'")


class RoutesResponse(_CamelModel):
    routes: list[Route] = []


# Geocoding API (snake_case keys)


class LatLng(BaseModel):
    model_config = ConfigDict(extra="ignore")

    lat: float
    lng: float


class Geometry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    location: LatLng


class GeocodeResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    geometry: Geometry


class GeocodeResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str = "UNKNOWN"
    error_message: str | None = None
    results: list[GeocodeResult] = []


# Weather API (forecast/hours:lookup)


class LocalizedDescription(_CamelModel):
    text: str | None = None


class WeatherCondition(_CamelModel):
    description: LocalizedDescription | None = None


class PrecipitationProbability(_CamelModel):
    percent: int | None = None
    type: str | None = None


class Precipitation(_CamelModel):
    probability: PrecipitationProbability | None = None


class ForecastHour(_CamelModel):
    """One hourly forecast sample."""

    weather_condition: WeatherCondition | None = None
    precipitation: Precipitation | None = None

    @property
    def condition_text(self) -> str | None:
        if self.weather_condition and self.weather_condition.description:
            return self.weather_condition.description.text or None
        return None

    @property
    def precipitation_type(self) -> str | None:
        if self.precipitation and self.precipitation.probability:
            return self.precipitation.probability.type
        return None

    @property
    def precipitation_percent(self) -> int | None:
        if self.precipitation and self.precipitation.probability:
            return self.precipitation.probability.percent
        return None


class ForecastHoursResponse(_CamelModel):
    forecast_hours: list[ForecastHour] = []


# Places API (places:autocomplete)


class PredictionText(_CamelModel):
    text: str


class PlacePrediction(_CamelModel):
    place_id: str
    text: PredictionText


class AutocompleteSuggestion(_CamelModel):
    # query predictions carry no place reference and are skipped
    place_prediction: PlacePrediction | None = None


class AutocompleteResponse(_CamelModel):
    suggestions: list[AutocompleteSuggestion] = []
