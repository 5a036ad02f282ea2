from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderConfig(BaseSettings):
    """Configuration for the Google routing, geocoding, weather and places APIs.

    Automatically loads from environment variables and .env file.
    A single API key covers all provider families.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    api_key: str | None = Field(default=None, alias="GOOGLE_MAPS_API_KEY")
    request_timeout_seconds: float = Field(default=7.0, alias="DEPART_REQUEST_TIMEOUT")
    places_timeout_seconds: float = Field(default=5.0, alias="DEPART_PLACES_TIMEOUT")

    # arrival times are always interpreted in the airports' local zone
    timezone: str = Field(default="America/New_York", alias="DEPART_TIMEZONE")

    # appended to free-text origins before geocoding (", NY")
    region_hint: str = "NY"

    routes_url: str = "https://routes.googleapis.com/directions/v2:computeRoutes"
    geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    weather_url: str = "https://weather.googleapis.com/v1/forecast/hours:lookup"
    places_url: str = "https://places.googleapis.com/v1/places:autocomplete"

    @field_validator("api_key")
    @classmethod
    def _blank_key_is_missing(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def is_configured(self) -> bool:
        """True when the provider API key is set."""
        return self.api_key is not None


@lru_cache
def get_provider_config() -> ProviderConfig:
    """Get provider configuration (cached singleton).

    Returns:
        ProviderConfig with values from .env file or environment variables.
    """
    return ProviderConfig()
