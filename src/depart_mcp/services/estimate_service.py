"""Trip estimate orchestration.

Two request modes share validation and weather handling:

- preview: airport + arrival only, automatic weather only.
- full: complete trip request, manual or automatic weather, departure search.

Errors are reported in the response envelope rather than raised. Weather
failures are absorbed (weather is an enhancement); routing and geocoding
failures fail the estimate because the travel duration is load-bearing.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from depart_mcp.data.config import ProviderConfig, get_provider_config
from depart_mcp.data.geocoding_client import GeocodingClient
from depart_mcp.data.routes_client import RoutesClient
from depart_mcp.errors import ConfigurationError, ProviderError, TripValidationError
from depart_mcp.models.responses import (
    ErrorKind,
    EstimateBreakdown,
    EstimateResponse,
    WeatherPreviewBreakdown,
    WeatherPreviewResponse,
)
from depart_mcp.models.trip import (
    DepartureResult,
    TripRequest,
    WeatherAssessment,
    WeatherSource,
    format_instant,
)
from depart_mcp.services.departure_search import TravelDurationProvider, find_latest_departure
from depart_mcp.services.travel_duration import GoogleTravelDurationProvider
from depart_mcp.services.trip_validator import validate_preview_request, validate_trip_request
from depart_mcp.services.weather_service import assess_forecast, assess_manual

logger = logging.getLogger(__name__)

# Module-level config (lazy-initialized)
_config: ProviderConfig | None = None


def _get_config() -> ProviderConfig:
    """Get or create the provider config singleton."""
    global _config
    if _config is None:
        _config = get_provider_config()
    return _config


def _require_api_key(config: ProviderConfig) -> None:
    if not config.is_configured:
        raise ConfigurationError("Missing GOOGLE_MAPS_API_KEY env var on server")


async def assess_weather(
    request: TripRequest, config: ProviderConfig, now: datetime
) -> WeatherAssessment:
    """Weather assessment for a full request (manual category or forecast)."""
    if request.weather_source is WeatherSource.MANUAL:
        return assess_manual(request.manual_weather_category or "")
    return await assess_forecast(config, request.destination, request.arrival_deadline, now)


async def compute_departure(
    request: TripRequest,
    now: datetime,
    provider: TravelDurationProvider,
    config: ProviderConfig,
) -> DepartureResult:
    """Compute the recommended departure for a validated request.

    Raises:
        ProviderError: If a routing or geocoding lookup fails.
    """
    weather = await assess_weather(request, config, now)
    fixed_delay = request.cab_buffer_minutes + weather.extra_minutes

    choice = await find_latest_departure(
        now=now,
        arrival_deadline=request.arrival_deadline,
        fixed_delay_minutes=fixed_delay,
        origin=request.origin,
        destination=request.destination,
        provider=provider,
    )

    return DepartureResult(
        recommended_leave_at=choice.leave_at,
        arrival_deadline=request.arrival_deadline,
        base_travel_minutes=choice.base_travel_minutes,
        cab_buffer_minutes_used=request.cab_buffer_minutes,
        weather_extra_minutes=weather.extra_minutes,
        weather_summary=weather.summary_label,
        total_minutes=choice.base_travel_minutes + fixed_delay,
    )


def to_estimate_response(result: DepartureResult) -> EstimateResponse:
    """Convert a DepartureResult into the tool response payload."""
    return EstimateResponse(
        recommended_leave_date_time=format_instant(result.recommended_leave_at),
        arrival_date_time=format_instant(result.arrival_deadline),
        breakdown=EstimateBreakdown(
            base_travel_minutes=result.base_travel_minutes,
            cab_buffer_minutes=result.cab_buffer_minutes_used,
            weather_extra_minutes=result.weather_extra_minutes,
            weather_summary=result.weather_summary,
            total_minutes=result.total_minutes,
        ),
        success=True,
    )


async def estimate_departure(
    fields: Mapping[str, Any],
    now: datetime | None = None,
    duration_provider: TravelDurationProvider | None = None,
) -> EstimateResponse:
    """Full estimate: validate, assess weather, search for the departure.

    Args:
        fields: Raw request fields (see validate_trip_request for keys).
        now: Current instant (default: now, UTC).
        duration_provider: Duration source; defaults to the Google Routes/Geocoding
            provider backed by fresh clients for this request.

    Returns:
        EstimateResponse; success=False with error details on failure.
    """
    config = _get_config()
    now = now or datetime.now(UTC)

    try:
        _require_api_key(config)
        request = validate_trip_request(fields, config.timezone)

        if duration_provider is not None:
            result = await compute_departure(request, now, duration_provider, config)
        else:
            async with RoutesClient(config) as routes, GeocodingClient(config) as geocoder:
                provider = GoogleTravelDurationProvider(routes, geocoder, config.region_hint)
                result = await compute_departure(request, now, provider, config)
    except ConfigurationError as e:
        logger.error(str(e))
        return EstimateResponse(success=False, error=str(e), error_kind=ErrorKind.CONFIGURATION)
    except TripValidationError as e:
        return EstimateResponse(
            success=False, error=e.message, error_kind=ErrorKind.VALIDATION, error_field=e.field
        )
    except ProviderError as e:
        logger.warning(f"Estimate failed: {e}")
        return EstimateResponse(
            success=False, error=f"Estimate failed: {e}", error_kind=ErrorKind.PROVIDER
        )

    return to_estimate_response(result)


async def preview_weather(
    fields: Mapping[str, Any],
    now: datetime | None = None,
) -> WeatherPreviewResponse:
    """Weather-only preview for an airport and arrival time.

    Never fails because of a weather outage; the breakdown degrades to
    0 minutes / "Weather unavailable".
    """
    config = _get_config()
    now = now or datetime.now(UTC)

    try:
        _require_api_key(config)
        request = validate_preview_request(fields, config.timezone)
    except ConfigurationError as e:
        logger.error(str(e))
        return WeatherPreviewResponse(
            success=False, error=str(e), error_kind=ErrorKind.CONFIGURATION
        )
    except TripValidationError as e:
        return WeatherPreviewResponse(
            success=False, error=e.message, error_kind=ErrorKind.VALIDATION, error_field=e.field
        )

    weather = await assess_forecast(config, request.destination, request.arrival_deadline, now)

    return WeatherPreviewResponse(
        arrival_date_time=format_instant(request.arrival_deadline),
        breakdown=WeatherPreviewBreakdown(
            weather_extra_minutes=weather.extra_minutes,
            weather_summary=weather.summary_label,
        ),
        success=True,
    )


def reset_service() -> None:
    """Reset the service state completely.

    Clears the config singleton. Useful for testing.
    """
    global _config
    _config = None
    # Clear the lru_cache on get_provider_config so it re-reads .env/environment
    if hasattr(get_provider_config, "cache_clear"):
        get_provider_config.cache_clear()
