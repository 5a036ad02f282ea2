"""Weather delay mapping.

Turns either a manually chosen weather category or an hourly forecast sample
into a fixed extra-minutes penalty. Forecast lookups never fail the caller:
any provider error degrades to a zero-minute "Weather unavailable" assessment.
"""

import logging
from datetime import datetime, timedelta

from depart_mcp.data.config import ProviderConfig
from depart_mcp.data.weather_client import MAX_FORECAST_HOURS, WeatherClient
from depart_mcp.errors import ProviderError
from depart_mcp.models.google import ForecastHour
from depart_mcp.models.trip import Coordinate, WeatherAssessment, WeatherCategory

logger = logging.getLogger(__name__)

WEATHER_EXTRA_MINUTES: dict[str, int] = {
    WeatherCategory.CLEAR.value: 0,
    WeatherCategory.LIGHT_RAIN.value: 5,
    WeatherCategory.HEAVY_RAIN.value: 12,
    WeatherCategory.SNOW_OR_ICE.value: 18,
    WeatherCategory.SEVERE.value: 25,
}

WEATHER_UNAVAILABLE_LABEL = "Weather unavailable"

# Below this precipitation chance the hour counts as clear
MIN_PRECIPITATION_PERCENT = 20
# Untyped precipitation at or above this chance counts as severe
SEVERE_PRECIPITATION_PERCENT = 70


def weather_unavailable() -> WeatherAssessment:
    """Zero-penalty assessment used when the forecast cannot be fetched."""
    return WeatherAssessment(extra_minutes=0, summary_label=WEATHER_UNAVAILABLE_LABEL)


def extra_minutes_for(label: str) -> int:
    """Look up the penalty for a category label; unknown labels cost nothing."""
    return WEATHER_EXTRA_MINUTES.get(label, 0)


def assess_manual(label: str) -> WeatherAssessment:
    """Assess a caller-supplied category.

    The label is passed through unchanged even when it is not a known category.
    """
    return WeatherAssessment(extra_minutes=extra_minutes_for(label), summary_label=label)


def classify_condition_text(text: str) -> WeatherCategory:
    """Classify a free-text condition description by keyword precedence."""
    t = text.lower()

    if any(k in t for k in ("snow", "ice", "sleet", "freezing")):
        return WeatherCategory.SNOW_OR_ICE
    if any(k in t for k in ("thunder", "storm", "severe")):
        return WeatherCategory.SEVERE
    if "heavy" in t and "rain" in t:
        return WeatherCategory.HEAVY_RAIN
    if "rain" in t or "drizzle" in t:
        return WeatherCategory.LIGHT_RAIN
    return WeatherCategory.CLEAR


def classify_precipitation(precipitation_type: str | None, percent: int | None) -> WeatherCategory:
    """Classify by precipitation type and probability.

    Args:
        precipitation_type: API type such as "RAIN", "HEAVY_RAIN", "SNOW" (None means NONE).
        percent: Probability of precipitation, 0-100 (None means 0).
    """
    chance = percent or 0
    if chance < MIN_PRECIPITATION_PERCENT:
        return WeatherCategory.CLEAR

    t = (precipitation_type or "NONE").upper()

    if "SNOW" in t or "SLEET" in t or "FREEZING" in t:
        return WeatherCategory.SNOW_OR_ICE
    if "HEAVY_RAIN" in t:
        return WeatherCategory.HEAVY_RAIN
    if "RAIN" in t:
        return WeatherCategory.LIGHT_RAIN

    if chance >= SEVERE_PRECIPITATION_PERCENT:
        return WeatherCategory.SEVERE
    return WeatherCategory.LIGHT_RAIN


def assess_forecast_hour(hour: ForecastHour) -> WeatherAssessment:
    """Assess one hourly sample: condition text first, precipitation otherwise."""
    if hour.condition_text:
        category = classify_condition_text(hour.condition_text)
    else:
        category = classify_precipitation(hour.precipitation_type, hour.precipitation_percent)
    return WeatherAssessment(
        extra_minutes=WEATHER_EXTRA_MINUTES[category.value], summary_label=category.value
    )


def forecast_hour_offset(arrival_deadline: datetime, now: datetime) -> int:
    """Whole hours from now until the deadline, clamped to the forecast horizon."""
    hours = (arrival_deadline - now) // timedelta(hours=1)
    return max(0, min(MAX_FORECAST_HOURS - 1, hours))


async def assess_forecast(
    config: ProviderConfig,
    destination: Coordinate,
    arrival_deadline: datetime,
    now: datetime,
) -> WeatherAssessment:
    """Assess the forecast at the destination for the hour of arrival.

    Never raises for provider problems; see module docstring.
    """
    offset = forecast_hour_offset(arrival_deadline, now)
    hours_to_fetch = min(MAX_FORECAST_HOURS, max(1, offset + 1))

    try:
        async with WeatherClient(config) as client:
            forecast = await client.fetch_forecast_hours(destination, hours=hours_to_fetch)
    except ProviderError as e:
        logger.warning(f"Weather lookup failed, continuing without weather delay: {e}")
        return weather_unavailable()

    samples = forecast.forecast_hours
    if not samples:
        logger.warning("Weather API returned no forecast hours")
        return weather_unavailable()

    index = min(offset, len(samples) - 1)
    assessment = assess_forecast_hour(samples[index])
    logger.debug(
        f"Weather at hour offset {index}/{len(samples)}: "
        f"{assessment.summary_label} (+{assessment.extra_minutes} min)"
    )
    return assessment
