"""Validation of raw trip requests into typed TripRequest/PreviewRequest models.

Rules are applied in a fixed priority order and the first failure wins, so
callers always get a single field-specific TripValidationError.
"""

import re
from collections.abc import Mapping
from datetime import UTC, date, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from depart_mcp.errors import TripValidationError
from depart_mcp.models.trip import (
    Airport,
    Origin,
    PreviewRequest,
    TransportMode,
    TripRequest,
    WeatherSource,
)

DATE_FORMAT = "%m-%d-%Y"
TIME_FORMAT_24H = "%H:%M"
TIME_FORMAT_12H = "%I:%M %p"

# "3:00PM" / "3:00 pm" -> "3:00 PM"
_MERIDIEM = re.compile(r"\s*([AP]M)$")
_STRICT_DATE = re.compile(r"^\d{1,2}-\d{1,2}-\d{4}$")
_STRICT_TIME = re.compile(r"^\d{1,2}:\d{2}$")

INVALID_ARRIVAL_MESSAGE = "invalid arrival date/time"

# A day of waiting for a cab; larger buffers are input errors
MAX_CAB_BUFFER_MINUTES = 24 * 60
# Deadlines keep this much room from both ends of datetime's range
_DEADLINE_MARGIN = timedelta(days=2)
_EARLIEST_DEADLINE = datetime.min.replace(tzinfo=UTC) + _DEADLINE_MARGIN
_LATEST_DEADLINE = datetime.max.replace(tzinfo=UTC) - _DEADLINE_MARGIN


def parse_arrival_date(value: str) -> date:
    """Parse "MM-DD-YYYY" (single-digit month/day and "/" separators allowed).

    Raises:
        ValueError: If the string is not a valid date in that format.
    """
    text = value.strip().replace("/", "-")
    if not _STRICT_DATE.match(text):
        raise ValueError(f"Invalid arrival date: {value}")
    return datetime.strptime(text, DATE_FORMAT).date()


def parse_arrival_time(value: str) -> time:
    """Parse 24-hour "H:MM" or 12-hour "h:mm AM/PM".

    Raises:
        ValueError: If the string is not a valid time in either format.
    """
    text = value.strip().upper()
    if "AM" in text or "PM" in text:
        text = _MERIDIEM.sub(r" \1", text)
        clock, _, marker = text.rpartition(" ")
        if not _STRICT_TIME.match(clock):
            raise ValueError(f"Invalid arrival time: {value}")
        return datetime.strptime(f"{clock} {marker}", TIME_FORMAT_12H).time()

    if not _STRICT_TIME.match(text):
        raise ValueError(f"Invalid arrival time: {value}")
    return datetime.strptime(text, TIME_FORMAT_24H).time()


def _within_datetime_range(deadline: datetime) -> bool:
    """True when the deadline survives UTC conversion and buffer arithmetic."""
    try:
        utc = deadline.astimezone(UTC)
    except OverflowError:
        return False
    return _EARLIEST_DEADLINE <= utc <= _LATEST_DEADLINE


def _get_string(fields: Mapping[str, Any], key: str) -> str | None:
    value = fields.get(key)
    if value is None:
        return None
    return str(value)


def _get_int(fields: Mapping[str, Any], key: str) -> int | None:
    """Read an integer field; integral strings and floats are accepted, bools are not."""
    value = fields.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _get_weather_source(fields: Mapping[str, Any]) -> WeatherSource:
    source = fields.get("weatherSource")
    if source is not None:
        try:
            return WeatherSource(str(source).strip().lower())
        except ValueError:
            raise TripValidationError(
                "weatherSource", "weatherSource must be auto or manual"
            ) from None
    use_weather_api = fields.get("useWeatherApi")
    if isinstance(use_weather_api, str):
        use_weather_api = use_weather_api.strip().lower() == "true"
    return WeatherSource.AUTO if use_weather_api is True else WeatherSource.MANUAL


def _validate_airport(fields: Mapping[str, Any]) -> Airport:
    airport = _get_string(fields, "airport")
    try:
        return Airport(airport)
    except ValueError:
        raise TripValidationError("airport", "airport must be JFK, LGA, or EWR") from None


def _validate_arrival(fields: Mapping[str, Any], zone: ZoneInfo) -> datetime:
    arrival_date = _get_string(fields, "arrivalDate")
    arrival_time = _get_string(fields, "arrivalTime")
    if not arrival_date or not arrival_time:
        field = "arrivalDate" if not arrival_date else "arrivalTime"
        raise TripValidationError(field, "arrivalDate and arrivalTime are required")

    try:
        day = parse_arrival_date(arrival_date)
    except ValueError:
        raise TripValidationError("arrivalDate", INVALID_ARRIVAL_MESSAGE) from None
    try:
        clock = parse_arrival_time(arrival_time)
    except ValueError:
        raise TripValidationError("arrivalTime", INVALID_ARRIVAL_MESSAGE) from None

    deadline = datetime.combine(day, clock, tzinfo=zone)
    if not _within_datetime_range(deadline):
        raise TripValidationError("arrivalDate", INVALID_ARRIVAL_MESSAGE)
    return deadline


def validate_preview_request(fields: Mapping[str, Any], timezone: str) -> PreviewRequest:
    """Validate the fields a weather preview needs (airport and arrival).

    Raises:
        TripValidationError: On the first invalid field.
    """
    zone = ZoneInfo(timezone)
    airport = _validate_airport(fields)
    deadline = _validate_arrival(fields, zone)
    return PreviewRequest(airport=airport, arrival_deadline=deadline)


def validate_trip_request(fields: Mapping[str, Any], timezone: str) -> TripRequest:
    """Validate a raw field bag into a TripRequest.

    Recognized keys: airport, arrivalDate, arrivalTime, transportMode,
    cabBufferMinutes, weatherSource or useWeatherApi, weatherCondition,
    selectedPlaceId, fromAddressText (fromAddress as fallback).

    Args:
        fields: Loosely-typed request fields.
        timezone: IANA zone the arrival date/time is interpreted in.

    Returns:
        A TripRequest whose cab_buffer_minutes is the effective buffer.

    Raises:
        TripValidationError: On the first invalid field.
    """
    zone = ZoneInfo(timezone)

    # 1-2: destination and deadline
    airport = _validate_airport(fields)
    deadline = _validate_arrival(fields, zone)

    # 3: transport mode
    try:
        transport_mode = TransportMode(_get_string(fields, "transportMode"))
    except ValueError:
        raise TripValidationError("transportMode", "transportMode must be self or cab") from None

    # 4: cab buffer (always required, only counted for cabs)
    cab_buffer = _get_int(fields, "cabBufferMinutes")
    if cab_buffer is None or cab_buffer < 0:
        raise TripValidationError("cabBufferMinutes", "cabBufferMinutes must be >= 0")
    if cab_buffer > MAX_CAB_BUFFER_MINUTES:
        raise TripValidationError(
            "cabBufferMinutes", f"cabBufferMinutes must be <= {MAX_CAB_BUFFER_MINUTES}"
        )
    if transport_mode is not TransportMode.CAB:
        cab_buffer = 0

    # 5: manual weather category (unknown labels are accepted)
    weather_source = _get_weather_source(fields)
    manual_category = None
    if weather_source is WeatherSource.MANUAL:
        manual_category = _get_string(fields, "weatherCondition")
        if manual_category is None or not manual_category.strip():
            raise TripValidationError(
                "weatherCondition", "weatherCondition is required when useWeatherApi=false"
            )
        manual_category = manual_category.strip()

    # 6: origin
    place_id = _get_string(fields, "selectedPlaceId")
    place_id = place_id.strip() if place_id and place_id.strip() else None
    address = _get_string(fields, "fromAddressText")
    if address is None or not address.strip():
        address = _get_string(fields, "fromAddress")
    address = address.strip() if address and address.strip() else None
    if place_id is None and address is None:
        raise TripValidationError("fromAddressText", "fromAddressText is required")

    return TripRequest(
        origin=Origin(place_id=place_id, address_text=address),
        airport=airport,
        arrival_deadline=deadline,
        transport_mode=transport_mode,
        cab_buffer_minutes=cab_buffer,
        weather_source=weather_source,
        manual_weather_category=manual_category,
    )
