from depart_mcp.app import mcp
from depart_mcp.models.responses import EstimateResponse, WeatherPreviewResponse
from depart_mcp.services.estimate_service import estimate_departure as _estimate_departure
from depart_mcp.services.estimate_service import preview_weather as _preview_weather


@mcp.tool()
async def estimate_departure(
    airport: str,
    arrival_date: str,
    arrival_time: str,
    transport_mode: str,
    from_address: str | None = None,
    selected_place_id: str | None = None,
    cab_buffer_minutes: int = 0,
    use_weather_api: bool = True,
    weather_condition: str | None = None,
) -> EstimateResponse:
    """Estimate the latest time to leave for an airport and still arrive on time.

    Searches traffic-aware driving times for the latest departure that reaches
    the airport by the arrival time minus the cab buffer and a weather delay.
    If that moment has already passed, the recommendation is to leave now.

    Weather delays: Clear 0, Light rain 5, Heavy rain 12, Snow or ice 18,
    Severe weather 25 minutes.

    Args:
        airport: "JFK", "LGA" or "EWR".
        arrival_date: Arrival date in MM-DD-YYYY format (e.g., "12-25-2025").
        arrival_time: Arrival time, "15:00" or "3:00 PM" (New York time).
        transport_mode: "self" (drive yourself) or "cab" (taxi/rideshare).
        from_address: Origin street address (required unless selected_place_id is given).
        selected_place_id: Place ID from suggest_places (preferred over from_address).
        cab_buffer_minutes: Minutes to wait for a cab (only counted for "cab").
        use_weather_api: Use the forecast at the airport (default True).
        weather_condition: Manual weather category when use_weather_api is False.

    Returns:
        EstimateResponse with recommendedLeaveDateTime and a minute breakdown,
        or success=False with the error.
    """
    fields = {
        "airport": airport,
        "arrivalDate": arrival_date,
        "arrivalTime": arrival_time,
        "transportMode": transport_mode,
        "fromAddressText": from_address,
        "selectedPlaceId": selected_place_id,
        "cabBufferMinutes": cab_buffer_minutes,
        "useWeatherApi": use_weather_api,
        "weatherCondition": weather_condition,
    }
    return await _estimate_departure(fields)


@mcp.tool()
async def preview_weather(
    airport: str,
    arrival_date: str,
    arrival_time: str,
) -> WeatherPreviewResponse:
    """Preview the forecast weather delay at an airport for an arrival time.

    Weather outages never fail this call; the summary becomes
    "Weather unavailable" with 0 extra minutes.

    Args:
        airport: "JFK", "LGA" or "EWR".
        arrival_date: Arrival date in MM-DD-YYYY format.
        arrival_time: Arrival time, "15:00" or "3:00 PM" (New York time).

    Returns:
        WeatherPreviewResponse with weatherExtraMinutes and weatherSummary.
    """
    return await _preview_weather(
        {"airport": airport, "arrivalDate": arrival_date, "arrivalTime": arrival_time}
    )
