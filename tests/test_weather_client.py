"""Tests for the Weather API client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from depart_mcp.data.config import ProviderConfig
from depart_mcp.data.weather_client import MAX_FORECAST_HOURS, WeatherClient
from depart_mcp.errors import ProviderError
from depart_mcp.models.trip import AIRPORT_COORDINATES, Airport

WEATHER_URL = "https://weather.example.com/forecast/hours:lookup"
LGA = AIRPORT_COORDINATES[Airport.LGA]


@pytest.fixture
def config() -> ProviderConfig:
    """Create a test config."""
    return ProviderConfig(GOOGLE_MAPS_API_KEY="test_key", weather_url=WEATHER_URL)


def _response(json: dict | None = None, status_code: int = 200, text: str | None = None):
    request = httpx.Request("GET", WEATHER_URL)
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=json or {}, request=request)


def create_forecast_response() -> dict:
    """Create a sample forecast response for testing."""
    return {
        "forecastHours": [
            {
                "interval": {
                    "startTime": "2025-12-25T15:00:00Z",
                    "endTime": "2025-12-25T16:00:00Z",
                },
                "weatherCondition": {
                    "description": {"text": "Light rain", "languageCode": "en"},
                    "type": "LIGHT_RAIN",
                },
                "precipitation": {"probability": {"percent": 60, "type": "RAIN"}},
                "temperature": {"degrees": 4.2, "unit": "CELSIUS"},
            },
            {
                "interval": {"startTime": "2025-12-25T16:00:00Z"},
                "weatherCondition": {"description": {"text": "Cloudy"}},
            },
        ],
        "timeZone": {"id": "America/New_York"},
    }


@pytest.mark.asyncio
async def test_fetch_forecast_hours_parses_samples(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response(create_forecast_response()))
        mock_client_class.return_value = mock_client

        async with WeatherClient(config) as client:
            forecast = await client.fetch_forecast_hours(LGA, hours=2)

    assert len(forecast.forecast_hours) == 2

    first = forecast.forecast_hours[0]
    assert first.condition_text == "Light rain"
    assert first.precipitation_type == "RAIN"
    assert first.precipitation_percent == 60

    second = forecast.forecast_hours[1]
    assert second.condition_text == "Cloudy"
    assert second.precipitation_type is None
    assert second.precipitation_percent is None

    params = mock_client.get.call_args.kwargs["params"]
    assert params == {
        "location.latitude": LGA.latitude,
        "location.longitude": LGA.longitude,
        "hours": 2,
        "key": "test_key",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(("requested", "sent"), [(0, 1), (-5, 1), (500, MAX_FORECAST_HOURS)])
async def test_hours_clamped(config: ProviderConfig, requested: int, sent: int):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response({"forecastHours": []}))
        mock_client_class.return_value = mock_client

        async with WeatherClient(config) as client:
            await client.fetch_forecast_hours(LGA, hours=requested)

    assert mock_client.get.call_args.kwargs["params"]["hours"] == sent


@pytest.mark.asyncio
async def test_missing_forecast_hours_is_empty(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response({}))
        mock_client_class.return_value = mock_client

        async with WeatherClient(config) as client:
            forecast = await client.fetch_forecast_hours(LGA, hours=5)

    assert forecast.forecast_hours == []


@pytest.mark.asyncio
async def test_http_error_raises(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response({"error": {}}, status_code=429))
        mock_client_class.return_value = mock_client

        async with WeatherClient(config) as client:
            with pytest.raises(ProviderError) as exc_info:
                await client.fetch_forecast_hours(LGA, hours=5)

    assert exc_info.value.status_code == 429


@pytest.mark.asyncio
async def test_invalid_json_raises(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.get = AsyncMock(return_value=_response(text="<html>oops</html>"))
        mock_client_class.return_value = mock_client

        async with WeatherClient(config) as client:
            with pytest.raises(ProviderError, match="unreadable"):
                await client.fetch_forecast_hours(LGA, hours=5)


@pytest.mark.asyncio
async def test_client_not_initialized(config: ProviderConfig):
    client = WeatherClient(config)

    with pytest.raises(RuntimeError, match="Client not initialized"):
        await client.fetch_forecast_hours(LGA, hours=1)
