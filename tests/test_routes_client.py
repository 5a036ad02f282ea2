"""Tests for the Routes API client."""

from datetime import datetime
from unittest.mock import AsyncMock, patch
from zoneinfo import ZoneInfo

import httpx
import pytest

from depart_mcp.data.config import ProviderConfig
from depart_mcp.data.routes_client import RoutesClient, parse_duration_minutes
from depart_mcp.errors import ProviderError
from depart_mcp.models.trip import AIRPORT_COORDINATES, Airport, Coordinate

NY = ZoneInfo("America/New_York")
DEPARTURE = datetime(2025, 12, 25, 12, 30, tzinfo=NY)
JFK = AIRPORT_COORDINATES[Airport.JFK]
ROUTES_URL = "https://routes.example.com/computeRoutes"


@pytest.fixture
def config() -> ProviderConfig:
    """Create a test config."""
    return ProviderConfig(GOOGLE_MAPS_API_KEY="test_key", routes_url=ROUTES_URL)


def _response(status_code: int = 200, json: dict | None = None, text: str | None = None):
    request = httpx.Request("POST", ROUTES_URL)
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=json or {}, request=request)


class TestParseDuration:
    def test_whole_minutes(self) -> None:
        assert parse_duration_minutes("2700s") == 45

    def test_rounds_up(self) -> None:
        assert parse_duration_minutes("2701s") == 46
        assert parse_duration_minutes("59s") == 1

    def test_zero(self) -> None:
        assert parse_duration_minutes("0s") == 0

    def test_fractional_seconds(self) -> None:
        assert parse_duration_minutes("120.5s") == 3

    @pytest.mark.parametrize("value", ["abc", "", "-60s"])
    def test_rejects_invalid(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_duration_minutes(value)


@pytest.mark.asyncio
async def test_duration_for_place_id_origin(config: ProviderConfig):
    """Place references are sent as placeId waypoints."""
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(
            return_value=_response(json={"routes": [{"duration": "2700s"}]})
        )
        mock_client_class.return_value = mock_client

        async with RoutesClient(config) as client:
            minutes = await client.compute_duration_minutes(
                DEPARTURE, JFK, origin_place_id="ChIJ123"
            )

    assert minutes == 45

    url = mock_client.post.call_args.args[0]
    payload = mock_client.post.call_args.kwargs["json"]
    assert url == ROUTES_URL
    assert payload["origin"] == {"placeId": "ChIJ123"}
    assert payload["destination"] == {
        "location": {"latLng": {"latitude": JFK.latitude, "longitude": JFK.longitude}}
    }
    assert payload["travelMode"] == "DRIVE"
    assert payload["routingPreference"] == "TRAFFIC_AWARE"
    assert payload["departureTime"] == "2025-12-25T17:30:00Z"

    headers = mock_client_class.call_args.kwargs["headers"]
    assert headers["X-Goog-Api-Key"] == "test_key"
    assert headers["X-Goog-FieldMask"] == "routes.duration"
    assert mock_client_class.call_args.kwargs["timeout"] == 7.0


@pytest.mark.asyncio
async def test_duration_for_coordinate_origin(config: ProviderConfig):
    origin = Coordinate(latitude=40.7484, longitude=-73.9857)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(
            return_value=_response(json={"routes": [{"duration": "1830s"}, {"duration": "60s"}]})
        )
        mock_client_class.return_value = mock_client

        async with RoutesClient(config) as client:
            minutes = await client.compute_duration_minutes(
                DEPARTURE, JFK, origin_location=origin
            )

    # first route wins
    assert minutes == 31
    payload = mock_client.post.call_args.kwargs["json"]
    assert payload["origin"]["location"]["latLng"]["latitude"] == 40.7484


@pytest.mark.asyncio
async def test_place_id_preferred_over_location(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(
            return_value=_response(json={"routes": [{"duration": "600s"}]})
        )
        mock_client_class.return_value = mock_client

        async with RoutesClient(config) as client:
            await client.compute_duration_minutes(
                DEPARTURE,
                JFK,
                origin_place_id="ChIJ123",
                origin_location=Coordinate(latitude=1.0, longitude=2.0),
            )

    assert mock_client.post.call_args.kwargs["json"]["origin"] == {"placeId": "ChIJ123"}


@pytest.mark.asyncio
async def test_missing_origin_raises(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client_class.return_value = AsyncMock()

        async with RoutesClient(config) as client:
            with pytest.raises(ValueError):
                await client.compute_duration_minutes(DEPARTURE, JFK)


@pytest.mark.asyncio
async def test_no_routes_raises_provider_error(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(return_value=_response(json={}))
        mock_client_class.return_value = mock_client

        async with RoutesClient(config) as client:
            with pytest.raises(ProviderError, match="no routes"):
                await client.compute_duration_minutes(DEPARTURE, JFK, origin_place_id="ChIJ123")


@pytest.mark.asyncio
async def test_http_error_carries_status(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(
            return_value=_response(403, text='{"error": {"status": "PERMISSION_DENIED"}}')
        )
        mock_client_class.return_value = mock_client

        async with RoutesClient(config) as client:
            with pytest.raises(ProviderError) as exc_info:
                await client.compute_duration_minutes(DEPARTURE, JFK, origin_place_id="ChIJ123")

    assert exc_info.value.status_code == 403
    assert "PERMISSION_DENIED" in str(exc_info.value)
    assert str(exc_info.value).endswith("(HTTP 403)")


@pytest.mark.asyncio
async def test_timeout_raises_provider_error(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(side_effect=httpx.ConnectTimeout("timed out"))
        mock_client_class.return_value = mock_client

        async with RoutesClient(config) as client:
            with pytest.raises(ProviderError) as exc_info:
                await client.compute_duration_minutes(DEPARTURE, JFK, origin_place_id="ChIJ123")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_unreadable_duration_raises_provider_error(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client.post = AsyncMock(
            return_value=_response(json={"routes": [{"duration": "soon"}]})
        )
        mock_client_class.return_value = mock_client

        async with RoutesClient(config) as client:
            with pytest.raises(ProviderError):
                await client.compute_duration_minutes(DEPARTURE, JFK, origin_place_id="ChIJ123")


@pytest.mark.asyncio
async def test_client_not_initialized(config: ProviderConfig):
    """Test that using client without context manager raises error."""
    client = RoutesClient(config)

    with pytest.raises(RuntimeError, match="Client not initialized"):
        await client.compute_duration_minutes(DEPARTURE, JFK, origin_place_id="ChIJ123")


@pytest.mark.asyncio
async def test_client_closed_on_exit(config: ProviderConfig):
    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = AsyncMock()
        mock_client_class.return_value = mock_client

        async with RoutesClient(config):
            pass

    mock_client.aclose.assert_awaited_once()
