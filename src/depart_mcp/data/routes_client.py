import math
from datetime import datetime

import httpx

from depart_mcp.data.config import ProviderConfig
from depart_mcp.errors import ProviderError
from depart_mcp.models.google import RoutesResponse
from depart_mcp.models.trip import Coordinate, format_instant


def parse_duration_minutes(duration: str) -> int:
    """Convert a Routes API duration like "2700s" to whole minutes, rounding up.

    Raises:
        ValueError: If the duration string is not a number of seconds.
    """
    seconds = float(duration.strip().removesuffix("s"))
    if seconds < 0:
        raise ValueError(f"Negative route duration: {duration}")
    return math.ceil(seconds / 60)


def _lat_lng_waypoint(coordinate: Coordinate) -> dict:
    return {
        "location": {
            "latLng": {"latitude": coordinate.latitude, "longitude": coordinate.longitude}
        }
    }


class RoutesClient:
    """Async HTTP client for traffic-aware driving durations from the Routes API.

    Usage:
        async with RoutesClient(config) as client:
            minutes = await client.compute_duration_minutes(departure, destination, origin_place_id=pid)
    """

    def __init__(self, config: ProviderConfig):
        """Initialize the client.

        Args:
            config: Provider configuration with API key and Routes URL.
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "RoutesClient":
        """Enter async context - create HTTP client."""
        headers = {"X-Goog-FieldMask": "routes.duration"}
        if self._config.api_key:
            headers["X-Goog-Api-Key"] = self._config.api_key
        self._client = httpx.AsyncClient(
            headers=headers, timeout=self._config.request_timeout_seconds
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def compute_duration_minutes(
        self,
        departure: datetime,
        destination: Coordinate,
        origin_place_id: str | None = None,
        origin_location: Coordinate | None = None,
    ) -> int:
        """Fetch the driving duration for a departure at the given instant.

        Exactly one of origin_place_id / origin_location should be given; the
        place reference wins if both are.

        Returns:
            Duration of the first route in whole minutes (rounded up).

        Raises:
            RuntimeError: If client not initialized.
            ValueError: If no origin is given.
            ProviderError: If the request fails or returns no routes.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        if origin_place_id:
            origin = {"placeId": origin_place_id}
        elif origin_location is not None:
            origin = _lat_lng_waypoint(origin_location)
        else:
            raise ValueError("An origin place ID or location is required")

        payload = {
            "origin": origin,
            "destination": _lat_lng_waypoint(destination),
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE",
            "departureTime": format_instant(departure),
        }

        try:
            response = await self._client.post(self._config.routes_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Routes API error: {e.response.text}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Routes API request failed: {e!r}") from e

        try:
            data = RoutesResponse.model_validate(response.json())
            if not data.routes:
                raise ProviderError("Routes API returned no routes")
            return parse_duration_minutes(data.routes[0].duration)
        except ValueError as e:
            raise ProviderError(f"Routes API returned an unreadable response: {e}") from e
