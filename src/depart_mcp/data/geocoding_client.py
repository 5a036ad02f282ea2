import httpx

from depart_mcp.data.config import ProviderConfig
from depart_mcp.errors import ProviderError
from depart_mcp.models.google import GeocodeResponse
from depart_mcp.models.trip import Coordinate


class GeocodingClient:
    """Async HTTP client for resolving free-text addresses with the Geocoding API.

    Usage:
        async with GeocodingClient(config) as client:
            coordinate = await client.resolve("350 5th Ave, NY")
    """

    def __init__(self, config: ProviderConfig):
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "GeocodingClient":
        """Enter async context - create HTTP client."""
        self._client = httpx.AsyncClient(timeout=self._config.request_timeout_seconds)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def resolve(self, address: str) -> Coordinate:
        """Geocode an address to the coordinate of its first result.

        Results are restricted to the US.

        Raises:
            RuntimeError: If client not initialized.
            ProviderError: On HTTP failure, a non-OK status, or zero results.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        address = address.strip()
        if not address:
            raise ProviderError("Cannot geocode empty address")

        params = {
            "address": address,
            "components": "country:US",
            "region": "us",
            "key": self._config.api_key or "",
        }

        try:
            response = await self._client.get(self._config.geocode_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Geocoding API error: {e.response.text}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Geocoding API request failed: {e!r}") from e

        try:
            data = GeocodeResponse.model_validate(response.json())
        except ValueError as e:
            raise ProviderError(f"Geocoding API returned an unreadable response: {e}") from e

        if data.status != "OK":
            detail = f" error={data.error_message}" if data.error_message else ""
            raise ProviderError(f"Geocoding failed. status={data.status}{detail} address={address}")
        if not data.results:
            raise ProviderError(f"Geocoding returned 0 results for address={address}")

        location = data.results[0].geometry.location
        return Coordinate(latitude=location.lat, longitude=location.lng)
