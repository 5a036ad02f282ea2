import httpx

from depart_mcp.data.config import ProviderConfig
from depart_mcp.errors import ProviderError
from depart_mcp.models.google import ForecastHoursResponse
from depart_mcp.models.trip import Coordinate

# The hourly forecast endpoint covers at most 10 days
MAX_FORECAST_HOURS = 240


class WeatherClient:
    """Async HTTP client for hourly forecasts from the Weather API.

    Usage:
        async with WeatherClient(config) as client:
            forecast = await client.fetch_forecast_hours(coordinate, hours=12)
    """

    def __init__(self, config: ProviderConfig):
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "WeatherClient":
        """Enter async context - create HTTP client."""
        self._client = httpx.AsyncClient(timeout=self._config.request_timeout_seconds)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch_forecast_hours(self, location: Coordinate, hours: int) -> ForecastHoursResponse:
        """Fetch up to `hours` hourly samples starting from the current hour.

        Args:
            location: Where to forecast.
            hours: Number of hours requested, clamped to 1-240.

        Returns:
            ForecastHoursResponse with the samples the API returned (possibly fewer).

        Raises:
            RuntimeError: If client not initialized.
            ProviderError: If the HTTP request fails or the payload is unreadable.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        hours = max(1, min(MAX_FORECAST_HOURS, hours))
        params = {
            "location.latitude": location.latitude,
            "location.longitude": location.longitude,
            "hours": hours,
            "key": self._config.api_key or "",
        }

        try:
            response = await self._client.get(self._config.weather_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Weather API error: {e.response.text}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Weather API request failed: {e!r}") from e

        try:
            return ForecastHoursResponse.model_validate(response.json())
        except ValueError as e:
            raise ProviderError(f"Weather API returned an unreadable response: {e}") from e
