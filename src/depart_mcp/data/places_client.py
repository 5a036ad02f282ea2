import httpx

from depart_mcp.data.config import ProviderConfig
from depart_mcp.errors import ProviderError
from depart_mcp.models.google import AutocompleteResponse
from depart_mcp.models.responses import PlaceSuggestion

# Only street-level results make sense as a trip origin
INCLUDED_PRIMARY_TYPES = ["street_address", "premise", "subpremise"]


class PlacesClient:
    """Async HTTP client for address autocomplete from the Places API.

    Usage:
        async with PlacesClient(config) as client:
            suggestions = await client.autocomplete("350 5th")
    """

    def __init__(self, config: ProviderConfig):
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "PlacesClient":
        """Enter async context - create HTTP client."""
        headers = {
            "X-Goog-FieldMask": (
                "suggestions.placePrediction.placeId,suggestions.placePrediction.text.text"
            ),
        }
        if self._config.api_key:
            headers["X-Goog-Api-Key"] = self._config.api_key
        self._client = httpx.AsyncClient(
            headers=headers, timeout=self._config.places_timeout_seconds
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context - close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def autocomplete(self, query: str) -> list[PlaceSuggestion]:
        """Fetch address suggestions for a partial query.

        Returns:
            Suggestions in API order; query predictions without a place ID are skipped.

        Raises:
            RuntimeError: If client not initialized.
            ProviderError: If the HTTP request fails or the payload is unreadable.
        """
        if not self._client:
            raise RuntimeError("Client not initialized - use 'async with'")

        payload = {
            "input": query.strip(),
            "includedPrimaryTypes": INCLUDED_PRIMARY_TYPES,
            "includedRegionCodes": ["US"],
            "languageCode": "en",
        }

        try:
            response = await self._client.post(self._config.places_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Places API error: {e.response.text}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Places API request failed: {e!r}") from e

        try:
            data = AutocompleteResponse.model_validate(response.json())
        except ValueError as e:
            raise ProviderError(f"Places API returned an unreadable response: {e}") from e

        return [
            PlaceSuggestion(id=s.place_prediction.place_id, label=s.place_prediction.text.text)
            for s in data.suggestions
            if s.place_prediction is not None
        ]
