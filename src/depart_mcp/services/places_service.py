"""Address autocomplete for trip origins.

All errors are caught and logged - the response reports api_available=False.
"""

import logging

from depart_mcp.data.config import ProviderConfig, get_provider_config
from depart_mcp.data.places_client import PlacesClient
from depart_mcp.errors import ProviderError
from depart_mcp.models.responses import SuggestPlacesResponse

logger = logging.getLogger(__name__)

# Shorter queries return nothing without calling the API
MIN_QUERY_LENGTH = 3

_config: ProviderConfig | None = None


def _get_config() -> ProviderConfig:
    """Get or create the provider config singleton."""
    global _config
    if _config is None:
        _config = get_provider_config()
    return _config


async def suggest_places(query: str, limit: int = 8) -> SuggestPlacesResponse:
    """Suggest origin addresses for a partial query.

    Args:
        query: Partial address typed by the user.
        limit: Maximum suggestions to return.

    Returns:
        SuggestPlacesResponse; empty when the query is too short or the API fails.
    """
    query = query.strip()
    if len(query) < MIN_QUERY_LENGTH:
        return SuggestPlacesResponse(suggestions=[], count=0, api_available=True)

    config = _get_config()
    if not config.is_configured:
        logger.debug("No API key configured, cannot fetch place suggestions")
        return SuggestPlacesResponse(suggestions=[], count=0, api_available=False)

    try:
        async with PlacesClient(config) as client:
            suggestions = await client.autocomplete(query)
            logger.debug(f"Fetched {len(suggestions)} place suggestions")
    except ProviderError as e:
        logger.warning(f"Failed to fetch place suggestions: {e}")
        return SuggestPlacesResponse(suggestions=[], count=0, api_available=False)

    suggestions = suggestions[:limit]
    return SuggestPlacesResponse(suggestions=suggestions, count=len(suggestions), api_available=True)


def reset_service() -> None:
    """Reset the service state completely. Useful for testing."""
    global _config
    _config = None
    if hasattr(get_provider_config, "cache_clear"):
        get_provider_config.cache_clear()
