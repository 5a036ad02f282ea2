from depart_mcp.app import mcp
from depart_mcp.models.responses import SuggestPlacesResponse
from depart_mcp.services.places_service import suggest_places as _suggest_places


@mcp.tool()
async def suggest_places(query: str, limit: int = 8) -> SuggestPlacesResponse:
    """Suggest street addresses in the US for a partial origin address.

    Use a suggestion's `id` as `selected_place_id` in estimate_departure to skip
    geocoding of the free-text address.

    Args:
        query: Partial address (at least 3 characters, e.g. "350 5th Ave").
        limit: Maximum suggestions to return (1-10, default: 8).

    Returns:
        SuggestPlacesResponse with {id, label} suggestions.
    """
    limit = max(1, min(10, limit))

    return await _suggest_places(query=query, limit=limit)
