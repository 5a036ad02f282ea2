import logging
from datetime import datetime

from depart_mcp.data.geocoding_client import GeocodingClient
from depart_mcp.data.routes_client import RoutesClient
from depart_mcp.errors import ProviderError
from depart_mcp.models.trip import Coordinate, Origin

logger = logging.getLogger(__name__)


def qualify_address(address: str, region_hint: str) -> str:
    """Append the service region (", NY") unless the address already mentions it."""
    address = address.strip()
    if region_hint and region_hint.lower() not in address.lower():
        return f"{address}, {region_hint}"
    return address


class GoogleTravelDurationProvider:
    """TravelDurationProvider backed by the Routes and Geocoding clients.

    Origins with a place reference go to the Routes API as-is. Free-text
    origins are geocoded first; the coordinate is remembered for the lifetime
    of this provider, so one search geocodes at most once.

    The clients must already be open (inside their `async with` blocks).
    """

    def __init__(self, routes: RoutesClient, geocoder: GeocodingClient, region_hint: str = "NY"):
        self._routes = routes
        self._geocoder = geocoder
        self._region_hint = region_hint
        self._resolved: dict[str, Coordinate] = {}

    async def _resolve_address(self, address: str) -> Coordinate:
        query = qualify_address(address, self._region_hint)
        if query not in self._resolved:
            self._resolved[query] = await self._geocoder.resolve(query)
            logger.debug(f"Geocoded origin '{query}' to {self._resolved[query]}")
        return self._resolved[query]

    async def duration(self, departure: datetime, origin: Origin, destination: Coordinate) -> int:
        if origin.has_place_id:
            return await self._routes.compute_duration_minutes(
                departure, destination, origin_place_id=origin.place_id
            )

        if not origin.address_text:
            raise ProviderError("Cannot geocode empty address")

        location = await self._resolve_address(origin.address_text)
        return await self._routes.compute_duration_minutes(
            departure, destination, origin_location=location
        )
