"""
Resolve free-text searches to stored Locations.
"""

from typing import TYPE_CHECKING

from shared.errors import NoUpstreamData, ProviderError, ValidationError
from shared.logging import get_logger

from ..domain.normalizers import normalize_location
from ..domain.records import Location, ResourceKind

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..adapters.geocode_client import GeocodeClient
    from ..adapters.postgres_store import PostgresStore


class LocationResolver:
    """Cache-aside lookup for locations, keyed by the exact search text.

    Locations have no TTL: once stored they are returned as-is forever.
    """

    def __init__(self, store: "PostgresStore", geocoder: "GeocodeClient"):
        self.store = store
        self.geocoder = geocoder
        self.logger = get_logger("explorer.location_resolver")

    async def resolve(self, search_text: str) -> Location:
        """Return the Location for ``search_text``, geocoding it on first use."""
        if not search_text:
            raise ValidationError("search text is required")

        # Exact, case-sensitive match
        stored = await self.store.find_location(search_text)
        if stored is not None:
            self.logger.debug("Location served from storage", search_query=search_text, location_id=stored.id)
            return stored

        results = await self.geocoder.fetch(search_text)
        if not results:
            self.logger.warning("Geocoder returned no results", search_query=search_text)
            raise NoUpstreamData(ResourceKind.LOCATION.value, details={"search_query": search_text})

        try:
            location = normalize_location(search_text, results[0])
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise ProviderError(
                ResourceKind.LOCATION.value,
                "Malformed geocoding result",
                details={"search_query": search_text, "error": repr(exc)},
            ) from exc

        saved = await self.store.insert_location(location)
        self.logger.info(
            "Location geocoded and stored",
            search_query=search_text,
            location_id=saved.id,
            discarded_results=len(results) - 1,
        )
        return saved
