"""
Yelp Fusion business search client.
"""

from typing import Any, Dict, List

from ..domain.records import Location, ResourceKind
from .base import ResourceProvider


class YelpClient(ResourceProvider):
    """Businesses and ratings near a searched place."""

    provider = "yelp"
    kind = ResourceKind.REVIEW

    async def fetch(self, location: Location) -> List[Dict[str, Any]]:
        body = await self._get_json(
            "/businesses/search",
            params={"location": self._search_text(location)},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        return self._entries(body, "businesses")
