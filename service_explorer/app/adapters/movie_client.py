"""
The Movie Database search client.
"""

from typing import Any, Dict, List

from ..domain.records import Location, ResourceKind
from .base import ResourceProvider


class MovieClient(ResourceProvider):
    """Movies whose metadata matches the searched place."""

    provider = "movie"
    kind = ResourceKind.MOVIE

    async def fetch(self, location: Location) -> List[Dict[str, Any]]:
        body = await self._get_json(
            "/search/movie",
            params={"api_key": self.api_key, "query": self._search_text(location)},
        )
        return self._entries(body, "results")
