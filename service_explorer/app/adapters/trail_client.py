"""
Hiking Project trails client.
"""

from typing import Any, Dict, List

from ..domain.records import Location, ResourceKind
from .base import ResourceProvider


class TrailClient(ResourceProvider):
    """Trails and their reported conditions near a coordinate pair."""

    provider = "trail"
    kind = ResourceKind.TRAIL

    def __init__(self, *args, max_distance: int = 10, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.max_distance = max_distance

    async def fetch(self, location: Location) -> List[Dict[str, Any]]:
        latitude, longitude = self._coordinates(location)
        body = await self._get_json(
            "/get-trails",
            params={
                "lat": latitude,
                "lon": longitude,
                "maxDistance": self.max_distance,
                "key": self.api_key,
            },
        )
        return self._entries(body, "trails")
