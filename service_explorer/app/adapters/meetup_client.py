"""
Meetup upcoming events client.
"""

from typing import Any, Dict, List

from ..domain.records import Location, ResourceKind
from .base import ResourceProvider


class MeetupClient(ResourceProvider):
    """Upcoming events around a formatted address."""

    provider = "meetup"
    kind = ResourceKind.EVENT

    async def fetch(self, location: Location) -> List[Dict[str, Any]]:
        body = await self._get_json(
            "/find/upcoming_events",
            params={
                "location": self._address(location),
                "sign": "true",
                "key": self.api_key,
            },
        )
        return self._entries(body, "events")
