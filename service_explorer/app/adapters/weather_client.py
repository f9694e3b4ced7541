"""
Dark Sky forecast client.
"""

from typing import Any, Dict, List

from ..domain.records import Location, ResourceKind
from .base import ResourceProvider


class WeatherClient(ResourceProvider):
    """Daily forecasts for a coordinate pair."""

    provider = "weather"
    kind = ResourceKind.WEATHER

    async def fetch(self, location: Location) -> List[Dict[str, Any]]:
        latitude, longitude = self._coordinates(location)
        body = await self._get_json(f"/{self.api_key}/{latitude},{longitude}")
        return self._entries(body, "daily", "data")
