"""
Google Geocoding API client used to resolve free-text searches.
"""

from typing import Any, Dict, List

from shared.errors import ProviderError

from .base import UpstreamClient


_ACCEPTED_STATUSES = {"OK", "ZERO_RESULTS"}


class GeocodeClient(UpstreamClient):
    """Turns a search string into candidate places."""

    provider = "geocode"

    async def fetch(self, query: str) -> List[Dict[str, Any]]:
        """Return geocoding results for ``query``, best match first."""
        body = await self._get_json("/json", params={"address": query, "key": self.api_key})

        status = body.get("status") if isinstance(body, dict) else None
        if status is not None and status not in _ACCEPTED_STATUSES:
            raise ProviderError(
                self.provider,
                f"Geocoding status {status}",
                details={"status": status, "error_message": body.get("error_message")},
            )

        results = body.get("results") if isinstance(body, dict) else None
        return results if isinstance(results, list) else []
