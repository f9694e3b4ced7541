"""
Common async HTTP plumbing for upstream provider clients.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, TYPE_CHECKING

import httpx

from shared.errors import ProviderError, UpstreamUnavailable, ValidationError
from shared.logging import get_logger

from ..domain.records import Location, ResourceKind

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


class UpstreamClient:
    """Lightweight async client for one third-party API.

    Every call is bounded by ``timeout``. A timeout surfaces as
    UpstreamUnavailable, any other transport failure or non-2xx status as
    ProviderError. Nothing is retried.
    """

    provider: str = "upstream"

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        *,
        timeout: float = 5.0,
        metrics: Optional["MetricsCollector"] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.metrics = metrics
        self.logger = get_logger(f"explorer.{self.provider}_client")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _get_json(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        start = time.perf_counter()
        status = "error"
        try:
            response = await self._client.get(path, params=params, headers=headers)
        except httpx.TimeoutException as exc:
            status = "timeout"
            self.logger.error("Upstream request timed out", provider=self.provider, error=str(exc))
            raise UpstreamUnavailable(self.provider) from exc
        except httpx.HTTPError as exc:
            self.logger.error("Upstream request failed", provider=self.provider, error=str(exc))
            raise ProviderError(self.provider, str(exc) or exc.__class__.__name__) from exc
        else:
            status = str(response.status_code)
        finally:
            self._record(status, time.perf_counter() - start)

        if not response.is_success:
            self.logger.error(
                "Upstream returned error status",
                provider=self.provider,
                status_code=response.status_code,
                response=response.text[:500],
            )
            raise ProviderError(
                self.provider,
                f"Unexpected status {response.status_code}",
                details={"status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(self.provider, "Invalid JSON response") from exc

    def _record(self, status: str, duration: float) -> None:
        if not self.metrics:
            return
        self.metrics.increment_counter("upstream_requests_total", provider=self.provider, status=status)
        self.metrics.observe_histogram("upstream_request_duration_seconds", duration, provider=self.provider)


class ResourceProvider(UpstreamClient):
    """Upstream client that produces raw entries for one resource kind."""

    kind: ResourceKind

    async def fetch(self, location: Location) -> List[Dict[str, Any]]:
        """Return the raw upstream entries for ``location`` (possibly empty)."""
        raise NotImplementedError

    def _coordinates(self, location: Location) -> tuple:
        if location.latitude is None or location.longitude is None:
            raise ValidationError(
                "latitude and longitude are required",
                details={"kind": self.kind.value, "location_id": location.id},
            )
        return location.latitude, location.longitude

    def _search_text(self, location: Location) -> str:
        text = location.search_query or location.formatted_query
        if not text:
            raise ValidationError(
                "search_query is required",
                details={"kind": self.kind.value, "location_id": location.id},
            )
        return text

    def _address(self, location: Location) -> str:
        text = location.formatted_query or location.search_query
        if not text:
            raise ValidationError(
                "formatted_query is required",
                details={"kind": self.kind.value, "location_id": location.id},
            )
        return text

    @staticmethod
    def _entries(body: Any, *path: str) -> List[Dict[str, Any]]:
        """Walk ``path`` through a JSON body; missing keys give no entries."""
        node = body
        for key in path:
            if not isinstance(node, dict):
                return []
            node = node.get(key)
        if not isinstance(node, list):
            return []
        return node
