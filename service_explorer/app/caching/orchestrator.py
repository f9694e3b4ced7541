"""
Cache-aside orchestration for per-location resources.
"""

from typing import List, Mapping, Optional, TYPE_CHECKING

from shared.errors import ConfigurationError, NoUpstreamData, ProviderError, ValidationError
from shared.logging import get_logger

from ..domain.records import Location, ResourceKind, ResourceRecord
from ..domain.registry import ResourceRegistry, ResourceSpec
from .background import BackgroundWriter
from .resource_cache import Clock, ResourceCache, epoch_millis

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..adapters.base import ResourceProvider
    from ..adapters.postgres_store import PostgresStore


class CacheAsideOrchestrator:
    """Serve a resource kind from storage, refreshing it upstream when needed.

    The orchestrator is the only writer of resource rows. Write-backs go
    through the background writer; a failed write-back is logged there and
    the freshly fetched records are still returned.
    """

    def __init__(
        self,
        cache: ResourceCache,
        store: "PostgresStore",
        providers: Mapping[ResourceKind, "ResourceProvider"],
        registry: ResourceRegistry,
        writer: BackgroundWriter,
        *,
        clock: Optional[Clock] = None,
    ):
        self.cache = cache
        self.store = store
        self.providers = dict(providers)
        self.registry = registry
        self.writer = writer
        self._clock = clock or epoch_millis
        self.logger = get_logger("explorer.orchestrator")

        missing = [kind.value for kind in registry.kinds() if kind not in self.providers]
        if missing:
            raise ConfigurationError("resource kinds without provider", details={"missing": missing})

    async def fetch(self, kind: ResourceKind, location: Location) -> List[ResourceRecord]:
        """Return the records of ``kind`` for ``location``."""
        if location.id is None:
            raise ValidationError("location id is required", details={"kind": kind.value})

        spec = self.registry.get(kind)
        evaluation = await self.cache.get(kind, location.id)
        if evaluation.is_fresh:
            self.logger.debug("Serving cached rows", kind=kind.value, location_id=location.id, count=len(evaluation.rows))
            return list(evaluation.rows)

        raw_entries = await self.providers[kind].fetch(location)
        if not raw_entries:
            self.logger.warning("Upstream returned no data", kind=kind.value, location_id=location.id)
            raise NoUpstreamData(kind.value, details={"location_id": location.id})

        records = self._normalize(spec, raw_entries, location.id)
        self._schedule_write_back(spec, location.id, records)

        self.logger.info(
            "Served fresh upstream data",
            kind=kind.value,
            location_id=location.id,
            previous=evaluation.outcome.value,
            count=len(records),
        )
        return records

    def _normalize(self, spec: ResourceSpec, raw_entries, location_id: int) -> List[ResourceRecord]:
        created_at = self._clock()
        try:
            return [
                spec.normalize(entry, location_id=location_id, created_at=created_at)
                for entry in raw_entries
            ]
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise ProviderError(
                spec.kind.value,
                "Malformed upstream entry",
                details={"location_id": location_id, "error": repr(exc)},
            ) from exc

    def _schedule_write_back(self, spec: ResourceSpec, location_id: int, records: List[ResourceRecord]) -> None:
        async def _write_back() -> None:
            await self.store.insert_many(spec, records)

        self.writer.submit((spec.kind, location_id), _write_back, name=f"write_{spec.kind.value}")
