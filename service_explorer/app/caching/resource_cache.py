"""
Storage-backed resource cache: decides whether stored rows are still usable.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, TYPE_CHECKING

from shared.logging import get_logger

from ..domain.records import ResourceKind, ResourceRecord
from ..domain.registry import ResourceRegistry
from .background import BackgroundWriter
from .ttl_policy import TTLPolicy

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from ..adapters.postgres_store import PostgresStore
    from shared.metrics import MetricsCollector


Clock = Callable[[], int]


def epoch_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class CacheOutcome(str, Enum):
    """Result of evaluating stored rows against the TTL policy."""

    FRESH = "fresh"
    STALE = "stale"
    EMPTY = "empty"


@dataclass(frozen=True)
class CacheEvaluation:
    """Outcome plus the rows that may be served (only set when fresh)."""

    outcome: CacheOutcome
    rows: Tuple[ResourceRecord, ...] = field(default_factory=tuple)

    @property
    def is_fresh(self) -> bool:
        return self.outcome is CacheOutcome.FRESH


class ResourceCache:
    """Reads, evaluates and expires cached resource rows for a location.

    This is the only component that deletes resource rows.
    """

    def __init__(
        self,
        store: "PostgresStore",
        registry: ResourceRegistry,
        ttl_policy: TTLPolicy,
        writer: BackgroundWriter,
        *,
        clock: Optional[Clock] = None,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.store = store
        self.registry = registry
        self.ttl_policy = ttl_policy
        self.writer = writer
        self.metrics = metrics
        self._clock = clock or epoch_millis
        self.logger = get_logger("explorer.resource_cache")

    async def lookup(self, kind: ResourceKind, location_id: int) -> List[ResourceRecord]:
        """Read every stored row of ``kind`` for ``location_id``."""
        spec = self.registry.get(kind)
        return await self.store.select(spec, location_id)

    def evaluate(
        self,
        kind: ResourceKind,
        location_id: int,
        rows: Sequence[ResourceRecord],
    ) -> CacheEvaluation:
        """Classify ``rows`` as fresh, stale or empty.

        A stale result schedules deletion of every row for (kind, location)
        on the background writer and returns without waiting for it.
        """
        if not rows:
            evaluation = CacheEvaluation(CacheOutcome.EMPTY)
        else:
            # One fetch stamps all of its rows with the same created_at
            created_at = rows[0].created_at
            now = self._clock()
            if self.ttl_policy.is_expired(kind, created_at, now):
                self.logger.info(
                    "Cached rows expired",
                    kind=kind.value,
                    location_id=location_id,
                    age_ms=now - created_at,
                    max_age_ms=self.ttl_policy.max_age_ms(kind),
                )
                self._schedule_delete(kind, location_id)
                evaluation = CacheEvaluation(CacheOutcome.STALE)
            else:
                evaluation = CacheEvaluation(CacheOutcome.FRESH, tuple(rows))

        self._record(kind, evaluation.outcome)
        return evaluation

    async def get(self, kind: ResourceKind, location_id: int) -> CacheEvaluation:
        """Lookup followed by evaluate."""
        rows = await self.lookup(kind, location_id)
        return self.evaluate(kind, location_id, rows)

    async def invalidate(self, kind: ResourceKind, location_id: int) -> int:
        """Delete every row for (kind, location) now and return the count."""
        spec = self.registry.get(kind)
        deleted = await self.store.delete(spec, location_id)
        self.logger.info("Cache invalidated", kind=kind.value, location_id=location_id, deleted=deleted)
        return deleted

    def _schedule_delete(self, kind: ResourceKind, location_id: int) -> None:
        spec = self.registry.get(kind)

        async def _delete() -> None:
            await self.store.delete(spec, location_id)

        self.writer.submit((kind, location_id), _delete, name=f"delete_{kind.value}")

    def _record(self, kind: ResourceKind, outcome: CacheOutcome) -> None:
        if not self.metrics:
            return
        self.metrics.increment_counter("cache_lookups_total", kind=kind.value, outcome=outcome.value)
