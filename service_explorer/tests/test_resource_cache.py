"""
Unit tests for the resource cache.
"""

from datetime import timedelta

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_explorer.app.caching import (
    BackgroundWriter,
    CacheOutcome,
    ResourceCache,
    TTLPolicy,
)
from service_explorer.app.domain import ResourceKind, WeatherRecord, ReviewRecord, build_default_registry
from shared.metrics import MetricsCollector
from shared.test_helpers import FakeClock, InMemoryStore


def weather_rows(created_at, location_id=1, count=3):
    return [
        WeatherRecord(forecast=f"Day {index}", time="Sat Jul 21 2018", created_at=created_at, location_id=location_id)
        for index in range(count)
    ]


class TestResourceCache:
    """Test cases for ResourceCache."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def store(self):
        return InMemoryStore()

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("explorer-test")

    @pytest.fixture
    def writer(self, metrics):
        return BackgroundWriter(4, metrics=metrics)

    @pytest.fixture
    def cache(self, store, writer, clock, metrics):
        return ResourceCache(
            store,
            build_default_registry(),
            TTLPolicy(),
            writer,
            clock=clock,
            metrics=metrics,
        )

    @pytest.mark.asyncio
    async def test_empty(self, cache, store, writer, metrics):
        """Test no rows evaluates to EMPTY without a delete."""
        evaluation = await cache.get(ResourceKind.WEATHER, 1)

        assert evaluation.outcome is CacheOutcome.EMPTY
        assert evaluation.rows == ()
        assert writer.pending == 0
        assert metrics.sample("cache_lookups_total", kind="weather", outcome="empty") == 1.0

    @pytest.mark.asyncio
    async def test_fresh_rows_are_returned(self, cache, store, clock, writer):
        """Test rows within the max age are served in stored order."""
        rows = weather_rows(clock.now_ms)
        store.seed(ResourceKind.WEATHER, rows)
        clock.advance(seconds=10)

        evaluation = await cache.get(ResourceKind.WEATHER, 1)

        assert evaluation.is_fresh
        assert list(evaluation.rows) == rows
        assert writer.pending == 0

    @pytest.mark.asyncio
    async def test_stale_rows_are_deleted_in_background(self, cache, store, clock, writer, metrics):
        """Test expired rows are not returned and get deleted."""
        store.seed(ResourceKind.WEATHER, weather_rows(clock.now_ms))
        clock.advance(seconds=20)

        evaluation = await cache.get(ResourceKind.WEATHER, 1)

        assert evaluation.outcome is CacheOutcome.STALE
        assert evaluation.rows == ()
        assert writer.pending == 1

        await writer.drain()

        assert store.stored(ResourceKind.WEATHER, 1) == []
        assert store.calls["delete"] == 1
        assert metrics.sample("cache_lookups_total", kind="weather", outcome="stale") == 1.0
        assert metrics.sample("background_operations_total", operation="delete_weather", status="ok") == 1.0

    @pytest.mark.asyncio
    async def test_staleness_uses_first_row(self, cache, store, clock):
        """Test the first row's created_at decides freshness."""
        created = clock.now_ms
        store.seed(ResourceKind.REVIEW, [
            ReviewRecord("Old", None, None, 4.0, None, created, 1),
            ReviewRecord("New", None, None, 4.0, None, created + 86_400_000, 1),
        ])
        clock.advance(hours=25)

        evaluation = await cache.get(ResourceKind.REVIEW, 1)

        assert evaluation.outcome is CacheOutcome.STALE

    @pytest.mark.asyncio
    async def test_rows_scoped_to_location(self, cache, store, clock):
        """Test rows of another location are never served."""
        store.seed(ResourceKind.WEATHER, weather_rows(clock.now_ms, location_id=2))

        evaluation = await cache.get(ResourceKind.WEATHER, 1)

        assert evaluation.outcome is CacheOutcome.EMPTY

    @pytest.mark.asyncio
    async def test_kind_without_max_age_never_stale(self, store, writer, clock):
        """Test a kind missing from the policy is always served as fresh."""
        cache = ResourceCache(
            store,
            build_default_registry(),
            TTLPolicy({ResourceKind.REVIEW: timedelta(hours=1)}),
            writer,
            clock=clock,
        )
        store.seed(ResourceKind.WEATHER, weather_rows(clock.now_ms))
        clock.advance(days=3650)

        evaluation = await cache.get(ResourceKind.WEATHER, 1)

        assert evaluation.outcome is CacheOutcome.FRESH
        assert len(evaluation.rows) == 3
        assert writer.pending == 0
        assert store.calls["delete"] == 0

    @pytest.mark.asyncio
    async def test_invalidate(self, cache, store, clock):
        """Test invalidate removes rows immediately."""
        store.seed(ResourceKind.WEATHER, weather_rows(clock.now_ms))

        deleted = await cache.invalidate(ResourceKind.WEATHER, 1)

        assert deleted == 3
        assert store.stored(ResourceKind.WEATHER, 1) == []

    @pytest.mark.asyncio
    async def test_storage_error_propagates_from_lookup(self, cache, store):
        """Test select failures reach the caller."""
        from shared.errors import StorageError

        store.fail_on["select"] = StorageError("select", "connection refused")

        with pytest.raises(StorageError):
            await cache.get(ResourceKind.WEATHER, 1)
