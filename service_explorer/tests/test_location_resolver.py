"""
Unit tests for the location resolver.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_explorer.app.caching import LocationResolver
from shared.errors import NoUpstreamData, ProviderError, UpstreamUnavailable, ValidationError
from shared.test_helpers import InMemoryStore, StubGeocoder, TestDataFactory


class TestLocationResolver:
    """Test cases for LocationResolver."""

    @pytest.fixture
    def store(self):
        return InMemoryStore()

    @pytest.fixture
    def geocoder(self):
        return StubGeocoder(TestDataFactory.create_geocode_results())

    @pytest.fixture
    def resolver(self, store, geocoder):
        return LocationResolver(store, geocoder)

    @pytest.mark.asyncio
    async def test_first_lookup_geocodes_and_stores(self, resolver, store, geocoder):
        """Test an unknown search is geocoded once and stored."""
        location = await resolver.resolve("Seattle, WA")

        assert location.id == 1
        assert location.search_query == "Seattle, WA"
        assert location.formatted_query == "Seattle, WA, USA"
        assert location.latitude == pytest.approx(47.6062095)
        assert location.longitude == pytest.approx(-122.3320708)
        assert geocoder.calls == ["Seattle, WA"]
        assert store.calls["insert_location"] == 1

    @pytest.mark.asyncio
    async def test_second_lookup_served_from_storage(self, resolver, store, geocoder):
        """Test repeated searches return the same stored location."""
        first = await resolver.resolve("Seattle, WA")
        second = await resolver.resolve("Seattle, WA")

        assert first == second
        assert len(geocoder.calls) == 1
        assert store.calls["insert_location"] == 1

    @pytest.mark.asyncio
    async def test_match_is_exact(self, resolver, geocoder):
        """Test a differently cased search is a separate location."""
        await resolver.resolve("Seattle, WA")
        other = await resolver.resolve("seattle, wa")

        assert other.id == 2
        assert geocoder.calls == ["Seattle, WA", "seattle, wa"]

    @pytest.mark.asyncio
    async def test_only_first_result_used(self, resolver):
        """Test extra geocoding results are discarded."""
        location = await resolver.resolve("Seattle, WA")

        assert location.formatted_query == "Seattle, WA, USA"

    @pytest.mark.asyncio
    async def test_no_results_raises(self, store):
        """Test a search with no geocoding results fails and stores nothing."""
        resolver = LocationResolver(store, StubGeocoder([]))

        with pytest.raises(NoUpstreamData) as exc_info:
            await resolver.resolve("Nowhere at all")

        assert exc_info.value.kind == "location"
        assert store.locations == []

    @pytest.mark.asyncio
    async def test_malformed_result_raises_provider_error(self, store):
        """Test a result without geometry is reported as a provider error."""
        resolver = LocationResolver(store, StubGeocoder([{"formatted_address": "Somewhere"}]))

        with pytest.raises(ProviderError):
            await resolver.resolve("Somewhere")

        assert store.locations == []

    @pytest.mark.asyncio
    async def test_geocoder_timeout_propagates(self, store):
        """Test geocoder timeouts reach the caller."""
        resolver = LocationResolver(store, StubGeocoder(error=UpstreamUnavailable("geocode")))

        with pytest.raises(UpstreamUnavailable):
            await resolver.resolve("Seattle, WA")

    @pytest.mark.asyncio
    async def test_empty_search_rejected(self, resolver, geocoder):
        """Test empty search text is a validation error."""
        with pytest.raises(ValidationError):
            await resolver.resolve("")

        assert geocoder.calls == []
