"""
Unit tests for the upstream provider clients.
"""

import httpx
import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_explorer.app.adapters import (
    GeocodeClient,
    MeetupClient,
    MovieClient,
    TrailClient,
    WeatherClient,
    YelpClient,
)
from service_explorer.app.domain import Location
from shared.errors import ProviderError, UpstreamUnavailable, ValidationError
from shared.metrics import MetricsCollector
from shared.test_helpers import TestDataFactory


def json_transport(payload, status_code=200, seen=None):
    """MockTransport answering every request with ``payload``."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


class TestUpstreamClients:
    """Test cases for provider clients."""

    @pytest.fixture
    def location(self):
        return TestDataFactory.create_location()

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("explorer-test")

    @pytest.mark.asyncio
    async def test_geocode_request_and_results(self, metrics):
        """Test the address and key are sent and results returned."""
        seen = []
        payload = {"status": "OK", "results": TestDataFactory.create_geocode_results()}
        client = GeocodeClient(
            "https://maps.googleapis.com/maps/api/geocode",
            "geo-key",
            metrics=metrics,
            transport=json_transport(payload, seen=seen),
        )

        results = await client.fetch("Seattle, WA")
        await client.close()

        assert results[0]["formatted_address"] == "Seattle, WA, USA"
        request = seen[0]
        assert request.url.path == "/maps/api/geocode/json"
        assert request.url.params["address"] == "Seattle, WA"
        assert request.url.params["key"] == "geo-key"
        assert metrics.sample("upstream_requests_total", provider="geocode", status="200") == 1.0

    @pytest.mark.asyncio
    async def test_geocode_zero_results(self):
        """Test ZERO_RESULTS is an empty list, not an error."""
        client = GeocodeClient("https://geo.test", transport=json_transport({"status": "ZERO_RESULTS", "results": []}))

        assert await client.fetch("Atlantis") == []

    @pytest.mark.asyncio
    async def test_geocode_denied_status(self):
        """Test non-OK geocoding statuses are provider errors."""
        payload = {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."}
        client = GeocodeClient("https://geo.test", transport=json_transport(payload))

        with pytest.raises(ProviderError):
            await client.fetch("Seattle, WA")

    @pytest.mark.asyncio
    async def test_weather_path_and_entries(self, location):
        """Test coordinates go in the path and daily data is returned."""
        seen = []
        payload = {"daily": {"data": TestDataFactory.create_weather_days()}}
        client = WeatherClient(
            "https://api.darksky.net/forecast",
            "sky-key",
            transport=json_transport(payload, seen=seen),
        )

        entries = await client.fetch(location)

        assert len(entries) == 3
        assert seen[0].url.path == "/forecast/sky-key/47.6062095,-122.3320708"

    @pytest.mark.asyncio
    async def test_weather_requires_coordinates(self):
        """Test a location without coordinates is rejected before any call."""
        seen = []
        client = WeatherClient("https://weather.test", "k", transport=json_transport({}, seen=seen))
        location = Location("Seattle, WA", None, None, None, id=1)

        with pytest.raises(ValidationError):
            await client.fetch(location)

        assert seen == []

    @pytest.mark.asyncio
    async def test_yelp_bearer_and_search_text(self, location):
        """Test Yelp gets the search text and a bearer token."""
        seen = []
        payload = {"businesses": TestDataFactory.create_businesses()}
        client = YelpClient("https://api.yelp.com/v3", "yelp-key", transport=json_transport(payload, seen=seen))

        entries = await client.fetch(location)

        assert [entry["name"] for entry in entries] == ["Pike Place Chowder", "Biscuit Bitch"]
        assert seen[0].url.path == "/v3/businesses/search"
        assert seen[0].url.params["location"] == "Seattle, WA"
        assert seen[0].headers["Authorization"] == "Bearer yelp-key"

    @pytest.mark.asyncio
    async def test_meetup_uses_formatted_address(self, location):
        """Test Meetup is queried by the formatted address."""
        seen = []
        payload = {"events": TestDataFactory.create_events()}
        client = MeetupClient("https://api.meetup.com", "meetup-key", transport=json_transport(payload, seen=seen))

        entries = await client.fetch(location)

        assert len(entries) == 2
        assert seen[0].url.path == "/find/upcoming_events"
        assert seen[0].url.params["location"] == "Seattle, WA, USA"
        assert seen[0].url.params["sign"] == "true"

    @pytest.mark.asyncio
    async def test_movie_query(self, location):
        """Test TMDB is searched by the search text."""
        seen = []
        payload = {"results": TestDataFactory.create_movies()}
        client = MovieClient("https://api.themoviedb.org/3", "tmdb-key", transport=json_transport(payload, seen=seen))

        entries = await client.fetch(location)

        assert entries[0]["title"] == "Sleepless in Seattle"
        assert seen[0].url.path == "/3/search/movie"
        assert seen[0].url.params["query"] == "Seattle, WA"
        assert seen[0].url.params["api_key"] == "tmdb-key"

    @pytest.mark.asyncio
    async def test_trail_query(self, location):
        """Test trail search sends coordinates and distance."""
        seen = []
        payload = {"trails": TestDataFactory.create_trails()}
        client = TrailClient(
            "https://www.hikingproject.com/data",
            "trail-key",
            max_distance=25,
            transport=json_transport(payload, seen=seen),
        )

        entries = await client.fetch(location)

        assert len(entries) == 2
        assert seen[0].url.path == "/data/get-trails"
        assert seen[0].url.params["maxDistance"] == "25"
        assert seen[0].url.params["lat"] == "47.6062095"

    @pytest.mark.asyncio
    async def test_missing_entries_key_is_empty(self, location):
        """Test a body without the entries key yields no entries."""
        client = TrailClient("https://trails.test", "k", transport=json_transport({"success": 1}))

        assert await client.fetch(location) == []

    @pytest.mark.asyncio
    async def test_timeout_is_upstream_unavailable(self, location, metrics):
        """Test transport timeouts map to UpstreamUnavailable."""

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = MovieClient("https://movies.test", "k", metrics=metrics, transport=httpx.MockTransport(handler))

        with pytest.raises(UpstreamUnavailable) as exc_info:
            await client.fetch(location)

        assert exc_info.value.code == "UPSTREAM_UNAVAILABLE"
        assert metrics.sample("upstream_requests_total", provider="movie", status="timeout") == 1.0

    @pytest.mark.asyncio
    async def test_connection_error_is_provider_error(self, location):
        """Test transport failures map to ProviderError."""

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = YelpClient("https://yelp.test", "k", transport=httpx.MockTransport(handler))

        with pytest.raises(ProviderError) as exc_info:
            await client.fetch(location)

        assert not isinstance(exc_info.value, UpstreamUnavailable)

    @pytest.mark.asyncio
    async def test_error_status_is_provider_error(self, location, metrics):
        """Test non-2xx responses map to ProviderError."""
        client = MeetupClient(
            "https://meetup.test",
            "k",
            metrics=metrics,
            transport=json_transport({"errors": []}, status_code=500),
        )

        with pytest.raises(ProviderError) as exc_info:
            await client.fetch(location)

        assert exc_info.value.details["status_code"] == 500
        assert metrics.sample("upstream_requests_total", provider="meetup", status="500") == 1.0

    @pytest.mark.asyncio
    async def test_invalid_json_is_provider_error(self, location):
        """Test an unparseable body maps to ProviderError."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>"))
        client = WeatherClient("https://weather.test", "k", transport=transport)

        with pytest.raises(ProviderError):
            await client.fetch(location)
