"""
Explorer service for City Explorer Access Layer.
"""

from typing import Any, Dict, List, Mapping, Optional

from fastapi import Depends, Query

from shared.base_service import BaseService
from shared.errors import ValidationError

from .adapters import (
    GeocodeClient,
    MeetupClient,
    MovieClient,
    PostgresStore,
    ResourceProvider,
    TrailClient,
    WeatherClient,
    YelpClient,
)
from .caching import (
    BackgroundWriter,
    CacheAsideOrchestrator,
    LocationResolver,
    ResourceCache,
    TTLPolicy,
)
from .caching.resource_cache import Clock
from .domain import Location, ResourceKind, build_default_registry


# Route paths the browser client calls
RESOURCE_ROUTES: Dict[str, ResourceKind] = {
    "/weather": ResourceKind.WEATHER,
    "/yelp": ResourceKind.REVIEW,
    "/meetups": ResourceKind.EVENT,
    "/movies": ResourceKind.MOVIE,
    "/trails": ResourceKind.TRAIL,
}


def location_from_query(
    id: int = Query(..., alias="data[id]"),
    latitude: Optional[float] = Query(None, alias="data[latitude]"),
    longitude: Optional[float] = Query(None, alias="data[longitude]"),
    search_query: Optional[str] = Query(None, alias="data[search_query]"),
    formatted_query: Optional[str] = Query(None, alias="data[formatted_query]"),
) -> Location:
    """Build the Location parameter bag sent by the browser client."""
    return Location(
        search_query=search_query or "",
        formatted_query=formatted_query,
        latitude=latitude,
        longitude=longitude,
        id=id,
    )


class ExplorerService(BaseService):
    """Explorer service implementation.

    Collaborators can be injected for tests; anything not given is built
    from configuration.
    """

    def __init__(
        self,
        *,
        store: Optional[PostgresStore] = None,
        geocoder: Optional[GeocodeClient] = None,
        providers: Optional[Mapping[ResourceKind, ResourceProvider]] = None,
        clock: Optional[Clock] = None,
    ):
        super().__init__("explorer")
        self.registry = build_default_registry()
        self.ttl_policy = TTLPolicy.from_overrides(self.config.ttl_overrides())

        self.store = store or PostgresStore(
            self.config.database_url,
            min_size=self.config.database_min_pool_size,
            max_size=self.config.database_max_pool_size,
            command_timeout=self.config.database_command_timeout,
        )
        self.geocoder = geocoder or GeocodeClient(
            self.config.geocode_base_url,
            self.config.geocode_api_key,
            timeout=self.config.upstream_timeout_seconds,
            metrics=self.metrics,
        )
        self.providers = dict(providers) if providers is not None else self._build_providers()

        self.writer = BackgroundWriter(self.config.background_max_concurrency, metrics=self.metrics)
        self.resource_cache = ResourceCache(
            self.store,
            self.registry,
            self.ttl_policy,
            self.writer,
            clock=clock,
            metrics=self.metrics,
        )
        self.orchestrator = CacheAsideOrchestrator(
            self.resource_cache,
            self.store,
            self.providers,
            self.registry,
            self.writer,
            clock=clock,
        )
        self.resolver = LocationResolver(self.store, self.geocoder)

        @self.app.on_event("startup")
        async def _startup():
            await self.store.start()

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.writer.drain()
            await self.geocoder.close()
            for provider in self.providers.values():
                await provider.close()
            await self.store.stop()

        self._setup_explorer_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.explorer_service = self

    def _build_providers(self) -> Dict[ResourceKind, ResourceProvider]:
        """Construct one upstream client per resource kind from config."""
        config = self.config
        options = {"timeout": config.upstream_timeout_seconds, "metrics": self.metrics}
        clients: List[ResourceProvider] = [
            WeatherClient(config.weather_base_url, config.weather_api_key, **options),
            YelpClient(config.yelp_base_url, config.yelp_api_key, **options),
            MeetupClient(config.meetup_base_url, config.meetup_api_key, **options),
            MovieClient(config.movie_base_url, config.movie_api_key, **options),
            TrailClient(config.trail_base_url, config.trail_api_key, **options),
        ]
        return {client.kind: client for client in clients}

    async def _check_dependencies(self) -> Dict[str, str]:
        """Report PostgreSQL reachability."""
        healthy = await self.store.health_check()
        return {"postgres": "ok" if healthy else "error"}

    def _setup_explorer_routes(self):
        """Set up explorer-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "explorer",
                "message": "City Explorer Access Layer - Explorer API",
                "version": "1.0.0",
                "resources": sorted(RESOURCE_ROUTES),
            }

        @self.app.get("/location")
        async def get_location(data: str = Query(..., min_length=1)):
            """Resolve a free-text search to a stored, geocoded location."""
            location = await self.resolver.resolve(data)
            return location.to_dict()

        for path, kind in RESOURCE_ROUTES.items():
            self.app.add_api_route(
                path,
                self._resource_endpoint(kind),
                methods=["GET"],
                name=f"get_{kind.value}",
                summary=f"Cached {kind.value} records for a location",
            )

        @self.app.delete("/cache/{kind}")
        async def invalidate_cache(kind: ResourceKind, location_id: int = Query(...)):
            """Drop cached rows so the next request refreshes from upstream."""
            if kind is ResourceKind.LOCATION:
                raise ValidationError("locations are never cached with a TTL", details={"kind": kind.value})
            deleted = await self.resource_cache.invalidate(kind, location_id)
            return {"kind": kind.value, "location_id": location_id, "deleted": deleted}

    def _resource_endpoint(self, kind: ResourceKind):
        async def endpoint(location: Location = Depends(location_from_query)) -> List[Dict[str, Any]]:
            records = await self.orchestrator.fetch(kind, location)
            return [record.to_dict() for record in records]

        return endpoint


def create_app(**kwargs):
    """Create FastAPI application."""
    service = ExplorerService(**kwargs)
    return service.app


if __name__ == "__main__":
    service = ExplorerService()
    service.run()
