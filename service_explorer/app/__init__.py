"""
Explorer Service package for the City Explorer Access Layer.

The service fronts browser requests for a searched place and answers with
data aggregated from third-party APIs, cached in PostgreSQL:

- Locations: geocoded once per distinct search text, kept forever
- Resources: weather, reviews, events, movies, trails, kept per location
  until their kind's TTL runs out

Structure:
- app.main: FastAPI app, routes, and dependency wiring.
- app.adapters: HTTP clients for the providers and the PostgreSQL store.
- app.caching: TTL policy, resource cache, cache-aside orchestrator,
  location resolver, background writer.
- app.domain: Record shapes, normalizers, and the per-kind registry.
"""
