"""
Explorer caching package.

Storage-backed cache-aside layer: a TTL policy per resource kind, the
resource cache that classifies stored rows, the orchestrator that refreshes
them from upstream, the location resolver, and the background writer that
carries deletes and write-backs off the request path.
"""

from .background import BackgroundWriter
from .location_resolver import LocationResolver
from .orchestrator import CacheAsideOrchestrator
from .resource_cache import CacheEvaluation, CacheOutcome, ResourceCache, epoch_millis
from .ttl_policy import DEFAULT_MAX_AGES, TTLPolicy

__all__ = [
    "BackgroundWriter",
    "LocationResolver",
    "CacheAsideOrchestrator",
    "CacheEvaluation",
    "CacheOutcome",
    "ResourceCache",
    "epoch_millis",
    "DEFAULT_MAX_AGES",
    "TTLPolicy",
]
