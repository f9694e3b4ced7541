"""
Domain model for the Explorer Service.

Holds the canonical record shapes, the upstream-to-record normalizers, and
the per-kind registry that ties a kind to its table and normalizer. Nothing
in here performs I/O.
"""

from .records import (
    EventRecord,
    Location,
    MovieRecord,
    ResourceKind,
    ResourceRecord,
    ReviewRecord,
    TrailRecord,
    WeatherRecord,
)
from .registry import ResourceRegistry, ResourceSpec, build_default_registry

__all__ = [
    "EventRecord",
    "Location",
    "MovieRecord",
    "ResourceKind",
    "ResourceRecord",
    "ReviewRecord",
    "TrailRecord",
    "WeatherRecord",
    "ResourceRegistry",
    "ResourceSpec",
    "build_default_registry",
]
