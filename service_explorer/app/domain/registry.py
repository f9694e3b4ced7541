"""
Typed dispatch table from resource kind to storage table, record type and
normalizer.

SQL for every kind is rendered once when the registry is built and the
identifiers are validated there, so no statement is assembled per request.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Tuple, Type

from shared.errors import ConfigurationError

from .normalizers import (
    normalize_event,
    normalize_movie,
    normalize_review,
    normalize_trail,
    normalize_weather,
)
from .records import (
    EventRecord,
    MovieRecord,
    ResourceKind,
    ResourceRecord,
    ReviewRecord,
    TrailRecord,
    WeatherRecord,
)


_IDENTIFIER_PATTERN = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")
_REQUIRED_COLUMNS = ("created_at", "location_id")

Normalizer = Callable[..., ResourceRecord]


@dataclass(frozen=True)
class ResourceSpec:
    """Everything the cache layer needs to know about one resource kind."""

    kind: ResourceKind
    table: str
    record_type: Type[ResourceRecord]
    normalizer: Normalizer
    select_sql: str = field(init=False)
    insert_sql: str = field(init=False)
    delete_sql: str = field(init=False)

    def __post_init__(self) -> None:
        self._validate()
        columns = self.columns
        placeholders = ", ".join(f"${index}" for index in range(1, len(columns) + 1))
        object.__setattr__(
            self,
            "select_sql",
            f"SELECT {', '.join(columns)} FROM {self.table} WHERE location_id = $1 ORDER BY id ASC",
        )
        object.__setattr__(
            self,
            "insert_sql",
            f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES ({placeholders})",
        )
        object.__setattr__(self, "delete_sql", f"DELETE FROM {self.table} WHERE location_id = $1")

    @property
    def columns(self) -> Tuple[str, ...]:
        return self.record_type.COLUMNS

    def normalize(self, entry: Mapping[str, Any], *, location_id: int, created_at: int) -> ResourceRecord:
        return self.normalizer(entry, location_id=location_id, created_at=created_at)

    def from_row(self, row: Mapping[str, Any]) -> ResourceRecord:
        return self.record_type.from_row(row)

    def _validate(self) -> None:
        if self.kind is ResourceKind.LOCATION:
            raise ConfigurationError("location is resolved separately and is not a registered resource")
        if self.record_type.KIND is not self.kind:
            raise ConfigurationError(
                "record type does not match kind",
                details={"kind": self.kind.value, "record_type": self.record_type.__name__},
            )
        for identifier in (self.table, *self.columns):
            if not _IDENTIFIER_PATTERN.match(identifier):
                raise ConfigurationError("invalid SQL identifier", details={"identifier": identifier})
        missing = [column for column in _REQUIRED_COLUMNS if column not in self.columns]
        if missing:
            raise ConfigurationError(
                "resource columns missing",
                details={"kind": self.kind.value, "missing": missing},
            )


class ResourceRegistry:
    """Lookup of ResourceSpec by kind, complete for every non-location kind."""

    def __init__(self, specs: Iterable[ResourceSpec]):
        self._specs: Dict[ResourceKind, ResourceSpec] = {}
        for spec in specs:
            if spec.kind in self._specs:
                raise ConfigurationError("resource kind registered twice", details={"kind": spec.kind.value})
            self._specs[spec.kind] = spec

        missing = [
            kind.value
            for kind in ResourceKind
            if kind is not ResourceKind.LOCATION and kind not in self._specs
        ]
        if missing:
            raise ConfigurationError("resource kinds not registered", details={"missing": missing})

    def get(self, kind: ResourceKind) -> ResourceSpec:
        try:
            return self._specs[ResourceKind(kind)]
        except (KeyError, ValueError) as exc:
            raise ConfigurationError("unknown resource kind", details={"kind": str(kind)}) from exc

    def kinds(self) -> Tuple[ResourceKind, ...]:
        return tuple(self._specs)

    def __iter__(self):
        return iter(self._specs.values())


def build_default_registry() -> ResourceRegistry:
    """Registry for the five built-in resource kinds."""
    return ResourceRegistry([
        ResourceSpec(ResourceKind.WEATHER, "weathers", WeatherRecord, normalize_weather),
        ResourceSpec(ResourceKind.REVIEW, "yelps", ReviewRecord, normalize_review),
        ResourceSpec(ResourceKind.EVENT, "meetups", EventRecord, normalize_event),
        ResourceSpec(ResourceKind.MOVIE, "movies", MovieRecord, normalize_movie),
        ResourceSpec(ResourceKind.TRAIL, "trails", TrailRecord, normalize_trail),
    ])
