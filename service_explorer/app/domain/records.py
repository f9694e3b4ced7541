"""
Canonical record shapes for every cached resource kind.

Each record declares its storage column order once in ``COLUMNS``; inserts,
selects and serialization all follow that tuple rather than attribute
iteration order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, TypeVar


class ResourceKind(str, Enum):
    """Categories of cached, upstream-sourced data."""

    LOCATION = "location"
    WEATHER = "weather"
    REVIEW = "review"
    EVENT = "event"
    MOVIE = "movie"
    TRAIL = "trail"


R = TypeVar("R", bound="ResourceRecord")


class ResourceRecord:
    """Behaviour shared by all per-location resource records."""

    KIND: ClassVar[ResourceKind]
    COLUMNS: ClassVar[Tuple[str, ...]]

    location_id: int
    created_at: int

    def values(self) -> Tuple[Any, ...]:
        """Column values in ``COLUMNS`` order."""
        return tuple(getattr(self, column) for column in self.COLUMNS)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the record to a JSON-friendly dictionary."""
        return {column: getattr(self, column) for column in self.COLUMNS}

    @classmethod
    def from_row(cls: Type[R], row: Mapping[str, Any]) -> R:
        """Rehydrate a record from a storage row, ignoring extra columns."""
        return cls(**{column: row[column] for column in cls.COLUMNS})


@dataclass(frozen=True)
class Location:
    """A geocoded search, the key every other resource hangs off."""

    search_query: str
    formatted_query: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    id: Optional[int] = None

    COLUMNS: ClassVar[Tuple[str, ...]] = ("search_query", "formatted_query", "latitude", "longitude")

    def values(self) -> Tuple[Any, ...]:
        return tuple(getattr(self, column) for column in self.COLUMNS)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {column: getattr(self, column) for column in self.COLUMNS}
        if self.id is not None:
            payload["id"] = self.id
        return payload

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Location":
        return cls(
            search_query=row["search_query"],
            formatted_query=row["formatted_query"],
            latitude=_optional_float(row["latitude"]),
            longitude=_optional_float(row["longitude"]),
            id=row["id"],
        )


@dataclass(frozen=True)
class WeatherRecord(ResourceRecord):
    """Daily forecast summary."""

    KIND: ClassVar[ResourceKind] = ResourceKind.WEATHER
    COLUMNS: ClassVar[Tuple[str, ...]] = ("forecast", "time", "created_at", "location_id")

    forecast: Optional[str]
    time: str
    created_at: int
    location_id: int


@dataclass(frozen=True)
class ReviewRecord(ResourceRecord):
    """Business listing with its rating."""

    KIND: ClassVar[ResourceKind] = ResourceKind.REVIEW
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "name", "image_url", "price", "rating", "url", "created_at", "location_id",
    )

    name: str
    image_url: Optional[str]
    price: Optional[str]
    rating: Optional[float]
    url: Optional[str]
    created_at: int
    location_id: int


@dataclass(frozen=True)
class EventRecord(ResourceRecord):
    """Upcoming meetup event."""

    KIND: ClassVar[ResourceKind] = ResourceKind.EVENT
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "link", "name", "creation_date", "host", "created_at", "location_id",
    )

    link: Optional[str]
    name: Optional[str]
    creation_date: Optional[str]
    host: Optional[str]
    created_at: int
    location_id: int


@dataclass(frozen=True)
class MovieRecord(ResourceRecord):
    """Movie matching the searched city."""

    KIND: ClassVar[ResourceKind] = ResourceKind.MOVIE
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "title", "overview", "average_votes", "total_votes", "image_url",
        "popularity", "released_on", "created_at", "location_id",
    )

    title: str
    overview: Optional[str]
    average_votes: Optional[float]
    total_votes: Optional[int]
    image_url: Optional[str]
    popularity: Optional[float]
    released_on: Optional[str]
    created_at: int
    location_id: int


@dataclass(frozen=True)
class TrailRecord(ResourceRecord):
    """Hiking trail with its latest reported conditions."""

    KIND: ClassVar[ResourceKind] = ResourceKind.TRAIL
    COLUMNS: ClassVar[Tuple[str, ...]] = (
        "name", "location", "length", "stars", "star_votes", "summary",
        "trail_url", "conditions", "condition_date", "condition_time",
        "created_at", "location_id",
    )

    name: str
    location: Optional[str]
    length: Optional[float]
    stars: Optional[float]
    star_votes: Optional[int]
    summary: Optional[str]
    trail_url: Optional[str]
    conditions: Optional[str]
    condition_date: Optional[str]
    condition_time: Optional[str]
    created_at: int
    location_id: int


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
