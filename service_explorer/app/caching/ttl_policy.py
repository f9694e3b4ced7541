"""
Maximum age per resource kind.
"""

from datetime import timedelta
from typing import Dict, Mapping, Optional

from ..domain.records import ResourceKind


DEFAULT_MAX_AGES: Dict[ResourceKind, timedelta] = {
    ResourceKind.WEATHER: timedelta(seconds=15),
    ResourceKind.REVIEW: timedelta(hours=24),
    ResourceKind.MOVIE: timedelta(days=30),
    ResourceKind.EVENT: timedelta(hours=6),
    ResourceKind.TRAIL: timedelta(days=7),
}


class TTLPolicy:
    """Pure lookup from kind to maximum age. Locations never expire."""

    def __init__(self, max_ages: Optional[Mapping[ResourceKind, timedelta]] = None):
        ages = dict(DEFAULT_MAX_AGES if max_ages is None else max_ages)
        ages.pop(ResourceKind.LOCATION, None)
        self._max_ages = ages

    @classmethod
    def from_overrides(cls, overrides_seconds: Mapping[str, int]) -> "TTLPolicy":
        """Defaults with per-kind overrides given in seconds."""
        ages = dict(DEFAULT_MAX_AGES)
        for kind_name, seconds in overrides_seconds.items():
            ages[ResourceKind(kind_name)] = timedelta(seconds=seconds)
        return cls(ages)

    def max_age(self, kind: ResourceKind) -> Optional[timedelta]:
        """Maximum age for ``kind``, or None when it never expires."""
        return self._max_ages.get(kind)

    def max_age_ms(self, kind: ResourceKind) -> Optional[int]:
        age = self.max_age(kind)
        if age is None:
            return None
        return int(age.total_seconds() * 1000)

    def is_expired(self, kind: ResourceKind, created_at_ms: int, now_ms: int) -> bool:
        """True when data created at ``created_at_ms`` is older than allowed."""
        limit = self.max_age_ms(kind)
        if limit is None:
            return False
        return now_ms - created_at_ms > limit
