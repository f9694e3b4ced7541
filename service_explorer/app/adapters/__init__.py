"""
Adapters package for the Explorer Service.

Contains HTTP client wrappers for the third-party providers (geocoding,
weather, reviews, events, movies, trails) and the PostgreSQL store. These
adapters encapsulate:

- Base URLs, credentials and request shapes
- Timeouts
- Error handling that maps to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .base import ResourceProvider, UpstreamClient
from .geocode_client import GeocodeClient
from .meetup_client import MeetupClient
from .movie_client import MovieClient
from .postgres_store import PostgresStore
from .trail_client import TrailClient
from .weather_client import WeatherClient
from .yelp_client import YelpClient

__all__ = [
    "ResourceProvider",
    "UpstreamClient",
    "GeocodeClient",
    "MeetupClient",
    "MovieClient",
    "PostgresStore",
    "TrailClient",
    "WeatherClient",
    "YelpClient",
]
