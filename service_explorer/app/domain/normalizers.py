"""
Map raw upstream entries into canonical records.

Normalizers are pure: they take one raw entry plus the fetch stamp and never
touch storage. Missing required keys raise ``KeyError``; the orchestrator
reports those as provider errors.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .records import (
    EventRecord,
    Location,
    MovieRecord,
    ReviewRecord,
    TrailRecord,
    WeatherRecord,
    _optional_float,
)


POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"


def normalize_location(search_query: str, result: Dict[str, Any]) -> Location:
    """Build a Location from the first geocoding result."""
    coordinates = result["geometry"]["location"]
    return Location(
        search_query=search_query,
        formatted_query=result.get("formatted_address"),
        latitude=float(coordinates["lat"]),
        longitude=float(coordinates["lng"]),
    )


def normalize_weather(day: Dict[str, Any], *, location_id: int, created_at: int) -> WeatherRecord:
    return WeatherRecord(
        forecast=day.get("summary"),
        time=format_day(day["time"]),
        created_at=created_at,
        location_id=location_id,
    )


def normalize_review(business: Dict[str, Any], *, location_id: int, created_at: int) -> ReviewRecord:
    return ReviewRecord(
        name=business["name"],
        image_url=business.get("image_url"),
        price=business.get("price"),
        rating=_optional_float(business.get("rating")),
        url=business.get("url"),
        created_at=created_at,
        location_id=location_id,
    )


def normalize_event(event: Dict[str, Any], *, location_id: int, created_at: int) -> EventRecord:
    group = event.get("group") or {}
    created = group.get("created")
    return EventRecord(
        link=event.get("link"),
        name=group.get("name"),
        # Meetup reports group creation in epoch milliseconds
        creation_date=format_day(created / 1000) if created is not None else None,
        host=group.get("who"),
        created_at=created_at,
        location_id=location_id,
    )


def normalize_movie(movie: Dict[str, Any], *, location_id: int, created_at: int) -> MovieRecord:
    poster_path = movie.get("poster_path")
    return MovieRecord(
        title=movie["title"],
        overview=movie.get("overview"),
        average_votes=_optional_float(movie.get("vote_average")),
        total_votes=_optional_int(movie.get("vote_count")),
        image_url=f"{POSTER_BASE_URL}{poster_path}" if poster_path else None,
        popularity=_optional_float(movie.get("popularity")),
        released_on=movie.get("release_date"),
        created_at=created_at,
        location_id=location_id,
    )


def normalize_trail(trail: Dict[str, Any], *, location_id: int, created_at: int) -> TrailRecord:
    # conditionDate looks like "2018-07-21 20:58:33"
    condition_date = trail.get("conditionDate") or ""
    return TrailRecord(
        name=trail["name"],
        location=trail.get("location"),
        length=_optional_float(trail.get("length")),
        stars=_optional_float(trail.get("stars")),
        star_votes=_optional_int(trail.get("starVotes")),
        summary=trail.get("summary"),
        trail_url=trail.get("url"),
        conditions=trail.get("conditionDetails"),
        condition_date=condition_date[:10] or None,
        condition_time=condition_date[11:] or None,
        created_at=created_at,
        location_id=location_id,
    )


def format_day(epoch_seconds: float) -> str:
    """Render an epoch timestamp as ``"Www Mmm DD YYYY"`` in UTC."""
    moment = datetime.fromtimestamp(float(epoch_seconds), tz=timezone.utc)
    return moment.strftime("%a %b %d %Y")


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
