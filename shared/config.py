"""
Shared configuration management for City Explorer Access Layer.
"""

from typing import Dict, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="EXPLORER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Storage
    database_url: str = Field(
        default="postgres://localhost:5432/city_explorer",
        validation_alias=AliasChoices("EXPLORER_DATABASE_URL", "DATABASE_URL"),
    )
    database_min_pool_size: int = 1
    database_max_pool_size: int = 10
    database_command_timeout: float = 30.0

    # Upstream providers
    geocode_api_key: str = Field(default="", validation_alias=AliasChoices("EXPLORER_GEOCODE_API_KEY", "GEOCODE_API_KEY"))
    weather_api_key: str = Field(default="", validation_alias=AliasChoices("EXPLORER_WEATHER_API_KEY", "WEATHER_API_KEY"))
    yelp_api_key: str = Field(default="", validation_alias=AliasChoices("EXPLORER_YELP_API_KEY", "YELP_API_KEY"))
    meetup_api_key: str = Field(default="", validation_alias=AliasChoices("EXPLORER_MEETUP_API_KEY", "MEETUP_API_KEY"))
    movie_api_key: str = Field(default="", validation_alias=AliasChoices("EXPLORER_MOVIE_API_KEY", "MOVIE_API_KEY"))
    trail_api_key: str = Field(default="", validation_alias=AliasChoices("EXPLORER_TRAIL_API_KEY", "TRAIL_API_KEY"))

    geocode_base_url: str = "https://maps.googleapis.com/maps/api/geocode"
    weather_base_url: str = "https://api.darksky.net/forecast"
    yelp_base_url: str = "https://api.yelp.com/v3"
    meetup_base_url: str = "https://api.meetup.com"
    movie_base_url: str = "https://api.themoviedb.org/3"
    trail_base_url: str = "https://www.hikingproject.com/data"

    upstream_timeout_seconds: float = 5.0

    # Background storage writes
    background_max_concurrency: int = 10

    # Cache TTL overrides in seconds (unset means built-in default)
    ttl_weather_seconds: Optional[int] = None
    ttl_review_seconds: Optional[int] = None
    ttl_event_seconds: Optional[int] = None
    ttl_movie_seconds: Optional[int] = None
    ttl_trail_seconds: Optional[int] = None

    def ttl_overrides(self) -> Dict[str, int]:
        """Return configured TTL overrides keyed by resource kind name."""
        overrides = {
            "weather": self.ttl_weather_seconds,
            "review": self.ttl_review_seconds,
            "event": self.ttl_event_seconds,
            "movie": self.ttl_movie_seconds,
            "trail": self.ttl_trail_seconds,
        }
        return {kind: seconds for kind, seconds in overrides.items() if seconds is not None}


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "explorer"
    port: int = Field(default=3000, validation_alias=AliasChoices("EXPLORER_PORT", "PORT"))
    host: str = "0.0.0.0"


def get_config(service_name: str) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name)
