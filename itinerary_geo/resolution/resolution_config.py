"""
Configuration for the resolution module.

Groups the resolver's tunables: batch size and inter-batch delay (tuned to
the geocoding provider's rate limits), venue cache bounds, retry attempts,
and the neutral geographic centre used when nothing else resolves.
"""

from dataclasses import dataclass
from typing import Optional

from ..config.config_module import get_typed_config


@dataclass
class ResolverSettings:
    """Tunables for CoordinateResolver."""

    # Concurrent resolutions per batch
    batch_size: int = 5

    # Pause between batches, in milliseconds
    batch_delay_ms: int = 200

    # Venue cache capacity (oldest entries evicted first)
    max_venue_entries: int = 1000

    # Optional venue entry lifetime; None keeps entries for the session
    venue_ttl_seconds: Optional[float] = None

    # Attempts per geocode for transient failures (1 = no retry)
    geocode_attempts: int = 2

    # Base wait for exponential backoff between attempts, in seconds
    retry_wait_seconds: float = 0.5

    # Neutral geographic centre for the last-resort fallback
    fallback_lat: float = 0.0
    fallback_lng: float = 0.0

    def __post_init__(self):
        """Validate configuration values."""
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")

        if self.batch_delay_ms < 0:
            raise ValueError(f"batch_delay_ms cannot be negative, got {self.batch_delay_ms}")

        if self.max_venue_entries < 1:
            raise ValueError(
                f"max_venue_entries must be at least 1, got {self.max_venue_entries}"
            )

        if self.venue_ttl_seconds is not None and self.venue_ttl_seconds <= 0:
            raise ValueError(
                f"venue_ttl_seconds must be positive or None, got {self.venue_ttl_seconds}"
            )

        if self.geocode_attempts < 1:
            raise ValueError(
                f"geocode_attempts must be at least 1, got {self.geocode_attempts}"
            )

        if self.retry_wait_seconds < 0:
            raise ValueError(
                f"retry_wait_seconds cannot be negative, got {self.retry_wait_seconds}"
            )

        if not -90 <= self.fallback_lat <= 90:
            raise ValueError(f"Invalid fallback latitude: {self.fallback_lat}")
        if not -180 <= self.fallback_lng <= 180:
            raise ValueError(f"Invalid fallback longitude: {self.fallback_lng}")

    @property
    def batch_delay_seconds(self) -> float:
        return self.batch_delay_ms / 1000.0

    @classmethod
    def from_env(cls) -> "ResolverSettings":
        """
        Build settings from environment variables, keeping defaults for
        anything unset.

        Raises:
            ConfigError: If a variable holds a non-numeric value
            ValueError: If a value is out of range
        """
        ttl = get_typed_config("RESOLVER_VENUE_CACHE_TTL_SECONDS", 0.0, float)
        return cls(
            batch_size=get_typed_config("RESOLVER_BATCH_SIZE", cls.batch_size, int),
            batch_delay_ms=get_typed_config("RESOLVER_BATCH_DELAY_MS", cls.batch_delay_ms, int),
            max_venue_entries=get_typed_config(
                "RESOLVER_VENUE_CACHE_SIZE", cls.max_venue_entries, int
            ),
            venue_ttl_seconds=ttl if ttl > 0 else None,
            geocode_attempts=get_typed_config(
                "RESOLVER_GEOCODE_ATTEMPTS", cls.geocode_attempts, int
            ),
            retry_wait_seconds=get_typed_config(
                "RESOLVER_RETRY_WAIT_SECONDS", cls.retry_wait_seconds, float
            ),
            fallback_lat=get_typed_config("RESOLVER_FALLBACK_LAT", cls.fallback_lat, float),
            fallback_lng=get_typed_config("RESOLVER_FALLBACK_LNG", cls.fallback_lng, float),
        )
