"""
In-memory, session-scoped cache for resolved coordinates.

Two independent tiers keep city centres apart from venues, so "Paris" never
collides with "Paris Las Vegas Hotel". Nothing is persisted across process
restarts.
"""

import time
from collections import OrderedDict
from enum import Enum
from typing import Dict, Optional, Tuple

from ..config.logger_module import log_debug, log_info
from .resolution_models import ResolvedCoordinate


class CacheTier(Enum):
    """Cache namespaces."""

    CITY = "city"
    VENUE = "venue"


def _normalize(text: Optional[str]) -> str:
    return " ".join((text or "").split()).casefold()


def city_key(destination: Optional[str]) -> str:
    """
    Normalize a destination into a city cache key.

    A trailing region or country part is dropped, so "Agra, India" and
    "agra" share a key.
    """
    return _normalize((destination or "").split(",")[0])


def venue_key(name: Optional[str], destination: Optional[str] = None) -> str:
    """Normalize a venue name plus its destination hint into a cache key."""
    return f"{_normalize(name)}|{city_key(destination)}"


class ResolutionCache:
    """
    Two-tier coordinate cache.

    Features:
    - Independent city and venue namespaces
    - Venue tier capped with oldest-first eviction
    - Optional venue TTL, checked lazily on lookup
    - Stores never downgrade an entry's confidence
    """

    def __init__(self,
                 max_venue_entries: int = 1000,
                 venue_ttl_seconds: Optional[float] = None):
        """
        Initialize the cache.

        Args:
            max_venue_entries: Venue tier capacity
            venue_ttl_seconds: Venue entry lifetime (None = whole session)
        """
        if max_venue_entries < 1:
            raise ValueError(f"max_venue_entries must be at least 1, got {max_venue_entries}")

        self.max_venue_entries = max_venue_entries
        self.venue_ttl = venue_ttl_seconds

        self._cities: Dict[str, ResolvedCoordinate] = {}
        # key -> (value, stored_at)
        self._venues: "OrderedDict[str, Tuple[ResolvedCoordinate, float]]" = OrderedDict()

        log_info(
            f"ResolutionCache initialized "
            f"(max_venues={max_venue_entries}, venue_ttl={venue_ttl_seconds})"
        )

    def lookup(self, key: str, tier: CacheTier) -> Optional[ResolvedCoordinate]:
        """
        Return the cached coordinate for ``key`` in ``tier``, if any.

        Expired venue entries are removed and reported as misses.
        """
        if tier is CacheTier.CITY:
            return self._cities.get(key)

        entry = self._venues.get(key)
        if entry is None:
            return None

        value, stored_at = entry
        if self.venue_ttl is not None and time.monotonic() - stored_at > self.venue_ttl:
            del self._venues[key]
            log_debug(f"Venue cache entry expired: {key}")
            return None

        return value

    def store(self, key: str, tier: CacheTier, value: ResolvedCoordinate) -> bool:
        """
        Upsert a coordinate.

        An existing entry with better confidence is kept.

        Returns:
            True if the value was written
        """
        existing = self.lookup(key, tier)
        if existing is not None and not value.confidence.at_least(existing.confidence):
            log_debug(
                f"Kept {existing.confidence.value} entry for '{key}' "
                f"over {value.confidence.value}"
            )
            return False

        if tier is CacheTier.CITY:
            self._cities[key] = value
            return True

        if key in self._venues:
            del self._venues[key]
        self._venues[key] = (value, time.monotonic())

        while len(self._venues) > self.max_venue_entries:
            evicted_key, _ = self._venues.popitem(last=False)
            log_debug(f"Evicted oldest venue cache entry: {evicted_key}")

        return True

    def clear(self) -> None:
        """Drop every entry in both tiers."""
        cities, venues = len(self._cities), len(self._venues)
        self._cities.clear()
        self._venues.clear()
        log_info(f"Cleared resolution cache ({cities} cities, {venues} venues)")

    def get_cache_stats(self) -> Dict[str, int]:
        """
        Get cache statistics.

        Returns:
            Entry counts per tier and the venue capacity
        """
        return {
            "cities": len(self._cities),
            "venues": len(self._venues),
            "max_venues": self.max_venue_entries,
        }

    def __len__(self) -> int:
        return len(self._cities) + len(self._venues)
