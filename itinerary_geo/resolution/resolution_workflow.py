"""
High-level orchestrator for coordinate resolution.

Maps itinerary location names to confidence-tagged coordinates through a
tiered fallback chain, paying for a geocode only when a name looks like a
real venue and nothing cheaper already answers it:

1. Provided      - the request already carries valid coordinates (exact)
2. Generic skip  - activity labels resolve to the city centre (city)
3. Venue cache   - earlier results for the same name and destination
4. Geocode       - specific venues only (approximate)
5. City centre   - gazetteer, then a single shared city geocode (city),
                   then the neutral geographic centre (fallback)

Resolution never raises: geocode failures are logged and degrade
confidence instead.
"""

import asyncio
from collections import Counter
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Set

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from ..config.logger_module import log_debug, log_error, log_info, log_warning
from .resolution_cache import CacheTier, ResolutionCache, city_key, venue_key
from .resolution_classifier import LocationKind, classify
from .resolution_client import GeocodingClient, GoogleMapsGeocodingClient
from .resolution_config import ResolverSettings
from .resolution_errors import GeocodeError
from .resolution_gazetteer import DEFAULT_GAZETTEER, CityGazetteer
from .resolution_models import (
    Confidence,
    LocationRequest,
    ResolutionStrategy,
    ResolvedCoordinate,
    is_valid_coordinate,
)

ProgressCallback = Callable[[int, int], None]


def _is_retryable(error: BaseException) -> bool:
    return isinstance(error, GeocodeError) and error.retryable


class CoordinateResolver:
    """
    Resolves LocationRequests into ResolvedCoordinates.

    The resolver owns its cache and is the only component that writes to
    it. Identical in-flight geocodes are coalesced: later callers await the
    task already running for the same normalized key.
    """

    def __init__(self,
                 geocoder: Optional[GeocodingClient] = None,
                 cache: Optional[ResolutionCache] = None,
                 gazetteer: Optional[CityGazetteer] = None,
                 settings: Optional[ResolverSettings] = None):
        """
        Initialize the resolver.

        Args:
            geocoder: Geocoding client (Google Maps client if omitted)
            cache: Session cache (a fresh one sized from settings if omitted)
            gazetteer: City-centre table (shared default if omitted)
            settings: Resolver tunables
        """
        self.settings = settings if settings is not None else ResolverSettings()
        self.geocoder = geocoder if geocoder is not None else GoogleMapsGeocodingClient.from_env()
        self.cache = cache if cache is not None else ResolutionCache(
            max_venue_entries=self.settings.max_venue_entries,
            venue_ttl_seconds=self.settings.venue_ttl_seconds,
        )
        self.gazetteer = gazetteer if gazetteer is not None else DEFAULT_GAZETTEER

        self.geocode_attempts = 0
        self.geocode_failures = 0
        self._strategy_counts: Counter = Counter()
        self._confidence_counts: Counter = Counter()

        self._pending_venues: Dict[str, "asyncio.Task[Optional[ResolvedCoordinate]]"] = {}
        self._pending_cities: Dict[str, "asyncio.Task[Optional[ResolvedCoordinate]]"] = {}
        # cities whose geocode already failed this session
        self._unresolved_cities: Set[str] = set()
        # venues whose geocode already failed this session
        self._unresolved_venues: Set[str] = set()
        self._disposed = False

        log_info(
            f"CoordinateResolver initialized "
            f"(batch_size={self.settings.batch_size}, "
            f"batch_delay={self.settings.batch_delay_ms}ms, "
            f"gazetteer_cities={len(self.gazetteer)})"
        )

    @property
    def disposed(self) -> bool:
        return self._disposed

    async def resolve(self, request: LocationRequest) -> ResolvedCoordinate:
        """
        Resolve a single request through the tier chain.

        Args:
            request: Location to resolve

        Returns:
            Confidence-tagged coordinate stamped with the request's node_id
        """
        result = replace(await self._resolve(request), node_id=request.node_id)

        self._strategy_counts[result.strategy.value] += 1
        self._confidence_counts[result.confidence.value] += 1
        log_debug(
            f"Resolved '{request.name}' ({request.destination}) -> "
            f"({result.lat}, {result.lng}) {result.confidence.value}/{result.strategy.value}"
        )
        return result

    async def resolve_all(self,
                          requests: Iterable[LocationRequest],
                          on_progress: Optional[ProgressCallback] = None
                          ) -> List[ResolvedCoordinate]:
        """
        Resolve requests in rate-limited batches.

        Each batch runs concurrently; batches are separated by the configured
        delay. Results are reassembled by input index, so the output is
        aligned with the input whatever order the lookups finish in.

        Args:
            requests: Ordered requests
            on_progress: Called with (resolved_count, total) after each batch

        Returns:
            One ResolvedCoordinate per request, in input order
        """
        pending = list(requests)
        total = len(pending)
        if not pending:
            log_warning("resolve_all called with empty request list")
            return []

        log_info(f"Starting resolution of {total} locations")

        results: List[Optional[ResolvedCoordinate]] = [None] * total
        batch_size = self.settings.batch_size
        attempts_before = self.geocode_attempts

        for start in range(0, total, batch_size):
            batch = pending[start:start + batch_size]
            resolved = await asyncio.gather(*(self.resolve(r) for r in batch))

            for offset, result in enumerate(resolved):
                results[start + offset] = result

            done = start + len(batch)
            log_info(
                f"Batch {start // batch_size + 1}: resolved {done}/{total} locations"
            )
            if on_progress is not None:
                on_progress(done, total)

            if done < total and self.settings.batch_delay_ms > 0:
                await asyncio.sleep(self.settings.batch_delay_seconds)

        confidences = Counter(r.confidence.value for r in results)
        log_info(
            f"Resolution complete: {total} locations, "
            f"{self.geocode_attempts - attempts_before} geocode attempts, "
            f"confidence breakdown {dict(confidences)}"
        )
        return results

    def dispose(self) -> None:
        """
        Mark the resolver abandoned.

        Geocodes still in flight finish but their results are discarded;
        no cache writes or new geocodes happen afterwards.
        """
        self._disposed = True
        log_info(
            f"CoordinateResolver disposed with "
            f"{len(self._pending_venues) + len(self._pending_cities)} lookups in flight"
        )

    def clear_cache(self) -> None:
        self.cache.clear()
        self._unresolved_cities.clear()
        self._unresolved_venues.clear()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get combined resolution statistics.

        Returns:
            Cache stats, geocode attempt/failure counts, and per-strategy and
            per-confidence counters
        """
        return {
            "cache": self.cache.get_cache_stats(),
            "geocode_attempts": self.geocode_attempts,
            "geocode_failures": self.geocode_failures,
            "strategies": dict(self._strategy_counts),
            "confidence": dict(self._confidence_counts),
        }

    # ---- tiers ----

    async def _resolve(self, request: LocationRequest) -> ResolvedCoordinate:
        if request.has_valid_coordinates():
            return ResolvedCoordinate(
                lat=float(request.lat),
                lng=float(request.lng),
                confidence=Confidence.EXACT,
                strategy=ResolutionStrategy.PROVIDED,
            )

        kind = classify(request.name)

        if kind is LocationKind.GENERIC:
            center = await self._resolve_city_center(request.destination)
            if center.confidence is Confidence.CITY:
                return replace(center, strategy=ResolutionStrategy.GENERIC_SKIP)
            return center

        key = venue_key(request.name, request.destination)
        cached = self.cache.lookup(key, CacheTier.VENUE)
        if cached is not None:
            log_debug(f"Venue cache hit: {key}")
            return replace(cached, strategy=ResolutionStrategy.CACHE_HIT)

        if kind is LocationKind.SPECIFIC:
            venue = await self._geocode_venue(key, request)
            if venue is not None:
                return venue

        return await self._resolve_city_center(request.destination)

    async def _geocode_venue(self,
                             key: str,
                             request: LocationRequest) -> Optional[ResolvedCoordinate]:
        in_flight = self._pending_venues.get(key)
        if in_flight is not None:
            log_debug(f"Joining in-flight geocode for {key}")
            shared = await asyncio.shield(in_flight)
            if shared is None:
                return None
            return replace(shared, strategy=ResolutionStrategy.CACHE_HIT)

        if self._disposed or key in self._unresolved_venues:
            return None

        name = request.name.strip()
        destination = (request.destination or "").strip()
        query = f"{name}, {destination}" if destination else name

        task = self._start(self._pending_venues, key, self._fetch_venue(key, query))
        return await asyncio.shield(task)

    async def _fetch_venue(self, key: str, query: str) -> Optional[ResolvedCoordinate]:
        coords = await self._geocode(query)
        if coords is None:
            self._unresolved_venues.add(key)
            return None

        result = ResolvedCoordinate(
            lat=coords["lat"],
            lng=coords["lng"],
            confidence=Confidence.APPROXIMATE,
            strategy=ResolutionStrategy.GEOCODED,
        )
        if not self._disposed:
            self.cache.store(key, CacheTier.VENUE, result)
        return result

    async def _resolve_city_center(self, destination: Optional[str]) -> ResolvedCoordinate:
        coords = self.gazetteer.lookup(destination)
        if coords is not None:
            return ResolvedCoordinate(
                lat=coords[0],
                lng=coords[1],
                confidence=Confidence.CITY,
                strategy=ResolutionStrategy.GAZETTEER,
            )

        key = city_key(destination)
        if key:
            cached = self.cache.lookup(key, CacheTier.CITY)
            if cached is not None:
                return cached

            in_flight = self._pending_cities.get(key)
            if in_flight is None and not self._disposed and key not in self._unresolved_cities:
                in_flight = self._start(
                    self._pending_cities, key, self._fetch_city(key, destination.strip())
                )
            if in_flight is not None:
                city = await asyncio.shield(in_flight)
                if city is not None:
                    return city

        return self._geographic_center(destination)

    async def _fetch_city(self, key: str, query: str) -> Optional[ResolvedCoordinate]:
        log_info(f"Geocoding city centre: {query}")
        coords = await self._geocode(query)
        if coords is None:
            self._unresolved_cities.add(key)
            return None

        result = ResolvedCoordinate(
            lat=coords["lat"],
            lng=coords["lng"],
            confidence=Confidence.CITY,
            strategy=ResolutionStrategy.CITY_GEOCODED,
        )
        if not self._disposed:
            self.cache.store(key, CacheTier.CITY, result)
        return result

    def _geographic_center(self, destination: Optional[str]) -> ResolvedCoordinate:
        log_warning(
            f"Failed to resolve coordinates for destination '{destination}', "
            f"using geographic centre"
        )
        return ResolvedCoordinate(
            lat=self.settings.fallback_lat,
            lng=self.settings.fallback_lng,
            confidence=Confidence.FALLBACK,
            strategy=ResolutionStrategy.GEOGRAPHIC_CENTER,
        )

    # ---- network ----

    def _start(self,
               registry: Dict[str, "asyncio.Task[Optional[ResolvedCoordinate]]"],
               key: str,
               coro: Awaitable[Optional[ResolvedCoordinate]]
               ) -> "asyncio.Task[Optional[ResolvedCoordinate]]":
        task = asyncio.ensure_future(coro)
        registry[key] = task

        def _release(done: "asyncio.Task[Optional[ResolvedCoordinate]]") -> None:
            if registry.get(key) is done:
                del registry[key]

        task.add_done_callback(_release)
        return task

    async def _geocode(self, query: str) -> Optional[Dict[str, float]]:
        """
        Call the geocoder, retrying transient failures.

        Returns:
            {'lat', 'lng'} or None once every attempt has failed
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.settings.geocode_attempts),
                wait=wait_exponential(multiplier=self.settings.retry_wait_seconds, max=10),
                retry=retry_if_exception(_is_retryable),
                reraise=True,
            ):
                with attempt:
                    self.geocode_attempts += 1
                    coords = await self.geocoder.geocode(query)
        except GeocodeError as e:
            self.geocode_failures += 1
            log_warning(f"Geocode failed for '{query}' ({e.kind.value}): {e}")
            return None
        except Exception as e:
            self.geocode_failures += 1
            log_error(f"Unexpected geocoder error for '{query}': {e}")
            return None

        if not isinstance(coords, Mapping) or not is_valid_coordinate(
                coords.get("lat"), coords.get("lng")):
            self.geocode_failures += 1
            log_warning(f"Geocoder returned invalid coordinates for '{query}': {coords}")
            return None

        return coords
