"""
Test suite for the resolution module components.

Covers errors, value objects, the location classifier, the two-tier cache,
the city gazetteer, resolver settings, rate limiting and the Google Maps
geocoding client with the googlemaps SDK mocked out.

To run tests:
- Command line: python -m pytest itinerary_geo/resolution/test_resolution.py -v
"""

import math
from unittest.mock import patch

import googlemaps
import pytest
import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter

from ..config.config_module import ConfigError
from .resolution_cache import CacheTier, ResolutionCache, city_key, venue_key
from .resolution_classifier import (
    LocationKind,
    classify,
    is_generic_location,
    is_specific_venue,
)
from .resolution_client import GoogleMapsGeocodingClient
from .resolution_config import ResolverSettings
from .resolution_errors import GeocodeError, GeocodeErrorKind
from .resolution_gazetteer import DEFAULT_GAZETTEER, CityGazetteer
from .resolution_models import (
    Confidence,
    ItineraryNode,
    LocationRequest,
    ResolutionStrategy,
    ResolvedCoordinate,
    is_valid_coordinate,
    requests_from_nodes,
)
from .resolution_rate_limiter import AsyncTokenBucketRateLimiter


# ==================== FIXTURES ====================

@pytest.fixture
def mock_config():
    """Mock config lookups for the geocoding client."""
    with patch('itinerary_geo.resolution.resolution_client.get_config') as mock_get:
        mock_get.return_value = "test_api_key"
        yield mock_get


@pytest.fixture
def mock_gmaps():
    """Mock the googlemaps SDK client class."""
    with patch('itinerary_geo.resolution.resolution_client.googlemaps.Client') as mock_client:
        yield mock_client


class ServerErrorAdapter(HTTPAdapter):
    """Transport adapter answering every request with HTTP 503."""

    def __init__(self):
        super().__init__()
        self.sent = 0

    def send(self, request, **kwargs):
        self.sent += 1
        response = requests.Response()
        response.status_code = 503
        response.reason = "Service Unavailable"
        response.url = request.url
        response.request = request
        response._content = b""
        return response


def _coord(confidence, lat=1.0, lng=2.0, strategy=ResolutionStrategy.GEOCODED):
    return ResolvedCoordinate(lat=lat, lng=lng, confidence=confidence, strategy=strategy)


# ==================== TEST CLASSES ====================

class TestErrors:
    """Test custom exceptions."""

    def test_geocode_error(self):
        """Test GeocodeError carries its kind and message."""
        error = GeocodeError(GeocodeErrorKind.NOT_FOUND, "Place not found")
        assert str(error) == "Place not found"
        assert error.kind is GeocodeErrorKind.NOT_FOUND
        assert isinstance(error, Exception)

    def test_default_message(self):
        """Test message defaults to the kind value."""
        assert str(GeocodeError(GeocodeErrorKind.INVALID_KEY)) == "invalid_key"

    @pytest.mark.parametrize("kind,retryable", [
        (GeocodeErrorKind.NETWORK, True),
        (GeocodeErrorKind.RATE_LIMITED, True),
        (GeocodeErrorKind.NOT_FOUND, False),
        (GeocodeErrorKind.INVALID_KEY, False),
    ])
    def test_retryable(self, kind, retryable):
        """Only transient failures are retryable."""
        assert GeocodeError(kind).retryable is retryable


class TestModels:
    """Test value objects and provider node conversion."""

    def test_confidence_ordering(self):
        """Test rank ordering from exact (best) to fallback (worst)."""
        ranks = [c.rank for c in (Confidence.EXACT, Confidence.APPROXIMATE,
                                  Confidence.CITY, Confidence.FALLBACK)]
        assert ranks == sorted(ranks)
        assert Confidence.EXACT.at_least(Confidence.CITY)
        assert Confidence.CITY.at_least(Confidence.CITY)
        assert not Confidence.FALLBACK.at_least(Confidence.APPROXIMATE)

    def test_strategy_values(self):
        """Test strategy tags use their hyphenated names."""
        assert ResolutionStrategy.GENERIC_SKIP.value == "generic-skip"
        assert ResolutionStrategy.GEOGRAPHIC_CENTER.value == "geographic-center"

    @pytest.mark.parametrize("lat,lng,valid", [
        (48.8584, 2.2945, True),
        (-90, 180, True),
        (0, 0, True),
        (90.1, 0, False),
        (0, -180.5, False),
        (None, 2.0, False),
        ("48.8", "2.2", False),
        (True, 2.0, False),
        (math.nan, 2.0, False),
        (0.0, math.inf, False),
    ])
    def test_is_valid_coordinate(self, lat, lng, valid):
        """Test coordinate validation."""
        assert is_valid_coordinate(lat, lng) is valid

    def test_request_has_valid_coordinates(self):
        """Test LocationRequest coordinate check."""
        assert LocationRequest("Eiffel Tower", lat=48.8584, lng=2.2945).has_valid_coordinates()
        assert not LocationRequest("Eiffel Tower").has_valid_coordinates()

    def test_resolved_to_dict(self):
        """Test serialization for the map surface."""
        coord = ResolvedCoordinate(
            lat=27.17, lng=78.04,
            confidence=Confidence.APPROXIMATE,
            strategy=ResolutionStrategy.GEOCODED,
            node_id="n1",
        )
        assert coord.to_dict() == {
            "nodeId": "n1",
            "lat": 27.17,
            "lng": 78.04,
            "confidence": "approximate",
            "strategy": "geocoded",
        }

    def test_itinerary_node_from_provider_keys(self):
        """Test camelCase provider records are accepted."""
        node = ItineraryNode.model_validate({
            "nodeId": 7,
            "title": "Visit the Taj",
            "locationName": "Taj Mahal",
            "destinationHint": "Agra, India",
            "existingLat": None,
        })

        request = node.to_request("Delhi")

        assert request == LocationRequest(
            name="Taj Mahal", destination="Agra, India", node_id="7"
        )

    def test_itinerary_node_fallbacks(self):
        """Test title and trip destination fill missing fields."""
        node = ItineraryNode(node_id="n2", title="Lunch", location_name="  ")

        request = node.to_request("Agra")

        assert request.name == "Lunch"
        assert request.destination == "Agra"

    def test_itinerary_node_requires_id(self):
        """Test a node without an id is rejected."""
        with pytest.raises(ValidationError):
            ItineraryNode.model_validate({"title": "Lunch"})

    def test_requests_from_nodes_preserves_order(self):
        """Test mixed dicts and models convert in input order."""
        nodes = [
            {"nodeId": "a", "title": "Breakfast"},
            ItineraryNode(node_id="b", title="Red Fort", existing_lat=28.65, existing_lng=77.24),
            {"nodeId": "c", "locationName": "Old Town", "destinationHint": "Prague"},
        ]

        requests = requests_from_nodes(nodes, default_destination="Delhi")

        assert [r.node_id for r in requests] == ["a", "b", "c"]
        assert requests[0].destination == "Delhi"
        assert requests[1].has_valid_coordinates()
        assert requests[2].destination == "Prague"


class TestClassifier:
    """Test location name classification."""

    @pytest.mark.parametrize("name", [
        "Breakfast",
        "Lunch at local restaurant",
        "Hotel Check-in",
        "check out",
        "Free Afternoon",
        "Evening activities",
        "Rest",
        "Leisure time",
        "Accommodation",
        "",
        "   ",
    ])
    def test_generic(self, name):
        """Test activity labels are generic."""
        assert is_generic_location(name)
        assert classify(name) is LocationKind.GENERIC

    @pytest.mark.parametrize("name", [
        "Taj Mahal",
        "Red Fort",
        "Louvre Museum",
        "Eiffel Tower",
        "Cafe de Flore",
        "Restaurant Le Jules Verne",
        "Sagrada Familia Basilica",
    ])
    def test_specific(self, name):
        """Test landmark names and long names are specific."""
        assert is_specific_venue(name)
        assert classify(name) is LocationKind.SPECIFIC

    @pytest.mark.parametrize("name", ["Old Town", "Montmartre", "Hampi"])
    def test_ambiguous(self, name):
        """Test short names without a landmark word are ambiguous."""
        assert not is_generic_location(name)
        assert not is_specific_venue(name)
        assert classify(name) is LocationKind.AMBIGUOUS

    def test_generic_beats_landmark(self):
        """Test a generic word wins over a landmark word."""
        assert classify("Dinner near the Tower") is LocationKind.GENERIC

    def test_word_boundaries(self):
        """Test generic words only match whole words."""
        assert not is_generic_location("Restaurant")
        assert not is_generic_location("Areal Museum")

    def test_length_threshold(self):
        """Test the length threshold is strictly greater than 15."""
        assert classify("A" * 15) is LocationKind.AMBIGUOUS
        assert classify("A" * 16) is LocationKind.SPECIFIC


class TestResolutionCache:
    """Test the two-tier session cache."""

    def test_key_normalization(self):
        """Test keys are trimmed, case-folded and whitespace-collapsed."""
        assert venue_key("  Red   FORT ", "Agra, India") == "red fort|agra"
        assert venue_key("Red Fort", None) == "red fort|"
        assert city_key("  Paris , France") == "paris"
        assert city_key(None) == ""

    def test_store_and_lookup(self):
        """Test store then lookup per tier."""
        cache = ResolutionCache()
        value = _coord(Confidence.APPROXIMATE)

        assert cache.store("red fort|agra", CacheTier.VENUE, value) is True
        assert cache.lookup("red fort|agra", CacheTier.VENUE) == value
        assert cache.lookup("red fort|agra", CacheTier.CITY) is None

    def test_tiers_are_independent(self):
        """Test the same key in different tiers does not collide."""
        cache = ResolutionCache()
        city = _coord(Confidence.CITY, strategy=ResolutionStrategy.CITY_GEOCODED)
        venue = _coord(Confidence.APPROXIMATE, lat=5.0)

        cache.store("paris", CacheTier.CITY, city)
        cache.store("paris", CacheTier.VENUE, venue)

        assert cache.lookup("paris", CacheTier.CITY) == city
        assert cache.lookup("paris", CacheTier.VENUE) == venue

    def test_store_never_downgrades(self):
        """Test a worse-confidence value does not replace a better one."""
        cache = ResolutionCache()
        better = _coord(Confidence.APPROXIMATE)
        worse = _coord(Confidence.FALLBACK, lat=0.0, lng=0.0)

        cache.store("k", CacheTier.VENUE, better)

        assert cache.store("k", CacheTier.VENUE, worse) is False
        assert cache.lookup("k", CacheTier.VENUE) == better

    def test_store_same_confidence_overwrites(self):
        """Test equal-confidence writes are accepted."""
        cache = ResolutionCache()
        cache.store("k", CacheTier.VENUE, _coord(Confidence.APPROXIMATE))
        newer = _coord(Confidence.APPROXIMATE, lat=3.0)

        assert cache.store("k", CacheTier.VENUE, newer) is True
        assert cache.lookup("k", CacheTier.VENUE) == newer

    def test_venue_eviction(self):
        """Test the oldest venue entry is evicted at capacity."""
        cache = ResolutionCache(max_venue_entries=2)

        cache.store("a", CacheTier.VENUE, _coord(Confidence.APPROXIMATE))
        cache.store("b", CacheTier.VENUE, _coord(Confidence.APPROXIMATE))
        cache.store("c", CacheTier.VENUE, _coord(Confidence.APPROXIMATE))

        assert cache.lookup("a", CacheTier.VENUE) is None
        assert cache.lookup("b", CacheTier.VENUE) is not None
        assert cache.lookup("c", CacheTier.VENUE) is not None
        assert cache.get_cache_stats()["venues"] == 2

    @patch('itinerary_geo.resolution.resolution_cache.time.monotonic')
    def test_venue_ttl(self, mock_monotonic):
        """Test venue entries expire lazily after the TTL."""
        mock_monotonic.return_value = 100.0
        cache = ResolutionCache(venue_ttl_seconds=60)
        cache.store("k", CacheTier.VENUE, _coord(Confidence.APPROXIMATE))

        mock_monotonic.return_value = 150.0
        assert cache.lookup("k", CacheTier.VENUE) is not None

        mock_monotonic.return_value = 161.0
        assert cache.lookup("k", CacheTier.VENUE) is None
        assert cache.get_cache_stats()["venues"] == 0

    def test_clear_and_stats(self):
        """Test clearing both tiers."""
        cache = ResolutionCache(max_venue_entries=10)
        cache.store("paris", CacheTier.CITY, _coord(Confidence.CITY))
        cache.store("k", CacheTier.VENUE, _coord(Confidence.APPROXIMATE))

        assert cache.get_cache_stats() == {"cities": 1, "venues": 1, "max_venues": 10}
        assert len(cache) == 2

        cache.clear()

        assert len(cache) == 0

    def test_invalid_capacity(self):
        """Test capacity must be positive."""
        with pytest.raises(ValueError):
            ResolutionCache(max_venue_entries=0)


class TestCityGazetteer:
    """Test the static city-centre table."""

    def test_lookup_normalizes(self):
        """Test lookup ignores case, whitespace and a trailing country."""
        assert DEFAULT_GAZETTEER.lookup("Agra") == (27.1767, 78.0081)
        assert DEFAULT_GAZETTEER.lookup("  PARIS, France ") == (48.8566, 2.3522)

    def test_lookup_miss(self):
        """Test unknown and empty names miss without fuzzy matching."""
        assert DEFAULT_GAZETTEER.lookup("Atlantis") is None
        assert DEFAULT_GAZETTEER.lookup("Pari") is None
        assert DEFAULT_GAZETTEER.lookup(None) is None

    def test_contains_and_len(self):
        """Test container protocol."""
        assert "Delhi" in DEFAULT_GAZETTEER
        assert "Atlantis" not in DEFAULT_GAZETTEER
        assert len(DEFAULT_GAZETTEER) >= 50

    def test_entries_read_only(self):
        """Test the table cannot be mutated."""
        with pytest.raises(TypeError):
            DEFAULT_GAZETTEER.entries["atlantis"] = (0.0, 0.0)

    def test_custom_entries(self):
        """Test a custom table is normalized on load."""
        gazetteer = CityGazetteer({" Hampi ": (15.335, 76.46)})

        assert gazetteer.lookup("hampi") == (15.335, 76.46)
        assert len(gazetteer) == 1


class TestResolverSettings:
    """Test resolver configuration."""

    def test_defaults(self):
        """Test default tunables."""
        settings = ResolverSettings()

        assert settings.batch_size == 5
        assert settings.batch_delay_ms == 200
        assert settings.batch_delay_seconds == 0.2
        assert settings.max_venue_entries == 1000
        assert settings.venue_ttl_seconds is None
        assert (settings.fallback_lat, settings.fallback_lng) == (0.0, 0.0)

    @pytest.mark.parametrize("kwargs", [
        {"batch_size": 0},
        {"batch_delay_ms": -1},
        {"max_venue_entries": 0},
        {"venue_ttl_seconds": 0},
        {"geocode_attempts": 0},
        {"fallback_lat": 91.0},
        {"fallback_lng": -181.0},
    ])
    def test_invalid_values(self, kwargs):
        """Test validation in __post_init__."""
        with pytest.raises(ValueError):
            ResolverSettings(**kwargs)

    def test_from_env(self, monkeypatch):
        """Test settings are read from environment variables."""
        monkeypatch.setenv("RESOLVER_BATCH_SIZE", "3")
        monkeypatch.setenv("RESOLVER_BATCH_DELAY_MS", "50")
        monkeypatch.setenv("RESOLVER_VENUE_CACHE_TTL_SECONDS", "3600")
        monkeypatch.setenv("RESOLVER_FALLBACK_LAT", "20.5")
        monkeypatch.setenv("RESOLVER_RETRY_WAIT_SECONDS", "0.25")
        monkeypatch.delenv("RESOLVER_VENUE_CACHE_SIZE", raising=False)
        monkeypatch.delenv("RESOLVER_GEOCODE_ATTEMPTS", raising=False)
        monkeypatch.delenv("RESOLVER_FALLBACK_LNG", raising=False)

        settings = ResolverSettings.from_env()

        assert settings.batch_size == 3
        assert settings.batch_delay_ms == 50
        assert settings.venue_ttl_seconds == 3600.0
        assert settings.fallback_lat == 20.5
        assert settings.max_venue_entries == 1000
        assert settings.geocode_attempts == 2
        assert settings.retry_wait_seconds == 0.25

    def test_from_env_zero_ttl_disables_expiry(self, monkeypatch):
        """Test a zero TTL means no expiry."""
        monkeypatch.setenv("RESOLVER_VENUE_CACHE_TTL_SECONDS", "0")

        assert ResolverSettings.from_env().venue_ttl_seconds is None

    def test_from_env_invalid_number(self, monkeypatch):
        """Test non-numeric values raise ConfigError."""
        monkeypatch.setenv("RESOLVER_BATCH_SIZE", "five")

        with pytest.raises(ConfigError):
            ResolverSettings.from_env()


class TestAsyncTokenBucketRateLimiter:
    """Test the rate limiter implementation."""

    def test_initialization(self):
        """Test rate limiter initialization."""
        limiter = AsyncTokenBucketRateLimiter(
            rate_per_second=2.0,
            burst_capacity=5,
            retry_attempts=3,
            backoff_factor=2.0
        )

        assert limiter.rate_per_second == 2.0
        assert limiter.burst_capacity == 5
        assert limiter.tokens == 5.0  # Starts full

    def test_invalid_arguments(self):
        """Test rate and capacity validation."""
        with pytest.raises(ValueError):
            AsyncTokenBucketRateLimiter(rate_per_second=0)
        with pytest.raises(ValueError):
            AsyncTokenBucketRateLimiter(burst_capacity=0)

    def test_acquire(self):
        """Test acquisition until the bucket is empty."""
        limiter = AsyncTokenBucketRateLimiter(rate_per_second=1.0, burst_capacity=3)

        assert limiter.acquire(3) is True
        assert limiter.acquire(1) is False

    @patch('itinerary_geo.resolution.resolution_rate_limiter.time.monotonic')
    def test_token_refill(self, mock_monotonic):
        """Test token refilling over time."""
        mock_monotonic.return_value = 0.0
        limiter = AsyncTokenBucketRateLimiter(rate_per_second=2.0, burst_capacity=5)
        limiter.acquire(5)

        # 0.5 seconds at 2/sec adds one token
        mock_monotonic.return_value = 0.5

        assert limiter.get_available_tokens() == pytest.approx(1.0)
        assert limiter.get_wait_time(3) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_wait_for_token(self):
        """Test waiting suspends until a token is refilled."""
        limiter = AsyncTokenBucketRateLimiter(rate_per_second=50.0, burst_capacity=1)
        limiter.acquire(1)

        await limiter.wait_for_token()

        assert limiter.get_available_tokens() < 1.0

    @pytest.mark.asyncio
    async def test_wait_for_token_gives_up(self):
        """Test RATE_LIMITED error after max retries."""
        limiter = AsyncTokenBucketRateLimiter(
            rate_per_second=0.1,  # Very slow refill
            burst_capacity=1,
            retry_attempts=0,
        )
        limiter.acquire(1)

        with pytest.raises(GeocodeError) as exc_info:
            await limiter.wait_for_token(1)

        assert exc_info.value.kind is GeocodeErrorKind.RATE_LIMITED
        assert "Failed to acquire" in str(exc_info.value)


class TestGoogleMapsGeocodingClient:
    """Test the Google Maps geocoding client."""

    def test_initialization(self, mock_config, mock_gmaps):
        """Test client initialization from config."""
        client = GoogleMapsGeocodingClient(request_timeout=30)

        assert client.api_key == "test_api_key"
        assert client.calls_made == 0
        mock_gmaps.assert_called_once()
        _, kwargs = mock_gmaps.call_args
        assert kwargs["key"] == "test_api_key"
        assert kwargs["timeout"] == 30
        assert kwargs["retry_timeout"] == 30
        assert kwargs["retry_over_query_limit"] is False
        assert "response" in kwargs["requests_kwargs"]["hooks"]

    def test_missing_api_key(self, mock_gmaps):
        """Test construction fails without a key."""
        with patch('itinerary_geo.resolution.resolution_client.get_config', return_value=None):
            with pytest.raises(ValueError):
                GoogleMapsGeocodingClient()

    def test_from_env(self, mock_config, mock_gmaps, monkeypatch):
        """Test throttle settings come from the environment."""
        monkeypatch.setenv("GEOCODER_RATE_PER_SEC", "4")
        monkeypatch.setenv("GEOCODER_BURST", "2")
        monkeypatch.setenv("GEOCODER_TIMEOUT_SECONDS", "5")

        client = GoogleMapsGeocodingClient.from_env()

        assert client.request_timeout == 5
        assert client.get_rate_limit_status()["available_tokens"] == pytest.approx(2.0)

    @pytest.mark.asyncio
    async def test_geocode_success(self, mock_config, mock_gmaps):
        """Test a successful geocode returns lat/lng."""
        mock_gmaps.return_value.geocode.return_value = [
            {"geometry": {"location": {"lat": 27.1751, "lng": 78.0421}}}
        ]
        client = GoogleMapsGeocodingClient()

        result = await client.geocode("Taj Mahal, Agra")

        assert result == {"lat": 27.1751, "lng": 78.0421}
        assert client.calls_made == 1
        mock_gmaps.return_value.geocode.assert_called_once_with("Taj Mahal, Agra")

    @pytest.mark.asyncio
    async def test_geocode_no_results(self, mock_config, mock_gmaps):
        """Test an empty result list maps to NOT_FOUND."""
        mock_gmaps.return_value.geocode.return_value = []
        client = GoogleMapsGeocodingClient()

        with pytest.raises(GeocodeError) as exc_info:
            await client.geocode("Nowhere Palace")

        assert exc_info.value.kind is GeocodeErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_geocode_empty_query(self, mock_config, mock_gmaps):
        """Test an empty query fails without a network call."""
        client = GoogleMapsGeocodingClient()

        with pytest.raises(GeocodeError) as exc_info:
            await client.geocode("  ")

        assert exc_info.value.kind is GeocodeErrorKind.NOT_FOUND
        assert client.calls_made == 0
        mock_gmaps.return_value.geocode.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raised,kind", [
        (googlemaps.exceptions.ApiError("REQUEST_DENIED", "bad key"), GeocodeErrorKind.INVALID_KEY),
        (googlemaps.exceptions.ApiError("OVER_QUERY_LIMIT"), GeocodeErrorKind.RATE_LIMITED),
        (googlemaps.exceptions.ApiError("ZERO_RESULTS"), GeocodeErrorKind.NOT_FOUND),
        (googlemaps.exceptions.ApiError("UNKNOWN_ERROR"), GeocodeErrorKind.NETWORK),
        (googlemaps.exceptions.Timeout(), GeocodeErrorKind.NETWORK),
        (googlemaps.exceptions.TransportError("connection reset"), GeocodeErrorKind.NETWORK),
        (googlemaps.exceptions.HTTPError(503), GeocodeErrorKind.NETWORK),
    ])
    async def test_geocode_error_mapping(self, mock_config, mock_gmaps, raised, kind):
        """Test SDK failures map onto the error taxonomy."""
        mock_gmaps.return_value.geocode.side_effect = raised
        client = GoogleMapsGeocodingClient()

        with pytest.raises(GeocodeError) as exc_info:
            await client.geocode("Red Fort, Agra")

        assert exc_info.value.kind is kind

    @pytest.mark.asyncio
    async def test_server_error_sent_once(self):
        """Test a 503 is reported as NETWORK after a single HTTP request."""
        client = GoogleMapsGeocodingClient(api_key="AIza-test-key", request_timeout=5)
        adapter = ServerErrorAdapter()
        client._gmaps.session.mount("https://", adapter)

        with pytest.raises(GeocodeError) as exc_info:
            await client.geocode("Red Fort, Agra")

        assert exc_info.value.kind is GeocodeErrorKind.NETWORK
        assert adapter.sent == 1

    @pytest.mark.asyncio
    async def test_rate_limited_request_not_counted(self, mock_config, mock_gmaps):
        """Test a request refused by the local limiter is never sent or counted."""
        limiter = AsyncTokenBucketRateLimiter(
            rate_per_second=0.1,
            burst_capacity=1,
            retry_attempts=0,
        )
        limiter.acquire(1)
        client = GoogleMapsGeocodingClient(rate_limiter=limiter)

        with pytest.raises(GeocodeError) as exc_info:
            await client.geocode("Red Fort, Agra")

        assert exc_info.value.kind is GeocodeErrorKind.RATE_LIMITED
        assert client.calls_made == 0
        mock_gmaps.return_value.geocode.assert_not_called()

    @pytest.mark.asyncio
    async def test_geocode_malformed_response(self, mock_config, mock_gmaps):
        """Test a response without geometry maps to NOT_FOUND."""
        mock_gmaps.return_value.geocode.return_value = [{"formatted_address": "Agra"}]
        client = GoogleMapsGeocodingClient()

        with pytest.raises(GeocodeError) as exc_info:
            await client.geocode("Agra")

        assert exc_info.value.kind is GeocodeErrorKind.NOT_FOUND
