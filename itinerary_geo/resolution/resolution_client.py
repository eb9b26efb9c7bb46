"""
Geocoding clients for the resolution module.

GoogleMapsGeocodingClient wraps the googlemaps SDK. It is the only paid
operation in the pipeline: one HTTP request per query, with the SDK's own
over-query-limit and server-error retries switched off, and every failure
reported as a typed GeocodeError.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Optional

import googlemaps
import requests

from ..config.config_module import get_config, get_typed_config
from ..config.logger_module import log_error, log_info, log_warning
from .resolution_errors import GeocodeError, GeocodeErrorKind
from .resolution_rate_limiter import AsyncTokenBucketRateLimiter

# Google status codes mapped onto the error taxonomy
_STATUS_KINDS = {
    "ZERO_RESULTS": GeocodeErrorKind.NOT_FOUND,
    "NOT_FOUND": GeocodeErrorKind.NOT_FOUND,
    "OVER_QUERY_LIMIT": GeocodeErrorKind.RATE_LIMITED,
    "OVER_DAILY_LIMIT": GeocodeErrorKind.RATE_LIMITED,
    "RESOURCE_EXHAUSTED": GeocodeErrorKind.RATE_LIMITED,
    "REQUEST_DENIED": GeocodeErrorKind.INVALID_KEY,
}


def _raise_for_server_error(response: requests.Response, *args, **kwargs) -> None:
    """
    requests response hook failing 5xx answers before the SDK sees them.

    The SDK re-sends 500/503/504 responses until its retry window closes;
    an exception raised here reaches it as a TransportError instead.
    """
    if response.status_code >= 500:
        response.raise_for_status()


class GeocodingClient(ABC):
    """Abstract base class for geocoding providers."""

    @abstractmethod
    async def geocode(self, query: str) -> Dict[str, float]:
        """
        Geocode a free-text query.

        Args:
            query: Place or address text (e.g. "Red Fort, Agra")

        Returns:
            Dictionary with 'lat' and 'lng' keys

        Raises:
            GeocodeError: NETWORK, NOT_FOUND, RATE_LIMITED or INVALID_KEY
        """
        pass


class GoogleMapsGeocodingClient(GeocodingClient):
    """
    Wraps the googlemaps SDK geocoder with client-side rate limiting.

    The SDK call is blocking, so it runs in a worker thread; the event loop
    only suspends while the request is in flight.
    """

    def __init__(self,
                 api_key: str = None,
                 rate_limit_per_sec: float = 10.0,
                 burst_capacity: int = 10,
                 request_timeout: int = 10,
                 rate_limiter: Optional[AsyncTokenBucketRateLimiter] = None):
        """
        Initialize the geocoding client.

        Args:
            api_key: Google Maps API key (loaded from config if not provided)
            rate_limit_per_sec: Throttle outgoing requests
            burst_capacity: Max burst requests allowed
            request_timeout: HTTP request timeout in seconds
            rate_limiter: Pre-built limiter (overrides rate settings)
        """
        self.api_key = api_key or get_config("GOOGLE_MAPS_API_KEY")
        if not self.api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY not provided or found in config")

        self.request_timeout = request_timeout
        self.calls_made = 0

        self._rate_limiter = rate_limiter or AsyncTokenBucketRateLimiter(
            rate_per_second=rate_limit_per_sec,
            burst_capacity=burst_capacity
        )

        # Retries are the resolver's decision, not the SDK's
        self._gmaps = googlemaps.Client(
            key=self.api_key,
            timeout=request_timeout,
            retry_timeout=request_timeout,
            retry_over_query_limit=False,
            requests_kwargs={"hooks": {"response": _raise_for_server_error}},
        )

        log_info(
            f"GoogleMapsGeocodingClient initialized (rate_limit={rate_limit_per_sec}/sec)"
        )

    @classmethod
    def from_env(cls) -> "GoogleMapsGeocodingClient":
        """Build a client from GOOGLE_MAPS_API_KEY and the GEOCODER_* variables."""
        return cls(
            rate_limit_per_sec=get_typed_config("GEOCODER_RATE_PER_SEC", 10.0, float),
            burst_capacity=get_typed_config("GEOCODER_BURST", 10, int),
            request_timeout=get_typed_config("GEOCODER_TIMEOUT_SECONDS", 10, int),
        )

    async def geocode(self, query: str) -> Dict[str, float]:
        if not query or not query.strip():
            raise GeocodeError(GeocodeErrorKind.NOT_FOUND, "Empty geocode query provided")

        await self._rate_limiter.wait_for_token()

        self.calls_made += 1
        try:
            log_info(f"Geocoding query: {query}")

            results = await asyncio.to_thread(self._gmaps.geocode, query)

            if not results:
                raise GeocodeError(
                    GeocodeErrorKind.NOT_FOUND, f"No coordinates found for '{query}'"
                )

            location = results[0]['geometry']['location']
            lat = location['lat']
            lng = location['lng']

            log_info(f"Geocoded '{query}' to ({lat}, {lng})")

            return {"lat": lat, "lng": lng}

        except GeocodeError:
            raise
        except googlemaps.exceptions.ApiError as e:
            kind = _STATUS_KINDS.get(e.status, GeocodeErrorKind.NETWORK)
            log_warning(f"Google Maps API error for '{query}': {e.status} {e.message or ''}")
            raise GeocodeError(kind, f"API error geocoding '{query}': {e.status}")
        except googlemaps.exceptions.Timeout:
            log_error(f"Timeout geocoding '{query}'")
            raise GeocodeError(GeocodeErrorKind.NETWORK, f"Timeout geocoding '{query}'")
        except googlemaps.exceptions.TransportError as e:
            log_error(f"Transport error geocoding '{query}': {e}")
            raise GeocodeError(GeocodeErrorKind.NETWORK, f"Transport error geocoding '{query}'")
        except (KeyError, IndexError, TypeError) as e:
            log_error(f"Malformed geocode response for '{query}': {e}")
            raise GeocodeError(
                GeocodeErrorKind.NOT_FOUND, f"Malformed geocode response for '{query}'"
            )

    def get_rate_limit_status(self) -> Dict[str, float]:
        """
        Get current rate limiting status.

        Returns:
            Dictionary with available tokens, wait time, and calls made
        """
        return {
            "available_tokens": self._rate_limiter.get_available_tokens(),
            "wait_time_seconds": self._rate_limiter.get_wait_time(),
            "calls_made": self.calls_made,
        }
