"""
Resolution module for the Itinerary Coordinate Resolution Engine.

This module provides functionality for:
- Classifying itinerary location names as generic, specific or ambiguous
- Looking up city centres in a static gazetteer
- Geocoding specific venues with the Google Maps API
- Caching resolved coordinates per session (city and venue tiers)
- Rate limiting geocode requests
- Orchestrating tiered, batched coordinate resolution

Main classes:
- CoordinateResolver: High-level interface for resolving itinerary locations
- GoogleMapsGeocodingClient: Google Maps geocoder with rate limiting
- ResolutionCache: Two-tier session cache
- CityGazetteer: Static city-centre table
- AsyncTokenBucketRateLimiter: Rate limiting implementation

Errors:
- GeocodeError: Geocoding failures, tagged with a GeocodeErrorKind
"""

from .resolution_cache import CacheTier, ResolutionCache, city_key, venue_key
from .resolution_classifier import LocationKind, classify, is_generic_location, is_specific_venue
from .resolution_client import GeocodingClient, GoogleMapsGeocodingClient
from .resolution_config import ResolverSettings
from .resolution_errors import GeocodeError, GeocodeErrorKind
from .resolution_gazetteer import DEFAULT_GAZETTEER, CityGazetteer
from .resolution_models import (
    Confidence,
    ItineraryNode,
    LocationRequest,
    ResolutionStrategy,
    ResolvedCoordinate,
    requests_from_nodes,
)
from .resolution_rate_limiter import AsyncTokenBucketRateLimiter
from .resolution_workflow import CoordinateResolver

__all__ = [
    # Main classes
    "CoordinateResolver",
    "GeocodingClient",
    "GoogleMapsGeocodingClient",
    "ResolutionCache",
    "CityGazetteer",
    "AsyncTokenBucketRateLimiter",
    "ResolverSettings",

    # Models
    "Confidence",
    "ResolutionStrategy",
    "LocationRequest",
    "ResolvedCoordinate",
    "ItineraryNode",
    "requests_from_nodes",

    # Classification and keys
    "LocationKind",
    "classify",
    "is_generic_location",
    "is_specific_venue",
    "CacheTier",
    "city_key",
    "venue_key",
    "DEFAULT_GAZETTEER",

    # Errors
    "GeocodeError",
    "GeocodeErrorKind",
]

# Version info
__version__ = "1.0.0"
