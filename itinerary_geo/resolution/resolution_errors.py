"""
Custom exceptions for the resolution module.

Geocoding failures are the only errors the pipeline produces; they are
raised at the geocoding-client boundary and absorbed by the resolver's
fallback tiers.
"""

from enum import Enum


class GeocodeErrorKind(Enum):
    """Failure categories reported by a geocoding provider."""

    NETWORK = "network"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    INVALID_KEY = "invalid_key"


class GeocodeError(Exception):
    """Raised when a geocode request fails or returns no result."""

    def __init__(self, kind: GeocodeErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind

    @property
    def retryable(self) -> bool:
        """Transient failures that a later attempt may overcome."""
        return self.kind in (GeocodeErrorKind.NETWORK, GeocodeErrorKind.RATE_LIMITED)
