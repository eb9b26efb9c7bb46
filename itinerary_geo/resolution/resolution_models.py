"""
Value objects exchanged by the resolution pipeline.

LocationRequest and ResolvedCoordinate are immutable and carry no shared
state, so they can be handed freely between concurrent resolution tasks.
ItineraryNode validates the itinerary provider's node records.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Confidence(Enum):
    """How trustworthy a resolved coordinate is."""

    EXACT = "exact"
    APPROXIMATE = "approximate"
    CITY = "city"
    FALLBACK = "fallback"

    @property
    def rank(self) -> int:
        """Lower is better."""
        return _CONFIDENCE_RANK[self]

    def at_least(self, other: "Confidence") -> bool:
        """True when this confidence is the same as or better than ``other``."""
        return self.rank <= other.rank


_CONFIDENCE_RANK = {
    Confidence.EXACT: 0,
    Confidence.APPROXIMATE: 1,
    Confidence.CITY: 2,
    Confidence.FALLBACK: 3,
}


class ResolutionStrategy(Enum):
    """The tier that produced a coordinate."""

    PROVIDED = "provided"
    GENERIC_SKIP = "generic-skip"
    CACHE_HIT = "cache-hit"
    GEOCODED = "geocoded"
    GAZETTEER = "gazetteer"
    CITY_GEOCODED = "city-geocoded"
    GEOGRAPHIC_CENTER = "geographic-center"


def is_valid_coordinate(lat: Any, lng: Any) -> bool:
    """Check that lat/lng are finite numbers within WGS84 bounds."""
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180


@dataclass(frozen=True)
class LocationRequest:
    """A location to resolve, as submitted by the itinerary."""

    name: str
    destination: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    node_id: Optional[str] = None

    def has_valid_coordinates(self) -> bool:
        return is_valid_coordinate(self.lat, self.lng)


@dataclass(frozen=True)
class ResolvedCoordinate:
    """A confidence-tagged coordinate; exactly one per LocationRequest."""

    lat: float
    lng: float
    confidence: Confidence
    strategy: ResolutionStrategy
    node_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the map rendering surface."""
        return {
            "nodeId": self.node_id,
            "lat": self.lat,
            "lng": self.lng,
            "confidence": self.confidence.value,
            "strategy": self.strategy.value,
        }


class ItineraryNode(BaseModel):
    """The fields of an itinerary node the resolver consumes."""

    model_config = ConfigDict(populate_by_name=True)

    node_id: str = Field(alias="nodeId")
    title: str = ""
    location_name: Optional[str] = Field(default=None, alias="locationName")
    destination_hint: Optional[str] = Field(default=None, alias="destinationHint")
    existing_lat: Optional[float] = Field(default=None, alias="existingLat")
    existing_lng: Optional[float] = Field(default=None, alias="existingLng")

    @field_validator("node_id", mode="before")
    @classmethod
    def _node_id_as_text(cls, value: Any) -> Any:
        # providers emit numeric ids as well as strings
        return str(value) if isinstance(value, int) else value

    def to_request(self, default_destination: Optional[str] = None) -> LocationRequest:
        """
        Build the LocationRequest for this node.

        The location name falls back to the node title, and the destination
        hint falls back to the trip-level destination.
        """
        name = self.location_name if self.location_name and self.location_name.strip() else self.title
        destination = self.destination_hint or default_destination
        return LocationRequest(
            name=name or "",
            destination=destination,
            lat=self.existing_lat,
            lng=self.existing_lng,
            node_id=self.node_id,
        )


def requests_from_nodes(nodes: Iterable[Union[ItineraryNode, Dict[str, Any]]],
                        default_destination: Optional[str] = None) -> List[LocationRequest]:
    """
    Convert itinerary provider records into ordered LocationRequests.

    Args:
        nodes: ItineraryNode models or raw provider dicts (camelCase keys)
        default_destination: Trip destination used when a node has no hint

    Returns:
        One LocationRequest per node, in input order
    """
    requests = []
    for node in nodes:
        if not isinstance(node, ItineraryNode):
            node = ItineraryNode.model_validate(node)
        requests.append(node.to_request(default_destination))
    return requests
