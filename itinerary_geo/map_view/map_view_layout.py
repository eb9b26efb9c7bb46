"""
Map layout construction for resolved itineraries.

Turns an ordered list of ResolvedCoordinates into plain data a map surface
can draw: one styled marker per location, a route through the trustworthy
points, and a viewport that fits everything. Drawing itself is left to the
caller.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..config.logger_module import log_debug, log_warning
from ..resolution.resolution_models import Confidence, ResolvedCoordinate

Point = Tuple[float, float]

MIN_ZOOM = 1
MAX_ZOOM = 20
# A single location (or several at the same spot) has no extent to fit
SINGLE_POINT_ZOOM = 14

CONFIDENCE_COLORS = {
    Confidence.EXACT: "#10B981",
    Confidence.APPROXIMATE: "#3B82F6",
    Confidence.CITY: "#F59E0B",
    Confidence.FALLBACK: "#6B7280",
}

CONFIDENCE_LABELS = {
    Confidence.EXACT: "Exact location",
    Confidence.APPROXIMATE: "Approximate location",
    Confidence.CITY: "City center",
    Confidence.FALLBACK: "Fallback location",
}

# Only these confidences are precise enough to draw a route through
ROUTE_CONFIDENCES = frozenset({Confidence.EXACT, Confidence.APPROXIMATE})


@dataclass(frozen=True)
class MapBounds:
    """Axis-aligned bounding box in degrees."""

    south: float
    west: float
    north: float
    east: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.south <= lat <= self.north and self.west <= lng <= self.east


@dataclass(frozen=True)
class MapMarker:
    """A drawable marker for one resolved location."""

    index: int
    lat: float
    lng: float
    confidence: Confidence
    color: str
    label: str = ""
    node_id: Optional[str] = None

    @property
    def confidence_label(self) -> str:
        return CONFIDENCE_LABELS[self.confidence]


@dataclass
class MapLayout:
    """Everything a map surface needs to render a resolved itinerary."""

    markers: List[MapMarker] = field(default_factory=list)
    route: List[Point] = field(default_factory=list)
    bounds: Optional[MapBounds] = None
    center: Point = (0.0, 0.0)
    zoom: int = MIN_ZOOM

    @property
    def is_empty(self) -> bool:
        return not self.markers


def calculate_bounds(points: Sequence[Point]) -> Optional[MapBounds]:
    """
    Calculate the bounding box of a set of points.

    Returns:
        MapBounds, or None for an empty input
    """
    if not points:
        return None

    lats = [lat for lat, _ in points]
    lngs = [lng for _, lng in points]
    return MapBounds(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))


def calculate_centroid(points: Sequence[Point]) -> Optional[Point]:
    """Arithmetic mean of the points, or None for an empty input."""
    if not points:
        return None

    lat = sum(p[0] for p in points) / len(points)
    lng = sum(p[1] for p in points) / len(points)
    return (lat, lng)


def calculate_zoom(bounds: Optional[MapBounds]) -> int:
    """
    Pick the largest zoom level at which the bounds still fit.

    Args:
        bounds: Area to show (None = whole world)

    Returns:
        Zoom level clamped to [1, 20]
    """
    if bounds is None:
        return MIN_ZOOM

    lat_span = bounds.north - bounds.south
    lng_span = bounds.east - bounds.west
    if lat_span <= 0 and lng_span <= 0:
        return SINGLE_POINT_ZOOM

    zooms = [math.log2(360 / span) for span in (lat_span, lng_span) if span > 0]
    return max(MIN_ZOOM, min(MAX_ZOOM, math.floor(min(zooms))))


def build_map_layout(resolved: Sequence[ResolvedCoordinate],
                     labels: Optional[Sequence[str]] = None,
                     fallback_center: Point = (0.0, 0.0)) -> MapLayout:
    """
    Build a renderable layout from resolver output.

    Every coordinate gets a marker coloured by confidence. The route keeps
    input order but skips city and fallback points, which would draw
    misleading legs. An empty input still yields a layout centred on
    ``fallback_center`` at world zoom.

    Args:
        resolved: Resolver output, in itinerary order
        labels: Optional display label per coordinate (e.g. node titles)
        fallback_center: Centre used when there is nothing to show

    Returns:
        MapLayout

    Raises:
        ValueError: If labels and resolved differ in length
    """
    if labels is not None and len(labels) != len(resolved):
        raise ValueError(
            f"Expected {len(resolved)} labels, got {len(labels)}"
        )

    if not resolved:
        log_warning("Building map layout with no resolved locations")
        return MapLayout(center=(float(fallback_center[0]), float(fallback_center[1])))

    markers = [
        MapMarker(
            index=i,
            lat=coord.lat,
            lng=coord.lng,
            confidence=coord.confidence,
            color=CONFIDENCE_COLORS[coord.confidence],
            label=labels[i] if labels is not None else "",
            node_id=coord.node_id,
        )
        for i, coord in enumerate(resolved)
    ]

    route = [
        (coord.lat, coord.lng)
        for coord in resolved
        if coord.confidence in ROUTE_CONFIDENCES
    ]

    points = [(m.lat, m.lng) for m in markers]
    bounds = calculate_bounds(points)
    center = calculate_centroid(points)
    zoom = calculate_zoom(bounds)

    log_debug(
        f"Built map layout: {len(markers)} markers, {len(route)} route points, zoom {zoom}"
    )

    return MapLayout(markers=markers, route=route, bounds=bounds, center=center, zoom=zoom)
