"""
Map view module for the Itinerary Coordinate Resolution Engine.

This module provides functionality for:
- Styling markers by resolution confidence
- Building a route through the precisely located stops
- Fitting a viewport (bounds, centre, zoom) around resolved locations
- Rendering layouts through the Google Static Maps API

Main classes:
- MapLayout: Markers, route and viewport for a resolved itinerary
- StaticMapRenderer: Google Static Maps request builder and fetcher

Errors:
- MapViewError: Static map building or fetching failures
"""

from .map_view_errors import MapViewError
from .map_view_layout import (
    CONFIDENCE_COLORS,
    CONFIDENCE_LABELS,
    MapBounds,
    MapLayout,
    MapMarker,
    build_map_layout,
    calculate_bounds,
    calculate_centroid,
    calculate_zoom,
)
from .map_view_static import StaticMapRenderer

__all__ = [
    # Main classes
    "MapLayout",
    "MapMarker",
    "MapBounds",
    "StaticMapRenderer",

    # Layout helpers
    "CONFIDENCE_COLORS",
    "CONFIDENCE_LABELS",
    "build_map_layout",
    "calculate_bounds",
    "calculate_centroid",
    "calculate_zoom",

    # Errors
    "MapViewError",
]
