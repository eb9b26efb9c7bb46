"""
Itinerary Coordinate Resolution Engine.

Turns the free-text location names of a travel itinerary into
confidence-tagged map coordinates while keeping paid geocoding calls to a
minimum.

Subpackages:
- config: Environment configuration and logging
- resolution: Classification, caching, geocoding and the CoordinateResolver
- map_view: Marker, route and viewport data for rendering resolved itineraries
"""

__version__ = "1.0.0"
