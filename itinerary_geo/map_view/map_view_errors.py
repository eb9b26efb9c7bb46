"""
Custom exceptions for the map view module.
"""


class MapViewError(Exception):
    """Raised when building or fetching a static map for a layout fails."""
    pass
