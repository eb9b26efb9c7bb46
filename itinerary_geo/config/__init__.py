"""Configuration and logging helpers for the Itinerary Coordinate Resolution Engine."""
