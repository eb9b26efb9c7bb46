"""
Location classifier for itinerary location names.

Decides, from the text alone, whether a location is worth a paid geocode:
generic activity labels ("Lunch", "Hotel Check-in", "Free Afternoon") are
never geocoded, while names that look like identifiable venues are.
"""

import re
from enum import Enum

# Names longer than this are treated as specific even without a landmark word
SPECIFIC_NAME_MIN_LENGTH = 15

GENERIC_PATTERN = re.compile(
    r"\b(?:"
    r"breakfast|brunch|lunch|dinner"
    r"|hotels?|accommodations?|lodging"
    r"|spot|area|zone"
    r"|(?:morning|afternoon|evening) activit(?:y|ies)"
    r"|free (?:time|morning|afternoon|evening|day)"
    r"|rest|leisure"
    r"|check[\s-]?(?:in|out)"
    r")\b",
    re.IGNORECASE,
)

LANDMARK_PATTERN = re.compile(
    r"\b(?:"
    r"museums?|temples?|fort|palace|parks?|markets?|mall|restaurant|cafe"
    r"|beach|tower|gate|square|station|airport"
    r"|mahal|mosque|church|cathedral|monument|castle|bridge|gardens?"
    r"|gallery|zoo|lake|mausoleum|memorial|shrine|bazaar"
    r")\b",
    re.IGNORECASE,
)


class LocationKind(Enum):
    """Outcome of classifying a location name."""

    GENERIC = "generic"
    SPECIFIC = "specific"
    # neither generic nor recognisably a venue; not worth a geocode
    AMBIGUOUS = "ambiguous"


def is_generic_location(name: str) -> bool:
    """Return True for activity labels that name no addressable place."""
    if not name or not name.strip():
        return True
    return GENERIC_PATTERN.search(name) is not None


def is_specific_venue(name: str) -> bool:
    """Return True for names that look like an identifiable point of interest."""
    if is_generic_location(name):
        return False
    stripped = name.strip()
    return (
        LANDMARK_PATTERN.search(stripped) is not None
        or len(stripped) > SPECIFIC_NAME_MIN_LENGTH
    )


def classify(name: str) -> LocationKind:
    """
    Classify a location name.

    Args:
        name: Free-text location name from the itinerary

    Returns:
        LocationKind.GENERIC for activity labels (and empty names),
        LocationKind.SPECIFIC for venue-like names,
        LocationKind.AMBIGUOUS otherwise
    """
    if is_generic_location(name):
        return LocationKind.GENERIC
    if is_specific_venue(name):
        return LocationKind.SPECIFIC
    return LocationKind.AMBIGUOUS
