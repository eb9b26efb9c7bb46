"""
Static gazetteer of major city centres.

A zero-cost fallback used before paying for a city geocode. The table is
loaded once at import and exposed read-only.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .resolution_cache import city_key

Coordinates = Tuple[float, float]

_CITY_CENTERS: Dict[str, Coordinates] = {
    # India
    "delhi": (28.6139, 77.2090),
    "new delhi": (28.6139, 77.2090),
    "mumbai": (19.0760, 72.8777),
    "bangalore": (12.9716, 77.5946),
    "bengaluru": (12.9716, 77.5946),
    "kolkata": (22.5726, 88.3639),
    "chennai": (13.0827, 80.2707),
    "hyderabad": (17.3850, 78.4867),
    "pune": (18.5204, 73.8567),
    "jaipur": (26.9124, 75.7873),
    "agra": (27.1767, 78.0081),
    "udaipur": (24.5854, 73.7125),
    "varanasi": (25.3176, 82.9739),
    "goa": (15.2993, 74.1240),
    "kochi": (9.9312, 76.2673),
    # Asia and Middle East
    "tokyo": (35.6762, 139.6503),
    "kyoto": (35.0116, 135.7681),
    "osaka": (34.6937, 135.5023),
    "seoul": (37.5665, 126.9780),
    "beijing": (39.9042, 116.4074),
    "shanghai": (31.2304, 121.4737),
    "hong kong": (22.3193, 114.1694),
    "singapore": (1.3521, 103.8198),
    "bangkok": (13.7563, 100.5018),
    "kuala lumpur": (3.1390, 101.6869),
    "bali": (-8.3405, 115.0920),
    "kathmandu": (27.7172, 85.3240),
    "dubai": (25.2048, 55.2708),
    "abu dhabi": (24.4539, 54.3773),
    "istanbul": (41.0082, 28.9784),
    # Europe
    "paris": (48.8566, 2.3522),
    "london": (51.5074, -0.1278),
    "rome": (41.9028, 12.4964),
    "barcelona": (41.3851, 2.1734),
    "madrid": (40.4168, -3.7038),
    "lisbon": (38.7223, -9.1393),
    "amsterdam": (52.3676, 4.9041),
    "berlin": (52.5200, 13.4050),
    "prague": (50.0755, 14.4378),
    "vienna": (48.2082, 16.3738),
    "venice": (45.4408, 12.3155),
    "athens": (37.9838, 23.7275),
    # Americas
    "new york": (40.7128, -74.0060),
    "los angeles": (34.0522, -118.2437),
    "san francisco": (37.7749, -122.4194),
    "las vegas": (36.1699, -115.1398),
    "toronto": (43.6532, -79.3832),
    "mexico city": (19.4326, -99.1332),
    "rio de janeiro": (-22.9068, -43.1729),
    "buenos aires": (-34.6037, -58.3816),
    # Africa and Oceania
    "cairo": (30.0444, 31.2357),
    "cape town": (-33.9249, 18.4241),
    "sydney": (-33.8688, 151.2093),
    "melbourne": (-37.8136, 144.9631),
}


class CityGazetteer:
    """Read-only lookup of normalized city name to city-centre coordinates."""

    def __init__(self, entries: Optional[Mapping[str, Coordinates]] = None):
        source = _CITY_CENTERS if entries is None else entries
        self._entries: Mapping[str, Coordinates] = MappingProxyType(
            {city_key(name): coords for name, coords in source.items()}
        )

    @property
    def entries(self) -> Mapping[str, Coordinates]:
        return self._entries

    def lookup(self, city_name: Optional[str]) -> Optional[Coordinates]:
        """
        Exact-match lookup on the normalized city name.

        "Paris, France" and " PARIS " both match "paris"; no fuzzy matching.

        Returns:
            (lat, lng) or None when the city is not in the table
        """
        if not city_name:
            return None
        return self._entries.get(city_key(city_name))

    def __contains__(self, city_name: object) -> bool:
        return isinstance(city_name, str) and self.lookup(city_name) is not None

    def __len__(self) -> int:
        return len(self._entries)


# Shared, read-only instance
DEFAULT_GAZETTEER = CityGazetteer()
