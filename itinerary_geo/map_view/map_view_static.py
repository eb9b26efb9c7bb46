"""
Google Static Maps rendering for map layouts.

Builds Static Maps requests from a MapLayout (markers grouped by confidence
colour, the route as a path) and fetches the image bytes.
"""

from collections import OrderedDict
from typing import Dict, List, Union
from urllib.parse import urlencode

import requests

from ..config.config_module import get_config
from ..config.logger_module import log_error, log_info
from .map_view_errors import MapViewError
from .map_view_layout import MapLayout

ParamValue = Union[str, List[str]]


def _hex_color(color: str) -> str:
    # Static Maps expects 0xRRGGBB
    return "0x" + color.lstrip("#").upper()


class StaticMapRenderer:
    """Renders MapLayouts through the Google Static Maps API."""

    STATIC_MAPS_BASE_URL = "https://maps.googleapis.com/maps/api/staticmap"

    def __init__(self,
                 api_key: str = None,
                 request_timeout: int = 10,
                 route_color: str = "#3B82F6",
                 route_weight: int = 3):
        """
        Initialize the renderer.

        Args:
            api_key: Google Maps API key (loaded from config if not provided)
            request_timeout: HTTP request timeout in seconds
            route_color: Route stroke colour (#RRGGBB)
            route_weight: Route stroke width in pixels
        """
        self.api_key = api_key or get_config("GOOGLE_MAPS_API_KEY")
        if not self.api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY not provided or found in config")

        self.request_timeout = request_timeout
        self.route_color = route_color
        self.route_weight = route_weight

        self._session = requests.Session()

    def build_params(self,
                     layout: MapLayout,
                     size: str = "600x400",
                     map_type: str = "roadmap") -> Dict[str, ParamValue]:
        """
        Build Static Maps query parameters for a layout.

        Returns:
            Parameter dict; ``markers`` holds one entry per colour group
        """
        params: Dict[str, ParamValue] = {
            "center": f"{layout.center[0]},{layout.center[1]}",
            "zoom": str(layout.zoom),
            "size": size,
            "maptype": map_type,
            "key": self.api_key,
            "format": "png",
        }

        groups: "OrderedDict[str, List[str]]" = OrderedDict()
        for marker in layout.markers:
            groups.setdefault(marker.color, []).append(f"{marker.lat},{marker.lng}")
        if groups:
            params["markers"] = [
                "|".join([f"color:{_hex_color(color)}"] + locations)
                for color, locations in groups.items()
            ]

        if len(layout.route) >= 2:
            params["path"] = "|".join(
                [f"color:{_hex_color(self.route_color)}", f"weight:{self.route_weight}"]
                + [f"{lat},{lng}" for lat, lng in layout.route]
            )

        return params

    def build_static_map_url(self,
                             layout: MapLayout,
                             size: str = "600x400",
                             map_type: str = "roadmap") -> str:
        """
        Build a Google Static Maps URL (for debugging/logging or <img> tags).

        Returns:
            Complete URL for the static map
        """
        params = self.build_params(layout, size=size, map_type=map_type)
        return f"{self.STATIC_MAPS_BASE_URL}?{urlencode(params, doseq=True)}"

    def fetch_map_bytes(self,
                        layout: MapLayout,
                        size: str = "600x400",
                        map_type: str = "roadmap") -> bytes:
        """
        Fetch the static map image for a layout as raw bytes.

        Args:
            layout: Layout to render
            size: Image size (e.g., "600x400")
            map_type: Map type (roadmap, satellite, hybrid, terrain)

        Returns:
            Raw PNG bytes

        Raises:
            MapViewError: On HTTP errors or empty response
        """
        params = self.build_params(layout, size=size, map_type=map_type)

        try:
            log_info(
                f"Fetching static map with {len(layout.markers)} markers "
                f"at zoom {layout.zoom}"
            )

            response = self._session.get(
                self.STATIC_MAPS_BASE_URL,
                params=params,
                timeout=self.request_timeout
            )

            if response.status_code != 200:
                log_error(
                    f"HTTP {response.status_code} fetching map: "
                    f"{response.text[:200]}"
                )
                raise MapViewError(f"HTTP {response.status_code} fetching map")

            content = response.content
            if not content:
                raise MapViewError("Empty response from Static Maps API")

            # Error bodies are short text, not images
            if len(content) < 100:
                raise MapViewError(
                    f"Response too small ({len(content)} bytes), "
                    "likely an error message"
                )

            log_info(f"Successfully fetched map ({len(content)} bytes)")

            return content

        except MapViewError:
            raise
        except requests.exceptions.Timeout:
            log_error("Timeout fetching static map")
            raise MapViewError("Request timeout")
        except requests.exceptions.RequestException as e:
            log_error(f"Request error fetching map: {e}")
            raise MapViewError(f"Request failed: {str(e)}")
