"""Best-effort geocoding: Open-Meteo name search and Nominatim reverse lookup."""

import logging

import httpx

from nimbus.errors import NotFoundError
from nimbus.models.location import PlaceCandidate

logger = logging.getLogger(__name__)

OPEN_METEO_GEOCODING_URL = "https://geocoding-api.open-meteo.com"
NOMINATIM_URL = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "nimbus-weather/0.1.0"
UNKNOWN_PLACE = "Unknown"

# Most to least specific; the first present key names the place.
_ADDRESS_KEYS = ("city", "town", "village", "municipality", "county")


class GeocodingClient:
    """Forward and reverse geocoding that never raises on provider errors.

    Search and reverse lookup are decoration for a forecast, so failures
    are logged and surfaced as empty results or "Unknown".
    """

    def __init__(
        self,
        search_base_url: str = OPEN_METEO_GEOCODING_URL,
        reverse_base_url: str = NOMINATIM_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 10.0,
    ):
        self.search_base_url = search_base_url
        self.reverse_base_url = reverse_base_url
        self.user_agent = user_agent
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}

    def search(self, query: str, limit: int = 5) -> list[PlaceCandidate]:
        """Resolve free text to up to `limit` candidate places."""
        query = query.strip()
        if not query:
            return []
        url = f"{self.search_base_url}/v1/search"
        params = {"name": query, "count": limit, "language": "en", "format": "json"}
        try:
            resp = httpx.get(
                url, params=params, headers=self._headers(), timeout=self.timeout
            )
            resp.raise_for_status()
            results = resp.json().get("results") or []
            return [_to_candidate(r, query) for r in results[:limit]]
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Geocoding search failed for %r: %s", query, e)
            return []

    def reverse_lookup(self, latitude: float, longitude: float) -> str:
        """Best-effort display name for a coordinate, "Unknown" on failure."""
        url = f"{self.reverse_base_url}/reverse"
        params = {"lat": latitude, "lon": longitude, "format": "jsonv2", "zoom": 10}
        try:
            resp = httpx.get(
                url, params=params, headers=self._headers(), timeout=self.timeout
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "Reverse geocoding failed for (%s, %s): %s", latitude, longitude, e
            )
            return UNKNOWN_PLACE

        if not isinstance(data, dict):
            return UNKNOWN_PLACE
        address = data.get("address")
        if not isinstance(address, dict):
            address = {}
        for key in _ADDRESS_KEYS:
            value = address.get(key)
            if isinstance(value, str) and value:
                return value
        name = data.get("name")
        return name if isinstance(name, str) and name else UNKNOWN_PLACE

    def resolve_by_name(self, name: str) -> PlaceCandidate | None:
        """Turn a saved city name back into coordinates.

        First match wins, so ambiguous names (Paris, TX vs Paris, FR)
        resolve to whatever the provider ranks highest.
        """
        matches = self.search(name, 1)
        return matches[0] if matches else None

    def require_by_name(self, name: str) -> PlaceCandidate:
        candidate = self.resolve_by_name(name)
        if candidate is None:
            raise NotFoundError(f"No place found for {name!r}")
        return candidate


def _to_candidate(result: dict, query: str) -> PlaceCandidate:
    return PlaceCandidate(
        display_name=result.get("name") or query,
        latitude=float(result["latitude"]),
        longitude=float(result["longitude"]),
        admin_area=result.get("admin1"),
        country_name=result.get("country"),
    )
