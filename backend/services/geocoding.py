"""Place search and reverse geocoding helpers using OpenStreetMap Nominatim.

Both calls identify the client with a fixed User-Agent, as the Nominatim
usage policy requires, and share a global minimum interval between requests.
Failures are logged and turned into empty results; callers never see an
exception from this module.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, List, Optional

import requests

from domain.models import SearchSuggestion
from settings import settings

logger = logging.getLogger(__name__)

NOMINATIM_BASE_URL = settings.NOMINATIM_BASE_URL
NOMINATIM_SEARCH_URL = f"{NOMINATIM_BASE_URL}/search"
NOMINATIM_REVERSE_URL = f"{NOMINATIM_BASE_URL}/reverse"

_session = requests.Session()
_last_request_ts: float = 0.0
_lock = threading.Lock()
_MIN_INTERVAL_SEC = settings.NOMINATIM_MIN_INTERVAL
_TIMEOUT_SEC = settings.NOMINATIM_TIMEOUT_SECONDS

NOMINATIM_HEADERS = {
    "User-Agent": settings.NOMINATIM_USER_AGENT,
}
if settings.NOMINATIM_REFERER:
    NOMINATIM_HEADERS["Referer"] = settings.NOMINATIM_REFERER

# Address components tried in order when labelling a reverse-geocode result.
ADDRESS_PRIORITY = ("neighbourhood", "suburb", "town", "city", "county", "state")


def _throttled_get(
    url: str,
    *,
    params: dict[str, Any],
    headers: dict[str, str],
    timeout: float,
) -> requests.Response:
    """Perform a GET request with a simple global rate limit."""
    global _last_request_ts
    with _lock:
        now = time.time()
        delta = now - _last_request_ts
        if delta < _MIN_INTERVAL_SEC:
            time.sleep(_MIN_INTERVAL_SEC - delta)
        _last_request_ts = time.time()
    return _session.get(url, params=params, headers=headers, timeout=timeout)


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_suggestion(place: Dict[str, Any]) -> Optional[SearchSuggestion]:
    lat = _to_float(place.get("lat"))
    lon = _to_float(place.get("lon"))
    if lat is None or lon is None:
        return None
    return SearchSuggestion(
        id=str(place.get("place_id", "")),
        name=str(place.get("display_name") or ""),
        lat=lat,
        lon=lon,
        type=place.get("type"),
        importance=_to_float(place.get("importance")),
    )


def search_places(query: str, limit: Optional[int] = None) -> List[SearchSuggestion]:
    """Free-text place search. Returns [] on any provider failure."""
    params = {
        "q": query,
        "format": "json",
        "addressdetails": "1",
        "limit": str(limit or settings.SEARCH_RESULT_LIMIT),
    }
    try:
        resp = _throttled_get(
            NOMINATIM_SEARCH_URL, params=params, headers=NOMINATIM_HEADERS, timeout=_TIMEOUT_SEC
        )
        resp.raise_for_status()
        data = resp.json()
    except Exception as exc:
        logger.warning("Nominatim search error for q=%r: %s", query, exc)
        return []

    if not isinstance(data, list):
        return []

    suggestions: List[SearchSuggestion] = []
    for place in data:
        if not isinstance(place, dict):
            continue
        suggestion = _to_suggestion(place)
        if suggestion is not None:
            suggestions.append(suggestion)
    logger.debug("Nominatim search q=%r got %d results", query, len(suggestions))
    return suggestions


def reverse_geocode(lat: float, lon: float, zoom: Optional[int] = None) -> Optional[Dict[str, Any]]:
    """Raw reverse-geocode response for a coordinate, or None on failure."""
    params = {
        "lat": str(lat),
        "lon": str(lon),
        "format": "json",
        "zoom": str(zoom or settings.REVERSE_GEOCODE_ZOOM),
        "addressdetails": "1",
    }
    try:
        resp = _throttled_get(
            NOMINATIM_REVERSE_URL, params=params, headers=NOMINATIM_HEADERS, timeout=_TIMEOUT_SEC
        )
        resp.raise_for_status()
        data = resp.json()
    except Exception as exc:
        logger.warning("Nominatim reverse geocode error for lat=%s lon=%s: %s", lat, lon, exc)
        return None
    return data if isinstance(data, dict) else None


def extract_place_name(data: Optional[Dict[str, Any]]) -> Optional[str]:
    """
    Build a short readable label from a reverse-geocode response.

    Picks the most specific of neighbourhood, suburb, town, city, county,
    state and adds the city (or else the state) for context when it differs.
    Falls back to the first part of display_name.
    """
    if not data:
        return None
    address = data.get("address")
    if not isinstance(address, dict):
        address = {}

    place_name = ""
    for key in ADDRESS_PRIORITY:
        if address.get(key):
            place_name = str(address[key])
            break

    city = address.get("city")
    state = address.get("state")
    if place_name and city and place_name != city:
        place_name += f", {city}"
    elif place_name and state and place_name != state:
        place_name += f", {state}"

    if not place_name and data.get("display_name"):
        place_name = str(data["display_name"]).split(",")[0]

    return place_name or None


def reverse_geocode_place_name(lat: float, lon: float) -> Optional[str]:
    """Reverse geocode a coordinate straight to a display label."""
    return extract_place_name(reverse_geocode(lat, lon))
