"""
Coordinate helpers shared by the selector and results screens.

The report service does not return a fixed shape, so the authoritative point
is picked from several candidate locations in the payload.
"""
import math
from typing import Any, Iterator, Optional, Tuple

from domain.models import Coordinate, ReportPayload, SelectedArea

INVALID_COORDINATES_MESSAGE = "Please enter valid latitude (-90 to 90) and longitude (-180 to 180)."


class InvalidCoordinatesError(ValueError):
    """Raised when manual coordinate entry cannot be submitted."""

    def __init__(self, message: str = INVALID_COORDINATES_MESSAGE):
        super().__init__(message)
        self.message = message


def _as_mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _candidate_pairs(
    selected_area: Optional[SelectedArea], payload: Optional[ReportPayload]
) -> Iterator[Tuple[Any, Any]]:
    """Yield (lat, lon) candidates in priority order."""
    if selected_area is not None:
        yield selected_area.latitude, selected_area.longitude
    data = _as_mapping(payload)
    coords = _as_mapping(data.get("coordinates"))
    yield coords.get("latitude"), coords.get("longitude")
    report = _as_mapping(data.get("report"))
    yield report.get("latitude"), report.get("longitude")
    yield data.get("latitude"), data.get("longitude")


def resolve_coordinates(
    selected_area: Optional[SelectedArea], payload: Optional[ReportPayload]
) -> Coordinate:
    """
    Pick the first source that defines both latitude and longitude.

    Priority: selected area, payload["coordinates"], payload["report"],
    payload top level. A source with only one field is skipped; 0 counts as
    defined.
    """
    for lat, lon in _candidate_pairs(selected_area, payload):
        if lat is not None and lon is not None:
            return Coordinate(latitude=lat, longitude=lon)
    return Coordinate()


def format_coordinates(coord: Coordinate) -> str:
    """Return '[lat, lon]' with 4 decimals, or '' when unresolved."""
    if not coord.is_resolved:
        return ""
    try:
        lat = float(coord.latitude)
        lon = float(coord.longitude)
    except (TypeError, ValueError):
        return ""
    return f"[{lat:.4f}, {lon:.4f}]"


def format_field(value: float) -> str:
    """Format a coordinate component for an input field."""
    return f"{value:.4f}"


def _parse_number(text: Any) -> float:
    if isinstance(text, bool):
        return math.nan
    if isinstance(text, (int, float)):
        return float(text)
    try:
        return float(str(text).strip())
    except ValueError:
        return math.nan


def is_valid_coordinate(lat: float, lon: float) -> bool:
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def parse_coordinate_inputs(
    latitude_text: Any,
    longitude_text: Any,
    fallback: Tuple[float, float],
) -> Coordinate:
    """
    Parse manual latitude/longitude fields for submission.

    An empty field falls back to the matching component of ``fallback``
    (the current marker position). Raises InvalidCoordinatesError when either
    value is not a finite number in range.
    """
    lat_raw = latitude_text if latitude_text not in (None, "") else fallback[0]
    lon_raw = longitude_text if longitude_text not in (None, "") else fallback[1]
    lat = _parse_number(lat_raw)
    lon = _parse_number(lon_raw)
    if not is_valid_coordinate(lat, lon):
        raise InvalidCoordinatesError()
    return Coordinate(latitude=lat, longitude=lon)
