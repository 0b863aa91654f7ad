"""
Location selector screen.

Holds the interactive state of the map/search/coordinate form and submits
the chosen point to the report service.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from domain.models import (
    SENTINEL_PLACE_NAME,
    Coordinate,
    ReportHandoff,
    ReportPayload,
    SearchSuggestion,
    SelectedArea,
)
from services.coordinates import InvalidCoordinatesError, format_field, parse_coordinate_inputs
from services.report_client import ReportServiceError, request_report
from services.search_session import PlaceSearchSession
from settings import settings

logger = logging.getLogger(__name__)

LOADING_MESSAGE = (
    "Data is being fetched and calculated. This may take approximately 1 to 3 minutes. "
    "Please do not refresh the page."
)

ReportRequester = Callable[[float, float], Awaitable[ReportPayload]]


async def _default_report_request(latitude: float, longitude: float) -> ReportPayload:
    return await asyncio.to_thread(request_report, latitude, longitude)


class LocationSelector:
    """
    State for one selector screen.

    Map clicks and suggestion picks both move the marker and fill the
    coordinate fields; a map click also clears the search text.
    """

    def __init__(
        self,
        search: Optional[PlaceSearchSession] = None,
        report_request: Optional[ReportRequester] = None,
        center: Optional[Tuple[float, float]] = None,
        zoom: Optional[int] = None,
    ):
        self.search = search or PlaceSearchSession()
        self._report_request = report_request or _default_report_request
        start = center or (settings.DEFAULT_MAP_LAT, settings.DEFAULT_MAP_LON)
        self.position: Tuple[float, float] = start
        self.map_center: Tuple[float, float] = start
        self.default_zoom = zoom or settings.DEFAULT_MAP_ZOOM
        self.map_zoom = self.default_zoom
        self.latitude_text = ""
        self.longitude_text = ""
        self.loading = False
        self.error = ""
        self._picked: Optional[SearchSuggestion] = None

    def on_search_text(self, text: str) -> None:
        if text != self.search.text:
            self._picked = None
        self.search.on_text_changed(text)

    def on_map_click(self, latitude: float, longitude: float) -> None:
        self.position = (latitude, longitude)
        self.latitude_text = format_field(latitude)
        self.longitude_text = format_field(longitude)
        self._picked = None
        self.search.clear_text()

    def select_suggestion(self, suggestion_id: str) -> Optional[SearchSuggestion]:
        suggestion = self.search.select(suggestion_id)
        if suggestion is None:
            return None
        coords = (suggestion.lat, suggestion.lon)
        self.map_center = coords
        self.map_zoom = self.default_zoom
        self.position = coords
        self.latitude_text = format_field(suggestion.lat)
        self.longitude_text = format_field(suggestion.lon)
        self._picked = suggestion
        return suggestion

    def set_coordinate_text(self, latitude: Optional[str] = None, longitude: Optional[str] = None) -> None:
        if latitude is not None:
            self.latitude_text = latitude
        if longitude is not None:
            self.longitude_text = longitude

    def _picked_name(self, coord: Coordinate) -> Optional[str]:
        """Name of the picked suggestion, if the submitted point is still its point."""
        picked = self._picked
        if picked is None:
            return None
        same_point = (
            format_field(coord.latitude) == format_field(picked.lat)
            and format_field(coord.longitude) == format_field(picked.lon)
        )
        return picked.name if same_point else None

    def selected_area(self, coord: Coordinate) -> SelectedArea:
        return SelectedArea(
            latitude=coord.latitude,
            longitude=coord.longitude,
            place_name=self._picked_name(coord) or SENTINEL_PLACE_NAME,
        )

    async def submit(self) -> Optional[ReportHandoff]:
        """
        Validate the form and request a report.

        Returns None without doing anything while a submission is already in
        flight. On invalid input or a report service failure, ``error`` is set
        and the exception propagates.
        """
        if self.loading:
            logger.debug("Ignoring submit while a report request is in flight")
            return None

        self.error = ""
        try:
            coord = parse_coordinate_inputs(self.latitude_text, self.longitude_text, self.position)
        except InvalidCoordinatesError as exc:
            self.error = exc.message
            raise

        self.loading = True
        try:
            payload = await self._report_request(coord.latitude, coord.longitude)
        except ReportServiceError as exc:
            self.error = exc.message
            raise
        finally:
            self.loading = False

        return ReportHandoff(payload=payload, selected_area=self.selected_area(coord))

    def close(self) -> None:
        self.search.close()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "search_text": self.search.text,
            "search_state": self.search.state.value,
            "searching": self.search.searching,
            "suggestions": [s.to_dict() for s in self.search.suggestions],
            "map_center": list(self.map_center),
            "map_zoom": self.map_zoom,
            "marker": list(self.position),
            "latitude": self.latitude_text,
            "longitude": self.longitude_text,
            "loading": self.loading,
            "loading_message": LOADING_MESSAGE if self.loading else None,
            "error": self.error,
        }
