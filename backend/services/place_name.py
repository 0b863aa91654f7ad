"""
Place-name resolution for the results screen.

A caller-supplied name wins; otherwise one reverse-geocode lookup is issued
for the resolved coordinate and its result is used as a fallback.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set, Tuple

from domain.models import SENTINEL_PLACE_NAME, Coordinate, ReportPayload, SelectedArea
from services.geocoding import reverse_geocode_place_name

logger = logging.getLogger(__name__)

PlaceNameLookup = Callable[[float, float], Awaitable[Optional[str]]]
LookupKey = Tuple[Optional[Tuple[float, float]], Optional[str], int]


async def _default_lookup(lat: float, lon: float) -> Optional[str]:
    return await asyncio.to_thread(reverse_geocode_place_name, lat, lon)


def is_usable_name(name: Any) -> bool:
    return isinstance(name, str) and bool(name) and name != SENTINEL_PLACE_NAME


def _payload_place_name(payload: Optional[ReportPayload]) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    name = payload.get("place_name")
    return name if isinstance(name, str) else None


def _selected_place_name(selected_area: Optional[SelectedArea]) -> Optional[str]:
    name = selected_area.place_name if selected_area is not None else None
    return name if isinstance(name, str) else None


def needs_reverse_lookup(
    selected_area: Optional[SelectedArea],
    payload: Optional[ReportPayload],
    coord: Coordinate,
) -> bool:
    """True when no real name is known anywhere and the point is resolved."""
    if payload is None:
        return False
    if is_usable_name(_selected_place_name(selected_area)):
        return False
    if is_usable_name(_payload_place_name(payload)):
        return False
    return coord.is_resolved


def display_place_name(
    selected_area: Optional[SelectedArea],
    payload: Optional[ReportPayload],
    fetched_name: Optional[str] = None,
) -> str:
    """Selected name > payload place_name > fetched name > sentinel."""
    for candidate in (
        _selected_place_name(selected_area),
        _payload_place_name(payload),
        fetched_name,
    ):
        if is_usable_name(candidate):
            return candidate
    return SENTINEL_PLACE_NAME


class PlaceNameResolver:
    """
    Runs at most one reverse-geocode lookup per
    (latitude, longitude, selected place name, payload identity) key.

    ``loading`` is true while the lookup for the current key is outstanding.
    Completions for a key that is no longer current are dropped.
    """

    def __init__(self, lookup: Optional[PlaceNameLookup] = None):
        self._lookup = lookup or _default_lookup
        self._current_key: Optional[LookupKey] = None
        self._fired: Set[LookupKey] = set()
        self._task: Optional[asyncio.Task] = None
        self.name: Optional[str] = None
        self.loading = False

    @staticmethod
    def _key(
        selected_area: Optional[SelectedArea],
        payload: Optional[ReportPayload],
        coord: Coordinate,
    ) -> LookupKey:
        return (coord.as_tuple(), _selected_place_name(selected_area), id(payload))

    def ensure(
        self,
        selected_area: Optional[SelectedArea],
        payload: Optional[ReportPayload],
        coord: Coordinate,
    ) -> Optional[asyncio.Task]:
        """Start a lookup if one is needed for this key and none ran yet.

        Must be called from a running event loop.
        """
        key = self._key(selected_area, payload, coord)
        if key == self._current_key:
            return None
        self._current_key = key
        self.name = None
        self.loading = False

        if not needs_reverse_lookup(selected_area, payload, coord):
            return None
        if key in self._fired:
            return None
        self._fired.add(key)

        point = coord.as_tuple()
        if point is None:
            return None
        lat, lon = point
        self.loading = True
        logger.debug("Reverse geocoding lat=%s lon=%s", lat, lon)
        self._task = asyncio.ensure_future(self._run(key, lat, lon))
        return self._task

    async def _run(self, key: LookupKey, lat: float, lon: float) -> None:
        name: Optional[str] = None
        try:
            name = await self._lookup(lat, lon)
        except Exception as exc:
            logger.warning("Place name lookup failed for lat=%s lon=%s: %s", lat, lon, exc)
        if key != self._current_key:
            logger.debug("Dropping place name for stale key lat=%s lon=%s", lat, lon)
            return
        if name:
            self.name = name
        self.loading = False

    def close(self) -> None:
        """Cancel an outstanding lookup; its result will never be applied."""
        self._current_key = None
        self.loading = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
