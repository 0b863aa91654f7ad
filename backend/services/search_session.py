"""
Debounced place search for the location selector.

Keystrokes arm a single timer on the running event loop; when it fires the
current text is looked up. Every lookup gets a generation number and only the
newest generation may update the suggestion list.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Set

from domain.models import SearchState, SearchSuggestion
from services.geocoding import search_places
from settings import settings

logger = logging.getLogger(__name__)

SearchLookup = Callable[[str], Awaitable[List[SearchSuggestion]]]


async def _default_search(query: str) -> List[SearchSuggestion]:
    return await asyncio.to_thread(search_places, query)


class PlaceSearchSession:
    def __init__(
        self,
        search: Optional[SearchLookup] = None,
        debounce_seconds: Optional[float] = None,
        min_query_length: Optional[int] = None,
    ):
        self._search = search or _default_search
        self.debounce_seconds = (
            settings.SEARCH_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )
        self.min_query_length = (
            settings.SEARCH_MIN_QUERY_LENGTH if min_query_length is None else min_query_length
        )
        self.text = ""
        self.suggestions: List[SearchSuggestion] = []
        self.state = SearchState.IDLE
        self._timer: Optional[asyncio.TimerHandle] = None
        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def searching(self) -> bool:
        return self.state == SearchState.SEARCHING

    @property
    def debounce_pending(self) -> bool:
        return self._timer is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _invalidate(self) -> None:
        self._generation += 1

    def on_text_changed(self, text: str) -> None:
        """Record new search text and restart the debounce timer."""
        if self._closed:
            raise RuntimeError("search session is closed")
        self.text = text
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._fire)
        self.state = SearchState.TYPING

    def _fire(self) -> None:
        self._timer = None
        query = self.text
        self._invalidate()
        if len(query) < self.min_query_length:
            self.suggestions = []
            self.state = SearchState.IDLE
            return

        generation = self._generation
        self.state = SearchState.SEARCHING
        task = asyncio.ensure_future(self._run(generation, query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, generation: int, query: str) -> None:
        try:
            results = await self._search(query)
        except Exception as exc:
            logger.warning("Place search failed for q=%r: %s", query, exc)
            results = []
        if generation != self._generation:
            logger.debug("Discarding stale search results for q=%r", query)
            return
        self.suggestions = list(results or [])
        self.state = SearchState.RESULTS if self.suggestions else SearchState.NO_RESULTS

    def find(self, suggestion_id: str) -> Optional[SearchSuggestion]:
        for suggestion in self.suggestions:
            if suggestion.id == suggestion_id:
                return suggestion
        return None

    def select(self, suggestion_id: str) -> Optional[SearchSuggestion]:
        """Adopt a suggestion: its full name becomes the search text."""
        suggestion = self.find(suggestion_id)
        if suggestion is None:
            return None
        self._cancel_timer()
        self._invalidate()
        self.text = suggestion.name
        self.suggestions = []
        self.state = SearchState.IDLE
        return suggestion

    def clear_text(self) -> None:
        self._cancel_timer()
        self._invalidate()
        self.text = ""
        self.suggestions = []
        self.state = SearchState.IDLE

    async def wait_for_pending(self) -> None:
        """Wait until no lookup task is outstanding."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel the debounce timer and drop any in-flight results."""
        self._cancel_timer()
        self._invalidate()
        self._closed = True
        self.state = SearchState.IDLE
