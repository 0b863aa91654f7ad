import asyncio

import pytest

from domain.models import SearchState, SearchSuggestion
from services.search_session import PlaceSearchSession

DEBOUNCE = 0.05


def _suggestion(sid, name="Cubbon Park, Bengaluru", lat=12.9763, lon=77.5929):
    return SearchSuggestion(id=sid, name=name, lat=lat, lon=lon, type="park", importance=0.5)


class FakeSearch:
    """Async search stub; per-query delays let tests reorder completions."""

    def __init__(self, results=None, delays=None, error=None):
        self.queries = []
        self.results = results or {}
        self.delays = delays or {}
        self.error = error

    async def __call__(self, query):
        self.queries.append(query)
        await asyncio.sleep(self.delays.get(query, 0))
        if self.error is not None:
            raise self.error
        return self.results.get(query, [])


def test_burst_of_keystrokes_issues_one_request():
    search = FakeSearch(results={"abc": [_suggestion("1")]})
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("a")
        session.on_text_changed("ab")
        session.on_text_changed("abc")
        assert session.state == SearchState.TYPING
        await asyncio.sleep(DEBOUNCE * 3)
        await session.wait_for_pending()

    asyncio.run(scenario())
    assert search.queries == ["abc"]
    assert [s.id for s in session.suggestions] == ["1"]
    assert session.state == SearchState.RESULTS


def test_pause_between_keystrokes_issues_two_requests():
    search = FakeSearch()
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("ab")
        await asyncio.sleep(DEBOUNCE * 3)
        session.on_text_changed("abc")
        await asyncio.sleep(DEBOUNCE * 3)
        await session.wait_for_pending()

    asyncio.run(scenario())
    assert search.queries == ["ab", "abc"]
    assert session.state == SearchState.NO_RESULTS


def test_short_query_clears_without_request():
    search = FakeSearch(results={"ab": [_suggestion("1")]})
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("ab")
        await asyncio.sleep(DEBOUNCE * 3)
        await session.wait_for_pending()
        assert session.suggestions
        session.on_text_changed("a")
        await asyncio.sleep(DEBOUNCE * 3)

    asyncio.run(scenario())
    assert search.queries == ["ab"]
    assert session.suggestions == []
    assert session.state == SearchState.IDLE


def test_stale_response_does_not_overwrite_newer_results():
    search = FakeSearch(
        results={"ab": [_suggestion("old")], "abcd": [_suggestion("new")]},
        delays={"ab": DEBOUNCE * 4, "abcd": 0},
    )
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("ab")
        await asyncio.sleep(DEBOUNCE * 2)
        assert session.searching
        session.on_text_changed("abcd")
        await asyncio.sleep(DEBOUNCE * 2)
        await session.wait_for_pending()

    asyncio.run(scenario())
    assert search.queries == ["ab", "abcd"]
    assert [s.id for s in session.suggestions] == ["new"]


def test_search_failure_yields_empty_list():
    search = FakeSearch(error=RuntimeError("provider down"))
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("paris")
        await asyncio.sleep(DEBOUNCE * 3)
        await session.wait_for_pending()

    asyncio.run(scenario())
    assert session.suggestions == []
    assert session.state == SearchState.NO_RESULTS


def test_select_sets_full_name_and_clears_suggestions():
    match = _suggestion("42", name="Lalbagh, Bengaluru, Karnataka")
    search = FakeSearch(results={"lal": [match, _suggestion("43")]})
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("lal")
        await asyncio.sleep(DEBOUNCE * 3)
        await session.wait_for_pending()

    asyncio.run(scenario())
    assert session.select("missing") is None
    chosen = session.select("42")
    assert chosen is match
    assert session.text == "Lalbagh, Bengaluru, Karnataka"
    assert session.suggestions == []
    assert session.state == SearchState.IDLE


def test_clear_text_cancels_pending_debounce():
    search = FakeSearch()
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("delhi")
        session.clear_text()
        assert not session.debounce_pending
        await asyncio.sleep(DEBOUNCE * 3)

    asyncio.run(scenario())
    assert search.queries == []
    assert session.text == ""


def test_close_cancels_timer_and_rejects_input():
    search = FakeSearch()
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("mumbai")
        session.close()
        await asyncio.sleep(DEBOUNCE * 3)
        with pytest.raises(RuntimeError):
            session.on_text_changed("pune")

    asyncio.run(scenario())
    assert search.queries == []
    assert session.closed
    session.close()


def test_close_discards_in_flight_results():
    search = FakeSearch(results={"goa": [_suggestion("1")]}, delays={"goa": DEBOUNCE * 2})
    session = PlaceSearchSession(search=search, debounce_seconds=DEBOUNCE)

    async def scenario():
        session.on_text_changed("goa")
        await asyncio.sleep(DEBOUNCE * 1.5)
        session.close()
        await session.wait_for_pending()

    asyncio.run(scenario())
    assert search.queries == ["goa"]
    assert session.suggestions == []
