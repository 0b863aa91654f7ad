from unittest.mock import MagicMock, patch

import requests

from domain.models import SearchSuggestion
from services.geocoding import (
    NOMINATIM_HEADERS,
    extract_place_name,
    reverse_geocode,
    reverse_geocode_place_name,
    search_places,
)


def _response(payload):
    mock_resp = MagicMock()
    mock_resp.json.return_value = payload
    mock_resp.raise_for_status.return_value = None
    return mock_resp


@patch("services.geocoding._session.get")
def test_search_places_maps_results(mock_get):
    mock_get.return_value = _response(
        [
            {
                "place_id": 123,
                "display_name": "Cubbon Park, Bengaluru, Karnataka, India",
                "lat": "12.9763",
                "lon": "77.5929",
                "type": "park",
                "importance": 0.61,
            },
            {"place_id": 7, "display_name": "Broken", "lat": "n/a", "lon": "1"},
        ]
    )

    results = search_places("cubbon")

    assert results == [
        SearchSuggestion(
            id="123",
            name="Cubbon Park, Bengaluru, Karnataka, India",
            lat=12.9763,
            lon=77.5929,
            type="park",
            importance=0.61,
        )
    ]
    assert results[0].short_name == "Cubbon Park"
    _, kwargs = mock_get.call_args
    assert kwargs["params"]["q"] == "cubbon"
    assert kwargs["params"]["addressdetails"] == "1"
    assert kwargs["params"]["limit"] == "10"
    assert kwargs["headers"]["User-Agent"] == NOMINATIM_HEADERS["User-Agent"]


@patch("services.geocoding._session.get")
def test_search_places_returns_empty_on_error(mock_get):
    mock_get.side_effect = requests.ConnectionError("boom")
    assert search_places("cubbon") == []


@patch("services.geocoding._session.get")
def test_search_places_ignores_non_list_body(mock_get):
    mock_get.return_value = _response({"error": "Unable to geocode"})
    assert search_places("zz") == []


@patch("services.geocoding._session.get")
def test_reverse_geocode_sends_zoom_and_user_agent(mock_get):
    mock_get.return_value = _response({"address": {"city": "Pune"}})
    data = reverse_geocode(18.52, 73.85)
    assert data == {"address": {"city": "Pune"}}
    _, kwargs = mock_get.call_args
    assert kwargs["params"]["zoom"] == "14"
    assert kwargs["params"]["lat"] == "18.52"
    assert "User-Agent" in kwargs["headers"]


@patch("services.geocoding._session.get")
def test_reverse_geocode_returns_none_on_http_error(mock_get):
    resp = _response({})
    resp.raise_for_status.side_effect = requests.HTTPError("503")
    mock_get.return_value = resp
    assert reverse_geocode(0.0, 0.0) is None
    assert reverse_geocode_place_name(0.0, 0.0) is None


def test_extract_prefers_neighbourhood_with_city_suffix():
    data = {"address": {"neighbourhood": "Indiranagar", "suburb": "East", "city": "Bengaluru", "state": "Karnataka"}}
    assert extract_place_name(data) == "Indiranagar, Bengaluru"


def test_extract_uses_state_suffix_without_city():
    data = {"address": {"town": "Manali", "county": "Kullu", "state": "Himachal Pradesh"}}
    assert extract_place_name(data) == "Manali, Himachal Pradesh"


def test_extract_city_alone_falls_back_to_state_suffix():
    data = {"address": {"city": "Mumbai", "state": "Maharashtra"}}
    assert extract_place_name(data) == "Mumbai, Maharashtra"


def test_extract_state_only_has_no_suffix():
    assert extract_place_name({"address": {"state": "Goa"}}) == "Goa"


def test_extract_falls_back_to_display_name():
    data = {"address": {"road": "MG Road"}, "display_name": "MG Road, Somewhere, India"}
    assert extract_place_name(data) == "MG Road"


def test_extract_returns_none_when_nothing_usable():
    assert extract_place_name({}) is None
    assert extract_place_name(None) is None
    assert extract_place_name({"address": None, "display_name": ""}) is None


@patch("services.geocoding._session.get")
def test_reverse_geocode_place_name(mock_get):
    mock_get.return_value = _response({"address": {"suburb": "Koramangala", "city": "Bengaluru"}})
    assert reverse_geocode_place_name(12.93, 77.62) == "Koramangala, Bengaluru"
