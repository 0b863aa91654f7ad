"""
Location selector API routes.

Each selector is a screen instance; the client forwards input events and
draws the returned state.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from api.sessions import register_result, selectors_db
from services.coordinates import InvalidCoordinatesError
from services.location_selector import LocationSelector
from services.render_html import render_selector_html
from services.report_client import ReportServiceError
from services.report_view import ReportRenderer

router = APIRouter()
logger = logging.getLogger(__name__)


class SuggestionResponse(BaseModel):
    id: str
    name: str
    short_name: str
    lat: float
    lon: float
    type: Optional[str] = None
    importance: Optional[float] = None


class SelectorStateResponse(BaseModel):
    id: str
    search_text: str
    search_state: str
    searching: bool
    suggestions: List[SuggestionResponse]
    map_center: List[float]
    map_zoom: int
    marker: List[float]
    latitude: str
    longitude: str
    loading: bool
    loading_message: Optional[str] = None
    error: str


class SearchTextRequest(BaseModel):
    text: str


class MapClickRequest(BaseModel):
    latitude: float
    longitude: float


class CoordinateTextRequest(BaseModel):
    latitude: Optional[str] = None
    longitude: Optional[str] = None


class SubmitResponse(BaseModel):
    result_id: str
    selected_area: Dict[str, Any]


def _get_selector(selector_id: str) -> LocationSelector:
    selector = selectors_db.get(selector_id)
    if selector is None:
        raise HTTPException(status_code=404, detail="Selector not found")
    return selector


def _state(selector_id: str, selector: LocationSelector) -> SelectorStateResponse:
    return SelectorStateResponse(id=selector_id, **selector.snapshot())


@router.post("", response_model=SelectorStateResponse)
async def create_selector():
    """Open a new selector screen."""
    selector_id = str(uuid.uuid4())
    selector = LocationSelector()
    selectors_db[selector_id] = selector
    logger.info("Opened selector %s", selector_id)
    return _state(selector_id, selector)


@router.get("/{selector_id}", response_model=SelectorStateResponse)
async def get_selector(selector_id: str):
    return _state(selector_id, _get_selector(selector_id))


@router.get("/{selector_id}/html", response_class=HTMLResponse)
async def get_selector_html(selector_id: str):
    return render_selector_html(_get_selector(selector_id).snapshot())


@router.put("/{selector_id}/search", response_model=SelectorStateResponse)
async def update_search_text(selector_id: str, body: SearchTextRequest):
    """Keystroke in the search box; restarts the debounce timer."""
    selector = _get_selector(selector_id)
    selector.on_search_text(body.text)
    return _state(selector_id, selector)


@router.post("/{selector_id}/map-click", response_model=SelectorStateResponse)
async def map_click(selector_id: str, body: MapClickRequest):
    selector = _get_selector(selector_id)
    selector.on_map_click(body.latitude, body.longitude)
    return _state(selector_id, selector)


@router.post("/{selector_id}/suggestions/{suggestion_id}/select", response_model=SelectorStateResponse)
async def select_suggestion(selector_id: str, suggestion_id: str):
    selector = _get_selector(selector_id)
    if selector.select_suggestion(suggestion_id) is None:
        raise HTTPException(status_code=404, detail="Suggestion not found")
    return _state(selector_id, selector)


@router.put("/{selector_id}/coordinates", response_model=SelectorStateResponse)
async def update_coordinates(selector_id: str, body: CoordinateTextRequest):
    selector = _get_selector(selector_id)
    selector.set_coordinate_text(latitude=body.latitude, longitude=body.longitude)
    return _state(selector_id, selector)


@router.post("/{selector_id}/submit", response_model=SubmitResponse)
async def submit(selector_id: str):
    """
    Submit the selected point for a report.

    On success the selector screen is closed and a results screen opened.
    """
    selector = _get_selector(selector_id)
    if selector.loading:
        raise HTTPException(status_code=409, detail="A report request is already in progress")

    try:
        handoff = await selector.submit()
    except InvalidCoordinatesError as exc:
        raise HTTPException(status_code=422, detail=exc.message)
    except ReportServiceError as exc:
        raise HTTPException(status_code=502, detail=exc.message)

    if handoff is None:
        raise HTTPException(status_code=409, detail="A report request is already in progress")

    result_id = str(uuid.uuid4())
    renderer = ReportRenderer(handoff.payload, handoff.selected_area)
    renderer.start()
    register_result(result_id, renderer)

    selector.close()
    selectors_db.pop(selector_id, None)
    logger.info("Selector %s submitted; opened result %s", selector_id, result_id)
    return SubmitResponse(result_id=result_id, selected_area=handoff.selected_area.to_dict())


@router.delete("/{selector_id}")
async def close_selector(selector_id: str):
    """Tear down a selector; any pending search timer is cancelled."""
    selector = selectors_db.pop(selector_id, None)
    if selector is None:
        raise HTTPException(status_code=404, detail="Selector not found")
    selector.close()
    return {"success": True}
