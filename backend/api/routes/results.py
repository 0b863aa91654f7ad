"""
Results API routes.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from api.sessions import discard_result, register_result, results_db
from domain.models import ReportView, SelectedArea
from services.render_html import render_report_html
from services.report_view import ReportRenderer

router = APIRouter()
logger = logging.getLogger(__name__)


class OpenResultRequest(BaseModel):
    data: Optional[Dict[str, Any]] = None
    selected_area: Optional[Dict[str, Any]] = None


class MetricFieldResponse(BaseModel):
    label: str
    value: str
    tone: Optional[str] = None


class MetricPanelResponse(BaseModel):
    key: str
    title: str
    fields: List[MetricFieldResponse]


class RecommendationSectionResponse(BaseModel):
    title: str
    items: List[str]


class ReportViewResponse(BaseModel):
    id: str
    has_data: bool
    place_name: str
    name_loading: bool
    coordinates: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    show_map: bool
    map_zoom: int
    panels: List[MetricPanelResponse]
    recommendations: List[RecommendationSectionResponse]


def view_to_response(result_id: str, view: ReportView) -> ReportViewResponse:
    """Convert a ReportView to the API response."""
    point = view.coordinate.as_tuple() if view.show_map else None
    return ReportViewResponse(
        id=result_id,
        has_data=view.has_data,
        place_name=view.place_label,
        name_loading=view.name_loading,
        coordinates=view.coordinates_text,
        latitude=point[0] if point else None,
        longitude=point[1] if point else None,
        show_map=view.show_map,
        map_zoom=view.map_zoom,
        panels=[
            MetricPanelResponse(
                key=panel.key,
                title=panel.title,
                fields=[
                    MetricFieldResponse(
                        label=f.label,
                        value=f.value,
                        tone=f.tone.value if f.tone is not None else None,
                    )
                    for f in panel.fields
                ],
            )
            for panel in view.panels
        ],
        recommendations=[
            RecommendationSectionResponse(title=s.title, items=list(s.items))
            for s in view.recommendations
        ],
    )


def _get_renderer(result_id: str) -> ReportRenderer:
    renderer = results_db.get(result_id)
    if renderer is None:
        raise HTTPException(status_code=404, detail="Result not found")
    return renderer


@router.post("", response_model=ReportViewResponse)
async def open_result(body: OpenResultRequest):
    """Open a results screen for a payload obtained elsewhere."""
    result_id = str(uuid.uuid4())
    renderer = ReportRenderer(body.data, SelectedArea.from_dict(body.selected_area))
    renderer.start()
    register_result(result_id, renderer)
    return view_to_response(result_id, renderer.view())


@router.get("/{result_id}", response_model=ReportViewResponse)
async def get_result(result_id: str):
    return view_to_response(result_id, _get_renderer(result_id).view())


@router.get("/{result_id}/html", response_class=HTMLResponse)
async def get_result_html(result_id: str):
    return render_report_html(_get_renderer(result_id).view())


@router.delete("/{result_id}")
async def close_result(result_id: str):
    if not discard_result(result_id):
        raise HTTPException(status_code=404, detail="Result not found")
    return {"success": True}
