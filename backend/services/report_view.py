"""
Results screen.

Turns a report payload into a ReportView. Every field lookup tolerates a
missing or malformed payload and degrades to "N/A".
"""
import asyncio
from typing import Any, List, Optional, Sequence, Tuple

from domain.models import (
    Coordinate,
    MetricField,
    MetricPanel,
    ReportPayload,
    ReportView,
    SelectedArea,
    Tone,
)
from services.coordinates import format_coordinates, resolve_coordinates
from services.place_name import PlaceNameResolver, display_place_name
from services.recommendations import parse_recommendations
from settings import settings


NOT_AVAILABLE = "N/A"

# (field key, label, unit suffix, is verdict)
FieldSpec = Tuple[str, str, str, bool]

METRIC_PANELS: Sequence[Tuple[str, str, Sequence[FieldSpec]]] = (
    (
        "solar_potential",
        "Solar Potential",
        (
            ("average_radiation", "Average Radiation", " kWh/m²/day", False),
            ("result", "Result", "", True),
        ),
    ),
    (
        "afforestation_feasibility",
        "Afforestation Feasibility",
        (
            ("green_cover_percent", "Green Cover", "%", False),
            ("barren_land_percent", "Barren Land", "%", False),
            ("afforestation_potential_percent", "Afforestation Potential", "%", False),
            ("feasibility", "Feasibility", "", True),
        ),
    ),
    (
        "water_harvesting",
        "Water Harvesting",
        (
            ("rainfall_score", "Rainfall Score", "", False),
            ("soil_score", "Soil Score", "", False),
            ("slope_score", "Slope Score", "", False),
            ("water_harvesting_score", "Water Harvesting Score", "", False),
            ("feasibility", "Feasibility", "", True),
        ),
    ),
    (
        "windmill_feasibility",
        "Windmill Feasibility",
        (
            ("wind_score", "Wind Score", "", False),
            ("slope_score", "Slope Score", "", False),
            ("land_score", "Land Score", "", False),
            ("windmill_feasibility_score", "Windmill Feasibility Score", "", False),
            ("feasibility", "Feasibility", "", True),
        ),
    ),
)


def _group(report: Any, key: str) -> dict:
    if not isinstance(report, dict):
        return {}
    group = report.get(key)
    return group if isinstance(group, dict) else {}


def format_metric_value(value: Any, unit: str = "") -> str:
    """Render a metric value, or N/A when it is missing."""
    if value is None or value == "" or isinstance(value, (dict, list)):
        return NOT_AVAILABLE
    return f"{value}{unit}"


def verdict_tone(value: Any) -> Tone:
    text = value if isinstance(value, str) else ""
    if "High" in text:
        return Tone.HIGH
    if "Medium" in text:
        return Tone.MEDIUM
    return Tone.LOW


def build_metric_panels(report: Any) -> List[MetricPanel]:
    panels: List[MetricPanel] = []
    for key, title, field_specs in METRIC_PANELS:
        group = _group(report, key)
        fields = []
        for field_key, label, unit, is_verdict in field_specs:
            raw = group.get(field_key)
            fields.append(
                MetricField(
                    label=label,
                    value=format_metric_value(raw, unit),
                    tone=verdict_tone(raw) if is_verdict else None,
                )
            )
        panels.append(MetricPanel(key=key, title=title, fields=fields))
    return panels


class ReportRenderer:
    """One results screen: a payload plus what the selector knew about the point."""

    def __init__(
        self,
        payload: Optional[ReportPayload],
        selected_area: Optional[SelectedArea] = None,
        resolver: Optional[PlaceNameResolver] = None,
        map_zoom: Optional[int] = None,
    ):
        self.payload = payload if isinstance(payload, dict) else None
        self.selected_area = selected_area or SelectedArea()
        self.resolver = resolver or PlaceNameResolver()
        self.map_zoom = map_zoom or settings.DEFAULT_MAP_ZOOM
        if self.payload is None:
            self.coordinate = Coordinate()
        else:
            self.coordinate = resolve_coordinates(self.selected_area, self.payload)

    def start(self) -> Optional[asyncio.Task]:
        """Kick off the place-name lookup if one is needed."""
        return self.resolver.ensure(self.selected_area, self.payload, self.coordinate)

    def close(self) -> None:
        self.resolver.close()

    def view(self) -> ReportView:
        payload = self.payload or {}
        recommendations = payload.get("recommendations")
        return ReportView(
            has_data=self.payload is not None,
            place_name=display_place_name(self.selected_area, self.payload, self.resolver.name),
            name_loading=self.resolver.loading,
            coordinates_text=format_coordinates(self.coordinate),
            coordinate=self.coordinate,
            show_map=self.coordinate.as_tuple() is not None,
            map_zoom=self.map_zoom,
            panels=build_metric_panels(payload.get("report")),
            recommendations=parse_recommendations(
                recommendations if isinstance(recommendations, str) else ""
            ),
        )
