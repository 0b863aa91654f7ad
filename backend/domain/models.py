"""
Core domain models for the sustainability site explorer.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


# Placeholder shown when no real place name is known.
SENTINEL_PLACE_NAME = "Selected Location"

# Server responses are untyped JSON; any subset of keys may be missing.
ReportPayload = Dict[str, Any]

Number = Union[int, float]


class SearchState(str, Enum):
    """Phase of the place-search interaction."""
    IDLE = "idle"
    TYPING = "typing"  # debounce pending
    SEARCHING = "searching"  # request in flight
    RESULTS = "results"
    NO_RESULTS = "no_results"


class Tone(str, Enum):
    """Colour band for a verdict field on a metric panel."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair; both fields are None when unresolved."""
    latitude: Optional[Number] = None
    longitude: Optional[Number] = None

    @property
    def is_resolved(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def as_tuple(self) -> Optional[tuple[float, float]]:
        """(lat, lon) as floats, or None when unresolved or not numeric."""
        if not self.is_resolved:
            return None
        try:
            return (float(self.latitude), float(self.longitude))
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True)
class SelectedArea:
    """What the selector knew about the point when the report was requested."""
    latitude: Optional[Number] = None
    longitude: Optional[Number] = None
    place_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SelectedArea":
        if not isinstance(data, dict):
            return cls()
        name = data.get("place_name")
        if name is None:
            name = data.get("placeName")
        return cls(
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            place_name=name,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "place_name": self.place_name,
        }


@dataclass
class SearchSuggestion:
    id: str
    name: str  # full display name from the provider
    lat: float
    lon: float
    type: Optional[str] = None
    importance: Optional[float] = None

    @property
    def short_name(self) -> str:
        """First comma-delimited segment, used as the headline of a suggestion."""
        return self.name.split(",")[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "short_name": self.short_name,
            "lat": self.lat,
            "lon": self.lon,
            "type": self.type,
            "importance": self.importance,
        }


@dataclass
class RecommendationSection:
    title: str
    items: List[str] = field(default_factory=list)


@dataclass
class MetricField:
    label: str
    value: str
    tone: Optional[Tone] = None  # only set on verdict fields


@dataclass
class MetricPanel:
    key: str
    title: str
    fields: List[MetricField] = field(default_factory=list)


@dataclass
class ReportView:
    """Everything the results screen needs to draw itself."""
    has_data: bool
    place_name: str
    name_loading: bool
    coordinates_text: str
    coordinate: Coordinate
    show_map: bool
    map_zoom: int
    panels: List[MetricPanel] = field(default_factory=list)
    recommendations: List[RecommendationSection] = field(default_factory=list)

    @property
    def place_label(self) -> str:
        return "Fetching location..." if self.name_loading else self.place_name


@dataclass
class ReportHandoff:
    """Payload passed from the selector to the results screen after a submit."""
    payload: ReportPayload
    selected_area: SelectedArea
