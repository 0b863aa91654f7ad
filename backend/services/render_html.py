"""
HTML rendering for the selector and results screens.

Markup only: state comes from LocationSelector.snapshot() and ReportView.
The map is emitted as a placeholder element carrying center/zoom/marker data
attributes for whatever tile widget the page loads.
"""
from html import escape
from typing import Any, Dict, List

from domain.models import MetricPanel, RecommendationSection, ReportView

BASE_CSS = """
    body { font-family: 'Google Sans', sans-serif; background: #0f0617; color: #e5e7eb; margin: 0; }
    main { max-width: 72rem; margin: 0 auto; padding: 2rem 1rem; }
    h1 { font-weight: 300; font-size: 40px; color: white; text-align: center; }
    .card { background: #170821; border: 1px solid #2d1b4e; border-radius: 0.5rem; padding: 1.5rem; margin-bottom: 1.5rem; }
    .map { height: 300px; width: 100%; border-radius: 0.5rem; background: #1e0a30; }
    .error { color: #f87171; }
    .tone-high { color: #4ade80; }
    .tone-medium { color: #facc15; }
    .tone-low { color: #f87171; }
    .muted { color: #9ca3af; }
"""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <style>{BASE_CSS}</style>
</head>
<body>
<main>
{body}
</main>
</body>
</html>
"""


def _render_map(center: List[float], zoom: int, marker: List[float], interactive: bool) -> str:
    return (
        f'<div class="map" data-center-lat="{center[0]}" data-center-lon="{center[1]}" '
        f'data-zoom="{zoom}" data-marker-lat="{marker[0]}" data-marker-lon="{marker[1]}" '
        f'data-interactive="{"true" if interactive else "false"}"></div>'
    )


def _render_suggestions(suggestions: List[Dict[str, Any]]) -> str:
    if not suggestions:
        return ""
    items = "\n".join(
        f"""<li data-suggestion-id="{escape(str(s["id"]))}">
            <div><strong>{escape(s["short_name"])}</strong></div>
            <div class="muted">{escape(s["name"])}</div>
        </li>"""
        for s in suggestions
    )
    return f'<ul class="suggestions">{items}</ul>'


def render_selector_html(state: Dict[str, Any]) -> str:
    """Render the map/search/coordinate form screen."""
    marker = state["marker"]
    error = state.get("error") or ""
    loading = bool(state.get("loading"))
    spinner = '<span class="spinner">Searching...</span>' if state.get("searching") else ""

    overlay = ""
    if loading:
        overlay = f'<div class="card loading-overlay"><p>{escape(state.get("loading_message") or "")}</p></div>'

    body = f"""
    <h1>Select Your Area for Analysis</h1>
    <div class="card">
        {_render_map(state["map_center"], state["map_zoom"], marker, interactive=True)}
        <p class="muted">Click anywhere on the map to select a location for sustainability analysis</p>
        <p class="muted">Lat: {marker[0]:.4f}, Lng: {marker[1]:.4f}</p>
    </div>
    <div class="card">
        <h3>Search Location</h3>
        <input type="text" name="search" value="{escape(state.get("search_text") or "")}"
               placeholder="Search for any place (city, landmark, address)...">
        {spinner}
        {_render_suggestions(state.get("suggestions") or [])}
        <p class="muted">Type to search any location worldwide</p>
        <form method="post">
            <label for="latitude">Latitude</label>
            <input id="latitude" name="latitude" type="number" step="any"
                   value="{escape(state.get("latitude") or "")}" placeholder="e.g., 34.0522">
            <label for="longitude">Longitude</label>
            <input id="longitude" name="longitude" type="number" step="any"
                   value="{escape(state.get("longitude") or "")}" placeholder="e.g., -118.2437">
            {f'<p class="error">{escape(error)}</p>' if error else ''}
            <button type="submit"{" disabled" if loading else ""}>{"Loading..." if loading else "Get Sustainability Report"}</button>
        </form>
    </div>
    {overlay}
    """
    return _page("Select Your Area for Analysis", body)


def _render_panel(panel: MetricPanel) -> str:
    rows = []
    for f in panel.fields:
        css = f' class="tone-{f.tone.value}"' if f.tone is not None else ""
        rows.append(
            f'<div class="metric"><span class="muted">{escape(f.label)}</span> '
            f"<span{css}>{escape(f.value)}</span></div>"
        )
    return f"""<section class="card panel-{panel.key}">
        <h2>{escape(panel.title)}</h2>
        {"".join(rows)}
    </section>"""


def _render_recommendations(sections: List[RecommendationSection]) -> str:
    if not sections:
        return '<p class="muted">No recommendations available.</p>'
    parts = []
    for section in sections:
        items = "".join(f"<li>{escape(item)}</li>" for item in section.items)
        parts.append(f"<div><h3>{escape(section.title)}</h3><ul>{items}</ul></div>")
    return "\n".join(parts)


def render_report_html(view: ReportView) -> str:
    """Render the results screen."""
    if not view.has_data:
        body = """
        <div class="card">
            <p class="error">No data available. Please try again.</p>
            <a href="/">Back to Map</a>
        </div>
        """
        return _page("Sustainability Analysis Report", body)

    coords_line = ""
    if view.coordinates_text:
        coords_line = f'<p class="muted">Coordinates: {escape(view.coordinates_text)}</p>'

    map_block = ""
    if view.show_map:
        point = list(view.coordinate.as_tuple())
        map_block = f'<div class="card">{_render_map(point, view.map_zoom, point, interactive=False)}</div>'

    panels = "\n".join(_render_panel(panel) for panel in view.panels)

    body = f"""
    <h1>Sustainability Analysis Report</h1>
    <div class="card">
        <span class="muted">Selected Area:</span>
        <span>{escape(view.place_label)}</span>
        {coords_line}
    </div>
    {map_block}
    {panels}
    <section class="card">
        <h2>AI Recommendations</h2>
        {_render_recommendations(view.recommendations)}
    </section>
    <p><a href="/">Back to Map</a></p>
    """
    return _page("Sustainability Analysis Report", body)
