"""
Map visualisation utilities for DayRoute.

This module provides a helper function to build an interactive map
using the Folium library. It renders numbered markers for each resolved
stop of a route and draws the visiting order as a straight-line
polyline. The map can be embedded in the Streamlit app via
``streamlit_folium``.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import folium

from .models import Coordinate

MARKER_STYLE = (
    "font-size: 12px; color: white; background-color: #4A9E7E; border-radius: 50%; "
    "width: 24px; height: 24px; text-align: center; line-height: 24px;"
)


def create_route_map(
    stops: Sequence[Tuple[str, Coordinate]],
    start: Optional[Coordinate] = None,
) -> folium.Map:
    """Create a Folium map with numbered markers and a polyline for the route.

    Args:
        stops: ``(label, coordinate)`` pairs in visiting order. Unresolved
            jobs should be left out.
        start: Optional depot drawn as a home marker at the route start.

    Returns:
        A Folium Map object ready for display.
    """
    points = [coord for _, coord in stops]
    if start is not None:
        points = [start] + points
    if not points:
        return folium.Map(location=[0, 0], zoom_start=2)
    avg_lat = sum(p.lat for p in points) / len(points)
    avg_lng = sum(p.lng for p in points) / len(points)
    m = folium.Map(location=[avg_lat, avg_lng], zoom_start=11, tiles="OpenStreetMap")
    if start is not None:
        folium.Marker(
            location=[start.lat, start.lng],
            popup=folium.Popup("Start", parse_html=True),
            icon=folium.Icon(icon="home"),
        ).add_to(m)
    for order, (label, coord) in enumerate(stops, start=1):
        folium.Marker(
            location=[coord.lat, coord.lng],
            popup=folium.Popup(f"{order}. {label}", parse_html=True),
            icon=folium.DivIcon(html=f"<div style='{MARKER_STYLE}'>{order}</div>"),
        ).add_to(m)
    if len(points) > 1:
        folium.PolyLine([[p.lat, p.lng] for p in points], color="#4A9E7E", weight=4, opacity=0.6).add_to(m)
    return m
