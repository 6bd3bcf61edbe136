"""
DayRoute package initialization.

This package orders a cleaning team's visits for one day so the team
drives less, and reports the estimated travel between stops.
Components include coordinate resolution, distance estimation, route
optimisation, travel summaries, scheduling, persistence and map
visualisation.

Modules:
    models        – Job, Client and Coordinate records and day selection.
    locations     – Built-in suburb coordinate table.
    geocode       – Coordinate resolution and Nominatim address geocoding.
    routing       – Haversine distances and drive-time estimates.
    optimisation  – Nearest neighbour ordering of a day's jobs.
    summary       – Per-leg and total travel statistics.
    schedule      – New start times for an ordered route.
    store         – Supabase job store and JSON snapshots.
    apply         – Sequential write-back of a route to the calendar.
    config        – Settings and logging setup.
    visualisation – Folium based map creation utilities.

Distances are straight-line estimates and drive times assume a constant
30 km/h average speed; neither comes from a routing engine.
"""

from .geocode import CoordinateResolver, parse_coordinate, resolve_coordinate
from .locations import DEFAULT_LOCATIONS, LocationTable
from .models import Client, Coordinate, Job, select_day_jobs
from .optimisation import optimise_route
from .routing import estimate_drive_minutes, haversine_distance
from .summary import Leg, RouteSummary, summarise_route

__all__ = [
    "Client",
    "Coordinate",
    "CoordinateResolver",
    "DEFAULT_LOCATIONS",
    "Job",
    "Leg",
    "LocationTable",
    "RouteSummary",
    "estimate_drive_minutes",
    "haversine_distance",
    "optimise_route",
    "parse_coordinate",
    "resolve_coordinate",
    "select_day_jobs",
    "summarise_route",
]
