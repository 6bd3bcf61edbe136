"""
Distance and drive-time helpers for DayRoute.

Distances are straight-line great-circle distances computed with the
Haversine formula. Drive times are a rough estimate that assumes a
constant average speed of 30 km/h, which is about right for suburban
streets but is NOT what a routing engine would report. Anything shown to
users should say so (see :data:`DRIVE_TIME_NOTE`).

Example usage:

    noosa = Coordinate(-26.3930, 153.0900)
    mooloolaba = Coordinate(-26.6833, 153.1167)
    km = haversine_distance(noosa, mooloolaba)
    mins = estimate_drive_minutes(km)
"""

from __future__ import annotations

import math

from .models import Coordinate

EARTH_RADIUS_KM = 6371.0
AVERAGE_SPEED_KMH = 30.0
DRIVE_TIME_NOTE = (
    "Drive times are estimates assuming a 30 km/h average speed over "
    "straight-line distance, not turn-by-turn routing."
)


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Compute the great-circle distance between two coordinates in kilometers."""
    # canonical order keeps the result exactly symmetric
    if (b.lat, b.lng) < (a.lat, a.lng):
        a, b = b, a
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)
    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    h = min(h, 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def _round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_km(km: float) -> float:
    """Round a distance to one decimal place for display."""
    return _round_half_up(km, 1)


def estimate_drive_minutes(km: float) -> int:
    """Estimate whole drive minutes for ``km`` at :data:`AVERAGE_SPEED_KMH`."""
    return int(_round_half_up(km / AVERAGE_SPEED_KMH * 60))
