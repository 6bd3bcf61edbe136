"""
Travel summary for an optimised route.

A summary lists one leg per job that carries travel details, together
with the total distance and total drive time. Totals are sums of the
per-leg values as shown to the user: total minutes add up the already
rounded leg minutes, so they can differ by a few minutes from an
estimate made on the total distance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from .models import Job
from .routing import DRIVE_TIME_NOTE, round_km

START_LABEL = "Start"
UNKNOWN_LABEL = "?"


@dataclass
class Leg:
    from_label: str
    to_label: str
    km: float
    mins: int


@dataclass
class RouteSummary:
    total_km: float = 0.0
    total_minutes: int = 0
    legs: List[Leg] = field(default_factory=list)


def summarise_route(route: Sequence[Job]) -> RouteSummary:
    """Build a :class:`RouteSummary` from the output of ``optimise_route``."""
    legs = []
    for i, job in enumerate(route):
        if not job.has_travel:
            continue
        previous = route[i - 1].display_name if i > 0 else None
        legs.append(Leg(
            from_label=previous or START_LABEL,
            to_label=job.display_name or UNKNOWN_LABEL,
            km=job.travel_km,
            mins=job.travel_mins or 0,
        ))
    return RouteSummary(
        total_km=round_km(sum(leg.km for leg in legs)),
        total_minutes=sum(leg.mins for leg in legs),
        legs=legs,
    )


def format_summary_text(summary: RouteSummary) -> str:
    """Format a summary for display or messaging."""
    lines = ["Route summary:\n"]
    for i, leg in enumerate(summary.legs, start=1):
        lines.append(f"{i}. {leg.from_label} -> {leg.to_label}: {leg.km:.1f} km, ~{leg.mins} min")
    total_h, total_m = divmod(summary.total_minutes, 60)
    lines.append(f"\nTotal distance: {summary.total_km:.1f} km")
    lines.append(f"Total drive time: ~{total_h}h {total_m}m")
    lines.append(DRIVE_TIME_NOTE)
    return "\n".join(lines)
