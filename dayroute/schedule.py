"""
Schedule calculation utilities for DayRoute.

This module turns an optimised route into new start and end times for
each job. The day begins at a given time (or at the earliest start time
already booked for the day), each job lasts its booked duration, and the
estimated drive from the previous stop is added in between.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Sequence, Union

from .models import Job

DEFAULT_DAY_START = time(hour=8, minute=0)


@dataclass
class StopSchedule:
    job_id: str
    start: datetime
    end: datetime
    travel_mins: int = 0


def parse_time_string(t: str) -> time:
    """Parse a HH:MM (or HH:MM:SS) string into a datetime.time object."""
    parts = t.strip().split(":")
    h, m = int(parts[0]), int(parts[1])
    return time(hour=h, minute=m)


def format_time(dt: datetime) -> str:
    return dt.strftime("%H:%M")


def earliest_start(route: Sequence[Job]) -> Optional[time]:
    times = [parse_time_string(job.start_time) for job in route if job.start_time]
    return min(times) if times else None


def schedule_route(
    route: Sequence[Job],
    day_start: Union[time, str, None] = None,
) -> List[StopSchedule]:
    """Generate start/end times for the jobs of a route.

    Args:
        route: Jobs in visiting order, as returned by ``optimise_route``.
        day_start: Start of the first job. Defaults to the earliest start
            time found on the route's jobs, then to 08:00.

    Returns:
        One ``StopSchedule`` per job, in route order.
    """
    if isinstance(day_start, str):
        day_start = parse_time_string(day_start)
    if day_start is None:
        day_start = earliest_start(route) or DEFAULT_DAY_START
    # Only the time of day matters; anchor it on a fixed date.
    current = datetime.combine(date(2000, 1, 1), day_start)

    schedule: List[StopSchedule] = []
    for idx, job in enumerate(route):
        travel = job.travel_mins or 0
        # The first stop starts at day_start; travel to it happens beforehand.
        if idx > 0:
            current += timedelta(minutes=travel)
        end = current + timedelta(minutes=job.duration)
        schedule.append(StopSchedule(job_id=job.id, start=current, end=end, travel_mins=travel))
        current = end
    return schedule
