"""
Route optimisation for DayRoute.

The visiting order for one team's day is built with the nearest
neighbour heuristic: starting from a depot (or from the first job), the
closest unvisited job is visited next until none are left. This is a
greedy construction and the resulting route is not guaranteed to be the
shortest possible, but it is quick, predictable and good enough for the
two to eight stops a team usually covers in a day.

Jobs whose location cannot be resolved are kept in their original
order and appended after the optimised part of the route.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .geocode import CoordinateResolver
from .locations import LocationTable
from .models import Client, Coordinate, Job, as_job
from .routing import estimate_drive_minutes, haversine_distance, round_km

logger = logging.getLogger(__name__)


def nearest_unvisited(
    current: Coordinate,
    points: Sequence[Coordinate],
    visited: Sequence[bool],
) -> Tuple[int, float]:
    """Return ``(index, km)`` of the unvisited point closest to ``current``.

    Points are scanned in index order and only a strictly shorter
    distance replaces the best candidate, so equidistant points resolve
    to the lowest index.

    Raises:
        ValueError: if every point has been visited.
    """
    best_idx = -1
    best_km = float("inf")
    for idx, point in enumerate(points):
        if visited[idx]:
            continue
        km = haversine_distance(current, point)
        if best_idx < 0 or km < best_km:
            best_idx, best_km = idx, km
    if best_idx < 0:
        raise ValueError("no unvisited points left")
    return best_idx, best_km


def nearest_neighbor(
    points: Sequence[Coordinate],
    start: Optional[Coordinate] = None,
) -> List[Tuple[int, Optional[float]]]:
    """Order ``points`` with the nearest neighbour heuristic.

    Args:
        points: Coordinates to visit.
        start: Optional starting position that is not itself a point. When
            omitted, ``points[0]`` is the first stop.

    Returns:
        A list of ``(index, km)`` pairs in visiting order, where ``km`` is
        the unrounded distance from the previous position, or ``None`` for
        the first stop when no ``start`` was given.
    """
    n = len(points)
    if n == 0:
        return []
    visited = [False] * n
    order: List[Tuple[int, Optional[float]]] = []
    if start is None:
        visited[0] = True
        order.append((0, None))
        current = points[0]
    else:
        current = start
    for _ in range(n - len(order)):
        idx, km = nearest_unvisited(current, points, visited)
        visited[idx] = True
        order.append((idx, km))
        current = points[idx]
    return order


def optimise_route(
    jobs: Sequence[Union[Job, Mapping[str, Any]]],
    clients: Iterable[Union[Client, Mapping[str, Any]]],
    start: Optional[Coordinate] = None,
    locations: Optional[LocationTable] = None,
) -> List[Job]:
    """Reorder one team's jobs for a day to shorten total travel.

    ``jobs`` must already be limited to a single day and team with breaks
    removed (see :func:`dayroute.models.select_day_jobs`).

    Args:
        jobs: The day's jobs in their current order, as ``Job`` objects or
            raw records (see :meth:`Job.from_record`).
        clients: Clients referenced by the jobs, used for coordinates.
        start: Optional depot or home base to start from.
        locations: Suburb lookup table, defaults to the built-in table.

    Returns:
        The jobs in visiting order. Each job after the first (or every
        job, when ``start`` is given) carries ``travel_km`` rounded to one
        decimal and ``travel_mins`` estimated at 30 km/h. Jobs without a
        resolvable location follow, unchanged. Raw records come back as
        ``Job`` objects.
    """
    resolver = CoordinateResolver(clients, locations)
    resolvable: List[Job] = []
    points: List[Coordinate] = []
    unresolvable: List[Job] = []
    for job in map(as_job, jobs):
        coord = resolver.resolve(job)
        if coord is None:
            unresolvable.append(job)
        else:
            resolvable.append(job)
            points.append(coord)

    if unresolvable:
        logger.debug("No location for jobs %s; appended to route end", [j.id for j in unresolvable])
    if len(resolvable) <= 1:
        return resolvable + unresolvable

    route: List[Job] = []
    for idx, km in nearest_neighbor(points, start):
        job = resolvable[idx]
        if km is not None:
            job = job.with_travel(round_km(km), estimate_drive_minutes(km))
        route.append(job)
    return route + unresolvable
