"""
Plain data records for DayRoute.

Jobs and clients come from the scheduling database (or an exported
snapshot) as dictionaries whose keys may use either snake_case or
camelCase spelling. ``Job.from_record`` and ``Client.from_record``
normalise both into small dataclasses that the rest of the package
works with.

``select_day_jobs`` performs the pre-filtering that the route optimiser
expects its callers to do: breaks are dropped and only the jobs for one
day (and optionally one team) are kept.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


def _parse_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_coordinate(lat: Any, lng: Any) -> Optional[Coordinate]:
    """Parse a latitude/longitude pair that may arrive as text.

    Returns ``None`` unless both values are finite numbers within
    ±90 and ±180 degrees respectively.
    """
    lat_value = _parse_number(lat)
    lng_value = _parse_number(lng)
    if lat_value is None or lng_value is None:
        return None
    if not (-90.0 <= lat_value <= 90.0 and -180.0 <= lng_value <= 180.0):
        return None
    return Coordinate(lat_value, lng_value)


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first non-empty value found under any of ``keys``."""
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return default


@dataclass
class Client:
    id: str
    lat: Any = None
    lng: Any = None
    suburb: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Client":
        return cls(
            id=str(record["id"]),
            lat=_pick(record, "lat", "latitude"),
            lng=_pick(record, "lng", "lon", "longitude"),
            suburb=_pick(record, "suburb"),
            name=_pick(record, "name", "client_name", "clientName"),
            address=_pick(record, "address"),
        )


@dataclass
class Job:
    """A scheduled visit.

    ``travel_km`` and ``travel_mins`` are only set on jobs returned by
    :func:`dayroute.optimisation.optimise_route` and describe the travel
    from the previous stop (or the start coordinate).
    """

    id: str
    client_id: Optional[str] = None
    suburb: Optional[str] = None
    start_time: Optional[str] = None
    duration: int = 0
    date: Optional[str] = None
    is_break: bool = False
    team_id: Optional[str] = None
    client_name: Optional[str] = None
    travel_km: Optional[float] = None
    travel_mins: Optional[int] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Job":
        client_id = _pick(record, "client_id", "clientId")
        team_id = _pick(record, "team_id", "teamId", "team")
        duration = _pick(record, "duration", default=0)
        return cls(
            id=str(record["id"]),
            client_id=str(client_id) if client_id is not None else None,
            suburb=_pick(record, "suburb"),
            start_time=_pick(record, "start_time", "startTime"),
            duration=int(duration),
            date=_pick(record, "date"),
            is_break=bool(record.get("is_break") or record.get("isBreak")),
            team_id=str(team_id) if team_id is not None else None,
            client_name=_pick(record, "client_name", "clientName"),
        )

    @property
    def display_name(self) -> Optional[str]:
        return self.client_name or None

    @property
    def has_travel(self) -> bool:
        return self.travel_km is not None

    def with_travel(self, km: float, mins: int) -> "Job":
        return replace(self, travel_km=km, travel_mins=mins)


def as_job(job: Union[Job, Mapping[str, Any]]) -> Job:
    """Return ``job`` as a :class:`Job`, converting raw records."""
    if isinstance(job, Mapping):
        return Job.from_record(job)
    return job


def as_client(client: Union[Client, Mapping[str, Any]]) -> Client:
    if isinstance(client, Mapping):
        return Client.from_record(client)
    return client


def index_clients(clients: Iterable[Union[Client, Mapping[str, Any]]]) -> Dict[str, Client]:
    """Map client id to client, converting raw records. Later duplicates win."""
    index = {}
    for client in clients:
        client = as_client(client)
        index[client.id] = client
    return index


def select_day_jobs(jobs: Iterable[Job], date: str, team: Optional[str] = None) -> List[Job]:
    """Return the non-break jobs for ``date`` (and ``team``) sorted by start time.

    The sort is stable, so jobs sharing a start time keep their input
    order. Jobs without a start time are placed last.
    """
    selected = [
        job for job in jobs
        if not job.is_break
        and job.date == date
        and (team is None or job.team_id == team)
    ]
    selected.sort(key=lambda job: (job.start_time is None, job.start_time or ""))
    return selected
