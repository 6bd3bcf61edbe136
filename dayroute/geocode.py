"""
Coordinate resolution and geocoding for DayRoute.

A job is placed on the map using, in order of preference:

1. the latitude/longitude stored on its client, when both parse as
   valid numbers;
2. the job's suburb (or the client's suburb) looked up in a
   :class:`~dayroute.locations.LocationTable`.

Jobs that match neither are "unresolved" and the optimiser leaves them
at the end of the route.

Client coordinates can be filled in ahead of time from street addresses
with :func:`geocode_clients`, which uses OpenStreetMap's Nominatim
service through geopy. Results are cached in memory to avoid repeated
queries for the same address.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from geopy.exc import GeocoderTimedOut, GeopyError
from geopy.geocoders import Nominatim

from .locations import DEFAULT_LOCATIONS, LocationTable
from .models import Client, Coordinate, Job, as_client, as_job, index_clients, parse_coordinate

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "dayroute_planner"

_geocoder: Optional[Nominatim] = None
_user_agent = DEFAULT_USER_AGENT


class CoordinateResolver:
    """Resolve jobs to coordinates against a fixed set of clients and locations."""

    def __init__(self, clients: Iterable[Client], locations: Optional[LocationTable] = None):
        if isinstance(clients, Mapping):
            clients = clients.values()
        self._clients = index_clients(clients)
        self._locations = locations if locations is not None else DEFAULT_LOCATIONS

    def resolve(self, job: Union[Job, Mapping[str, Any]]) -> Optional[Coordinate]:
        job = as_job(job)
        client = self._clients.get(job.client_id) if job.client_id is not None else None
        if client is not None:
            coord = parse_coordinate(client.lat, client.lng)
            if coord is not None:
                return coord
        suburb = job.suburb or (client.suburb if client is not None else None)
        return self._locations.lookup(suburb)


def resolve_coordinate(
    job: Union[Job, Mapping[str, Any]],
    clients: Iterable[Client],
    locations: Optional[LocationTable] = None,
) -> Optional[Coordinate]:
    """Resolve a single job. See :class:`CoordinateResolver`."""
    return CoordinateResolver(clients, locations).resolve(job)


def set_user_agent(user_agent: str) -> None:
    """Set the Nominatim user agent used by subsequent lookups."""
    global _geocoder, _user_agent
    if user_agent != _user_agent:
        _user_agent = user_agent
        _geocoder = None
        geocode_address.cache_clear()


def _get_geocoder() -> Nominatim:
    """Return a singleton Nominatim geocoder instance."""
    global _geocoder
    if _geocoder is None:
        # Nominatim's usage policy requires an identifying user agent.
        _geocoder = Nominatim(user_agent=_user_agent)
    return _geocoder


@lru_cache(maxsize=256)
def geocode_address(address: str) -> Optional[Coordinate]:
    """Geocode an address, returning ``None`` when it cannot be found.

    A timeout is retried once with a longer limit. Other geopy errors
    are logged and treated as "not found".
    """
    geocoder = _get_geocoder()
    try:
        try:
            location = geocoder.geocode(address, timeout=10)
        except GeocoderTimedOut:
            location = geocoder.geocode(address, timeout=20)
    except GeopyError as exc:
        logger.warning("Geocoding failed for %r: %s", address, exc)
        return None
    if location is None:
        return None
    return Coordinate(location.latitude, location.longitude)


def geocode_clients(
    clients: Iterable[Client],
    geocoder: Callable[[str], Optional[Coordinate]] = geocode_address,
) -> List[Client]:
    """Return ``clients`` with missing coordinates filled in from their address.

    Clients that already have usable coordinates, or that have no
    address, are returned unchanged.
    """
    result = []
    for client in clients:
        client = as_client(client)
        if parse_coordinate(client.lat, client.lng) is None and client.address:
            coord = geocoder(client.address)
            if coord is not None:
                logger.debug("Geocoded client %s to %s", client.id, coord)
                client = replace(client, lat=coord.lat, lng=coord.lng)
            else:
                logger.info("No coordinates found for client %s", client.id)
        result.append(client)
    return result
