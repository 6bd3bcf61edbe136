"""
Reference table of named service-area locations.

When a client has no stored coordinates, a job is placed on the map by
its suburb. The built-in table covers the Sunshine Coast suburbs the
business services. A different table can be supplied, either in code or
through a JSON file (see :func:`load_location_table`), for example to
serve another region or to use a handful of fake places in tests.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .models import Coordinate, parse_coordinate


def _frozen(pairs: Mapping[str, Tuple[float, float]]) -> Mapping[str, Coordinate]:
    return MappingProxyType({name: Coordinate(lat, lng) for name, (lat, lng) in pairs.items()})


SUNSHINE_COAST_SUBURBS: Mapping[str, Coordinate] = _frozen({
    "Twin Waters": (-26.6050, 153.0800),
    "Maroochydore": (-26.6552, 153.0700),
    "Kuluin": (-26.6490, 153.0490),
    "Forest Glen": (-26.7100, 152.9900),
    "Mons": (-26.7000, 152.9650),
    "Buderim": (-26.6800, 153.0550),
    "Alexandra Headland": (-26.6700, 153.1050),
    "Mooloolaba": (-26.6833, 153.1167),
    "Mountain Creek": (-26.6900, 153.0750),
    "Minyama": (-26.6900, 153.1000),
    "Caloundra": (-26.8000, 153.1333),
    "Pelican Waters": (-26.7900, 153.1200),
    "Little Mountain": (-26.7850, 153.1000),
    "Sippy Downs": (-26.7100, 153.0500),
    "Kawana Waters": (-26.7250, 153.1000),
    "Bokarina": (-26.7300, 153.1050),
    "Wurtulla": (-26.7400, 153.1100),
    "Birtinya": (-26.7450, 153.1000),
    "Parrearra": (-26.7550, 153.1100),
    "Buddina": (-26.7600, 153.1200),
    "Pacific Paradise": (-26.6200, 153.0900),
    "Mudjimba": (-26.6050, 153.0950),
    "Coolum Beach": (-26.5233, 153.0817),
    "Peregian Beach": (-26.4833, 153.0817),
    "Noosaville": (-26.3990, 153.0630),
    "Noosa Heads": (-26.3930, 153.0900),
})


@dataclass(frozen=True)
class LocationTable:
    """Immutable name -> coordinate lookup with exact, case-sensitive matching."""

    entries: Mapping[str, Coordinate] = field(default_factory=lambda: SUNSHINE_COAST_SUBURBS)

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @classmethod
    def from_pairs(cls, pairs: Mapping[str, Tuple[float, float]]) -> "LocationTable":
        return cls(_frozen(pairs))

    def lookup(self, name: Optional[str]) -> Optional[Coordinate]:
        if not name:
            return None
        return self.entries.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)


DEFAULT_LOCATIONS = LocationTable()


def load_location_table(path: str) -> LocationTable:
    """Load a table from a JSON object of ``{"Name": [lat, lng], ...}``.

    Raises:
        ValueError: if an entry is not a valid latitude/longitude pair.
    """
    with open(path, "r", encoding="utf-8") as fh:
        raw = json.load(fh)
    pairs = {}
    for name, value in raw.items():
        try:
            lat, lng = value
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid coordinate for location {name!r}: {value!r}") from exc
        coord = parse_coordinate(lat, lng)
        if coord is None:
            raise ValueError(f"Invalid coordinate for location {name!r}: {value!r}")
        pairs[name] = (coord.lat, coord.lng)
    return LocationTable.from_pairs(pairs)
