"""
Settings and logging setup for DayRoute.

Settings are read from a mapping (the Streamlit app passes
``st.secrets``) with environment variables as the fallback for any key
the mapping does not define.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .geocode import DEFAULT_USER_AGENT
from .locations import DEFAULT_LOCATIONS, LocationTable, load_location_table
from .models import Coordinate, parse_coordinate

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class SettingsError(ValueError):
    """Raised when configuration values are missing or inconsistent."""


@dataclass
class Settings:
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    depot: Optional[Coordinate] = None
    locations_file: Optional[str] = None
    nominatim_user_agent: str = DEFAULT_USER_AGENT
    allowed_email: str = ""
    log_level: str = "INFO"

    @property
    def has_store(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def location_table(self) -> LocationTable:
        if self.locations_file:
            return load_location_table(self.locations_file)
        return DEFAULT_LOCATIONS


def load_settings(source: Optional[Mapping[str, Any]] = None) -> Settings:
    """Build :class:`Settings` from ``source`` layered over ``os.environ``.

    Raises:
        SettingsError: if only one of ``DEPOT_LAT``/``DEPOT_LNG`` is set,
            or they do not form a valid coordinate.
    """
    if source is None:
        source = {}

    def get(key: str, default: Any = None) -> Any:
        value = source.get(key)
        if value is None or value == "":
            value = os.environ.get(key, default)
        return value

    depot_lat, depot_lng = get("DEPOT_LAT"), get("DEPOT_LNG")
    depot = None
    if depot_lat is not None or depot_lng is not None:
        depot = parse_coordinate(depot_lat, depot_lng)
        if depot is None:
            raise SettingsError(f"Invalid depot coordinate: DEPOT_LAT={depot_lat!r}, DEPOT_LNG={depot_lng!r}")

    return Settings(
        supabase_url=get("SUPABASE_URL"),
        supabase_key=get("SUPABASE_KEY"),
        depot=depot,
        locations_file=get("LOCATIONS_FILE"),
        nominatim_user_agent=get("NOMINATIM_USER_AGENT", DEFAULT_USER_AGENT),
        allowed_email=str(get("ALLOWED_EMAIL", "")),
        log_level=str(get("LOG_LEVEL", "INFO")).upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a basic root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
