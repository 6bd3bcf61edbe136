"""
Streamlit application for DayRoute.

This page loads one day's scheduled jobs, lets the user pick a team and
an optional depot, orders the visits with the nearest neighbour
heuristic, shows the legs and an approximate travel summary on a map,
and can write the new order back to the calendar.

To run this app locally for development, install the package and
execute:

    streamlit run dayroute/app.py

Secrets (``.streamlit/secrets.toml``) or environment variables provide
``SUPABASE_URL``/``SUPABASE_KEY``, ``ALLOWED_EMAIL`` and optionally
``DEPOT_LAT``/``DEPOT_LNG``. Without Supabase credentials the page
accepts an exported JSON snapshot instead.
"""

from __future__ import annotations

import datetime
import io
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import streamlit as st
from streamlit_folium import folium_static

from dayroute.apply import apply_route
from dayroute.config import Settings, SettingsError, configure_logging, load_settings
from dayroute.geocode import CoordinateResolver, geocode_clients, set_user_agent
from dayroute.models import Client, Coordinate, Job, select_day_jobs
from dayroute.optimisation import optimise_route
from dayroute.schedule import format_time, schedule_route
from dayroute.store import JobStoreError, SupabaseJobStore, load_snapshot
from dayroute.summary import format_summary_text, summarise_route
from dayroute.visualisation import create_route_map

logger = logging.getLogger(__name__)


def read_secrets() -> Mapping[str, Any]:
    try:
        return dict(st.secrets)
    except FileNotFoundError:
        return {}


def authenticate(allowed: str) -> bool:
    """Authenticate the user using a simple email check.

    When no allowed email is configured any non-empty email is accepted,
    otherwise a case-insensitive match is required.
    """
    if "authenticated" not in st.session_state:
        st.session_state["authenticated"] = False
    if not st.session_state["authenticated"]:
        st.markdown("### Sign in")
        email = st.text_input("Email address:", value="")
        if st.button("Sign in"):
            entered = email.strip()
            allowed_stripped = allowed.strip().lower()
            if entered and (not allowed_stripped or entered.lower() == allowed_stripped):
                st.session_state["authenticated"] = True
            else:
                st.error("Access denied. This account is not allowed to use the planner.")
    return st.session_state.get("authenticated", False)


def load_day(settings: Settings, date: str) -> Optional[Tuple[List[Job], List[Client]]]:
    """Load jobs and clients from Supabase, or from an uploaded snapshot."""
    if settings.has_store:
        store = SupabaseJobStore(settings.supabase_url, settings.supabase_key)
        try:
            return store.fetch_jobs(date), store.fetch_clients()
        except JobStoreError as exc:
            st.error(f"Could not load jobs: {exc}")
            return None
    upload = st.file_uploader("Jobs snapshot (JSON)", type=["json"])
    if upload is None:
        st.info("Upload a snapshot with 'jobs' and 'clients' to plan offline.")
        return None
    try:
        return load_snapshot(io.StringIO(upload.getvalue().decode("utf-8")))
    except ValueError as exc:
        st.error(f"Invalid snapshot: {exc}")
        return None


def route_table(route: List[Job]) -> List[Dict[str, Any]]:
    schedule = {stop.job_id: stop for stop in schedule_route(route)}
    rows = []
    for i, job in enumerate(route, start=1):
        stop = schedule[job.id]
        rows.append({
            "Order": i,
            "Client": job.display_name or "?",
            "Suburb": job.suburb or "",
            "Booked": job.start_time or "",
            "New start": format_time(stop.start),
            "Travel (km)": "" if job.travel_km is None else f"{job.travel_km:.1f}",
            "Travel (min, est.)": "" if job.travel_mins is None else job.travel_mins,
        })
    return rows


def main():
    st.set_page_config(page_title="DayRoute", layout="wide")
    st.title("DayRoute planner")
    try:
        settings = load_settings(read_secrets())
    except SettingsError as exc:
        st.error(str(exc))
        st.stop()
    configure_logging(settings.log_level)
    set_user_agent(settings.nominatim_user_agent)
    if not authenticate(settings.allowed_email):
        st.stop()

    col_date, col_team = st.columns(2)
    with col_date:
        day = st.date_input("Date", value=datetime.date.today()).isoformat()
    loaded = load_day(settings, day)
    if loaded is None:
        st.stop()
    jobs, clients = loaded
    teams = sorted({job.team_id for job in jobs if job.team_id})
    with col_team:
        team = st.selectbox("Team", ["All"] + teams)
    day_jobs = select_day_jobs(jobs, day, None if team == "All" else team)
    if not day_jobs:
        st.info("No jobs scheduled for this day.")
        st.stop()

    use_depot = settings.depot is not None and st.checkbox("Start from depot", value=True)
    start: Optional[Coordinate] = settings.depot if use_depot else None
    if st.checkbox("Geocode client addresses without coordinates"):
        with st.spinner("Geocoding addresses…"):
            clients = geocode_clients(clients)

    locations = settings.location_table()
    route = optimise_route(day_jobs, clients, start=start, locations=locations)
    summary = summarise_route(route)
    logger.info("Planned %d jobs for %s (team %s): %.1f km", len(route), day, team, summary.total_km)
    resolver = CoordinateResolver(clients, locations)
    unresolved = [job for job in route if resolver.resolve(job) is None]

    st.success(f"Total distance: {summary.total_km:.1f} km, estimated drive time: {summary.total_minutes} min")
    if unresolved:
        st.warning(
            "No location for: " + ", ".join(job.display_name or job.id for job in unresolved)
            + ". These jobs were placed at the end of the route."
        )
    st.table(route_table(route))
    st.text_area("Summary", format_summary_text(summary), height=200)

    unresolved_ids = {job.id for job in unresolved}
    stops = [(job.display_name or job.id, resolver.resolve(job)) for job in route if job.id not in unresolved_ids]
    folium_static(create_route_map(stops, start), width=700, height=500)

    if settings.has_store and st.button("Apply to calendar"):
        store = SupabaseJobStore(settings.supabase_url, settings.supabase_key)
        result = apply_route(route, store.update_job)
        if result.ok:
            st.success(f"Updated {len(result.applied)} jobs.")
        else:
            failed = result.failed_step
            st.error(
                f"Stopped at job {failed.job_id}: {failed.error}. "
                f"{len(result.applied)} jobs were updated; {len(result.pending)} were not attempted."
            )


if __name__ == "__main__":
    main()
