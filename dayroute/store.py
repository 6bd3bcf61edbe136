"""
Access to scheduled jobs and clients.

Jobs and clients live in a Supabase project. ``SupabaseJobStore`` reads
and updates them through Supabase's REST (PostgREST) endpoint using
``requests``. For offline planning, ``load_snapshot`` reads the same
records from an exported JSON document.

Example usage:

    store = SupabaseJobStore("https://xyz.supabase.co", "service-key")
    jobs = store.fetch_jobs("2026-03-02")
    store.update_job(jobs[0].id, {"start_time": "08:30"})
"""

from __future__ import annotations

import json
import logging
from typing import IO, Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

import requests

from .models import Client, Job

logger = logging.getLogger(__name__)

T = TypeVar("T")

JOBS_TABLE = "scheduled_jobs"
CLIENTS_TABLE = "clients"


class JobStoreError(Exception):
    """Raised when the job store cannot be read or updated."""


class SupabaseJobStore:
    def __init__(
        self,
        url: str,
        key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, table: str, params: Mapping[str, str], **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}/{table}"
        headers = dict(self.headers)
        headers.update(kwargs.pop("headers", {}))
        try:
            resp = self.session.request(
                method, url, params=params, headers=headers, timeout=self.timeout, **kwargs
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, table, exc)
            raise JobStoreError(f"{method} {table} failed: {exc}") from exc
        return resp

    def _read_records(self, resp: requests.Response, table: str, convert: Callable[[Mapping[str, Any]], T]) -> List[T]:
        try:
            return [convert(record) for record in resp.json()]
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Unreadable %s response: %s", table, exc)
            raise JobStoreError(f"Unreadable {table} response: {exc!r}") from exc

    def fetch_jobs(self, date: str) -> List[Job]:
        """Return all jobs scheduled on ``date``, ordered by start time."""
        params = {"select": "*", "date": f"eq.{date}", "order": "start_time"}
        resp = self._request("GET", JOBS_TABLE, params)
        return self._read_records(resp, JOBS_TABLE, Job.from_record)

    def fetch_clients(self) -> List[Client]:
        resp = self._request("GET", CLIENTS_TABLE, {"select": "*"})
        return self._read_records(resp, CLIENTS_TABLE, Client.from_record)

    def update_job(self, job_id: str, updates: Mapping[str, Any]) -> None:
        """Apply ``updates`` to a single job row."""
        self._request(
            "PATCH",
            JOBS_TABLE,
            {"id": f"eq.{job_id}"},
            json=dict(updates),
            headers={"Prefer": "return=minimal"},
        )
        logger.debug("Updated job %s with %s", job_id, updates)


def load_snapshot(fp: IO[str]) -> Tuple[List[Job], List[Client]]:
    """Read ``{"jobs": [...], "clients": [...]}`` from an open JSON file.

    Raises:
        ValueError: if the document is not valid JSON or a record lacks an id.
    """
    try:
        data: Dict[str, Any] = json.load(fp)
        jobs = [Job.from_record(record) for record in data.get("jobs", [])]
        clients = [Client.from_record(record) for record in data.get("clients", [])]
    except KeyError as exc:
        raise ValueError(f"Snapshot record is missing field {exc}") from exc
    return jobs, clients
