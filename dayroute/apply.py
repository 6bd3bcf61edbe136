"""
Write an optimised route back to the calendar.

Each job of the route receives its new start time in a separate update.
Updates are issued strictly one after another in route order and the
sequence stops at the first failure, so the jobs that were updated
always form a prefix of the route. Nothing is rolled back: after a
failure the calendar holds the new order up to the failing job and the
old times from there on. ``ApplyResult`` records exactly which steps
succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .models import Job
from .schedule import StopSchedule, format_time, schedule_route
from .store import JobStoreError

logger = logging.getLogger(__name__)

UpdateFn = Callable[[str, Mapping[str, Any]], None]


@dataclass
class ApplyStep:
    job_id: str
    updates: Dict[str, Any]
    ok: bool = False
    error: Optional[str] = None


@dataclass
class ApplyResult:
    steps: List[ApplyStep] = field(default_factory=list)
    pending: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.pending and all(step.ok for step in self.steps)

    @property
    def applied(self) -> List[str]:
        return [step.job_id for step in self.steps if step.ok]

    @property
    def failed_step(self) -> Optional[ApplyStep]:
        for step in self.steps:
            if not step.ok:
                return step
        return None


def plan_updates(route: Sequence[Job], schedule: Optional[Sequence[StopSchedule]] = None) -> List[ApplyStep]:
    """Build the ordered list of per-job updates for ``route``."""
    if schedule is None:
        schedule = schedule_route(route)
    return [
        ApplyStep(job_id=stop.job_id, updates={"start_time": format_time(stop.start)})
        for stop in schedule
    ]


def apply_route(
    route: Sequence[Job],
    update_job: UpdateFn,
    schedule: Optional[Sequence[StopSchedule]] = None,
) -> ApplyResult:
    """Persist the route's new start times, one job at a time.

    Args:
        route: Jobs in visiting order.
        update_job: Callable taking ``(job_id, updates)``, for example
            :meth:`dayroute.store.SupabaseJobStore.update_job`. It should
            raise :class:`~dayroute.store.JobStoreError` on failure.
        schedule: Precomputed schedule; computed from ``route`` if omitted.

    Returns:
        An ``ApplyResult`` with one step per attempted update and the ids
        of jobs that were never attempted.
    """
    steps = plan_updates(route, schedule)
    result = ApplyResult()
    for position, step in enumerate(steps):
        try:
            update_job(step.job_id, step.updates)
        except JobStoreError as exc:
            step.error = str(exc)
            result.steps.append(step)
            result.pending = [s.job_id for s in steps[position + 1:]]
            logger.error(
                "Applying route stopped at job %s (%d of %d): %s",
                step.job_id, position + 1, len(steps), exc,
            )
            break
        step.ok = True
        result.steps.append(step)
    else:
        logger.info("Applied route order to %d jobs", len(steps))
    return result
