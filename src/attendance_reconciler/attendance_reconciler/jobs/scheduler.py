"""In-process polling scheduler.

Every tick compares the current local minute with each job's cron spec and
runs the due jobs in order.  A job fires at most once per minute and a
failing job is logged without stopping the others.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..logging_config import get_logger
from .cron import CronSpec

logger = get_logger("jobs.scheduler")


@dataclass(frozen=True)
class ScheduledJob:
    name: str
    cron: CronSpec
    action: Callable[[datetime], object]

    @classmethod
    def every(cls, name: str, expression: str, action: Callable[[datetime], object]) -> "ScheduledJob":
        return cls(name=name, cron=CronSpec.parse(expression), action=action)


class JobScheduler:
    def __init__(
        self,
        jobs: Sequence[ScheduledJob],
        *,
        clock: Callable[[], datetime] = now_local,
        tick_interval_seconds: float = 20.0,
    ):
        self._jobs = list(jobs)
        self._clock = clock
        self._tick_interval = tick_interval_seconds
        self._last_fired: dict[str, datetime] = {}
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def jobs(self) -> list[ScheduledJob]:
        return list(self._jobs)

    def due(self, now: datetime) -> list[ScheduledJob]:
        minute = now.replace(second=0, microsecond=0)
        return [j for j in self._jobs if j.cron.matches(minute) and self._last_fired.get(j.name) != minute]

    def run_job(self, job: ScheduledJob, now: datetime) -> bool:
        try:
            job.action(now)
            return True
        except Exception:
            logger.exception("scheduled job failed", extra={"job": job.name})
            return False

    def tick(self, now: Optional[datetime] = None) -> list[str]:
        """Run the jobs due at ``now``; returns the names that were started."""
        now = now or self._clock()
        minute = now.replace(second=0, microsecond=0)
        fired = []
        for job in self.due(now):
            if self._stop_event.is_set():
                break
            self._last_fired[job.name] = minute
            logger.info("scheduled job started", extra={"job": job.name, "at": minute})
            self.run_job(job, now)
            fired.append(job.name)
        return fired

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name="attendance-scheduler", daemon=True)
        self._thread.start()
        logger.info("scheduler started", extra={"jobs": [j.name for j in self._jobs]})

    def stop(self, timeout: float = 30.0) -> None:
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("scheduler stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("scheduler tick failed")
            self._stop_event.wait(timeout=self._tick_interval)
