"""Alarm facility backed by APScheduler one-shot date jobs."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler

from gum_taper_bot.core.entities.errors import RegistrationFailure
from gum_taper_bot.core.interfaces.alarm_facility import AbstractAlarmFacility

logger = logging.getLogger(__name__)

JOB_PREFIX = "reminder_"
MISFIRE_GRACE_SECONDS = 10 * 60  # still deliver if the loop was busy for a while


class ApschedulerAlarmFacility(AbstractAlarmFacility):
    """Registers each reminder slot as job ``reminder_<index>``.

    ``deliver(slot_index, payload)`` is called when a job fires. It may be a
    coroutine function when the scheduler is an AsyncIOScheduler.
    """

    def __init__(self, scheduler: BaseScheduler, deliver: Callable[[int, dict[str, str]], Any]) -> None:
        self._scheduler = scheduler
        self._deliver = deliver

    @staticmethod
    def job_id(slot_index: int) -> str:
        return f"{JOB_PREFIX}{slot_index}"

    def cancel(self, slot_index: int) -> None:
        try:
            self._scheduler.remove_job(self.job_id(slot_index))
        except JobLookupError:
            pass  # nothing installed under this index

    def register(self, slot_index: int, fires_at: dt.datetime, payload: dict[str, str]) -> None:
        try:
            self._scheduler.add_job(
                self._deliver,
                "date",
                run_date=fires_at,
                args=[slot_index, dict(payload)],
                id=self.job_id(slot_index),
                replace_existing=True,
                misfire_grace_time=MISFIRE_GRACE_SECONDS,
            )
        except Exception as exc:
            raise RegistrationFailure(slot_index, str(exc)) from exc
        logger.debug("Registered %s at %s", self.job_id(slot_index), fires_at)

    def registered_slots(self) -> list[int]:
        """Indices currently installed, in ascending order."""
        indices = [
            int(job.id[len(JOB_PREFIX):])
            for job in self._scheduler.get_jobs()
            if job.id.startswith(JOB_PREFIX)
        ]
        return sorted(indices)
