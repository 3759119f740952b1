"""APScheduler reminder adapter - daily cron job that fires a notify callback."""

import logging
from typing import Awaitable, Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)

REMINDER_JOB_ID = "daily-reminder-one-line-a-day"


class APSchedulerReminder:
    """
    Daily reminder backed by an AsyncIOScheduler.

    Implements ReminderScheduler protocol. A single job id is used, so
    scheduling again replaces the previous reminder.
    """

    def __init__(
        self,
        scheduler: AsyncIOScheduler,
        notify: Callable[[], Awaitable[None]],
    ):
        self.scheduler = scheduler
        self.notify = notify

    async def request_permission(self) -> bool:
        """Terminal notifications need no permission."""
        return True

    async def schedule_daily(self, hour: int, minute: int) -> None:
        """Schedule (or reschedule) the reminder at a local time of day."""
        self._remove_job()
        self.scheduler.add_job(
            self.notify,
            CronTrigger(hour=hour, minute=minute, timezone=self.scheduler.timezone),
            id=REMINDER_JOB_ID,
            replace_existing=True,
        )
        logger.info(f"Scheduled daily reminder at {hour:02d}:{minute:02d}")

    async def cancel(self) -> None:
        """Cancel the reminder if one is scheduled."""
        if self._remove_job():
            logger.info("Cancelled daily reminder")
        else:
            logger.debug("No daily reminder to cancel")

    def _remove_job(self) -> bool:
        try:
            self.scheduler.remove_job(REMINDER_JOB_ID)
        except JobLookupError:
            return False
        return True

    def next_run_time(self):
        """When the reminder fires next, or None if not scheduled."""
        job = self.scheduler.get_job(REMINDER_JOB_ID)
        return getattr(job, "next_run_time", None) if job else None
