"""
Cron scheduler for the reminder jobs.

One Scheduler object owns the job list and a single daemon
thread. The thread wakes up, runs every job whose cron slot has
passed since its last run, and goes back to sleep. Jobs run one
after another on that thread, so a job never overlaps itself.

Cron expressions are standard 5-field strings evaluated with
Celery's crontab (no broker is involved; only the schedule
arithmetic is used). All times are UTC.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from celery.schedules import crontab
from sqlalchemy.orm import Session

from grc_backoffice.services.email_service import EmailService
from grc_backoffice.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)

JobFunc = Callable[[Session, datetime], object]


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


def cron_from_string(expr: str, nowfun: Callable[[], datetime] | None = None) -> crontab:
    """Convert a 5-field cron expression into a Celery ``crontab`` object."""
    fields = str(expr or "").split()
    if len(fields) != 5:
        raise ValueError(f"Invalid cron expression '{expr}'. Expected 5 fields.")
    minute, hour, day_of_month, month, day_of_week = fields
    return crontab(
        minute=minute,
        hour=hour,
        day_of_month=day_of_month,
        month_of_year=month,
        day_of_week=day_of_week,
        nowfun=nowfun,
    )


@dataclass
class ScheduledJob:
    name: str
    cron: str
    func: JobFunc
    last_run_at: datetime | None = None
    schedule: crontab | None = field(default=None, repr=False)


class Scheduler:

    def __init__(
        self,
        session_factory: Callable[[], Session],
        jobs: list[ScheduledJob],
        clock: Callable[[], datetime] = utc_clock,
        poll_seconds: float = 30,
    ):
        self.session_factory = session_factory
        self.clock = clock
        self.poll_seconds = poll_seconds
        self.jobs = jobs
        for job in self.jobs:
            job.schedule = cron_from_string(job.cron, nowfun=clock)

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        now = self.clock()
        for job in self.jobs:
            if job.last_run_at is None:
                job.last_run_at = now
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="grc-scheduler", daemon=True
        )
        self._thread.start()
        logger.info(
            "Scheduler started with jobs: %s",
            ", ".join(f"{j.name} [{j.cron}]" for j in self.jobs),
        )

    def stop(self, timeout: float = 10) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Scheduler stopped")

    def _loop(self) -> None:
        wait = 0.0
        while not self._stop.wait(wait):
            self.run_pending()
            wait = min(self.seconds_until_next(), self.poll_seconds)

    def seconds_until_next(self) -> float:
        remaining = [
            job.schedule.is_due(job.last_run_at or self.clock()).next
            for job in self.jobs
        ]
        return max(min(remaining, default=self.poll_seconds), 1.0)

    def run_pending(self) -> list[str]:
        """Run every job that is due now. Returns the names that ran."""
        ran = []
        for job in self.jobs:
            if job.last_run_at is None:
                job.last_run_at = self.clock()
                continue
            if job.schedule.is_due(job.last_run_at).is_due:
                self.run_job(job)
                ran.append(job.name)
        return ran

    def run_job(self, job: ScheduledJob) -> bool:
        """
        Run one job in its own session.

        A failing job is rolled back and logged; it never stops
        the scheduler or the jobs after it.
        """
        now = self.clock()
        job.last_run_at = now
        db = self.session_factory()
        try:
            job.func(db, now)
            db.commit()
            logger.info("Scheduled job %s finished", job.name)
            return True
        except Exception:
            db.rollback()
            logger.exception("Scheduled job %s failed", job.name)
            return False
        finally:
            db.close()


def default_jobs(email_service: EmailService) -> list[ScheduledJob]:
    """The four reminder jobs, in UTC."""

    def due_controls(db: Session, now: datetime):
        return ReminderService(db, email_service).check_due_controls(now.date())

    def overdue_controls(db: Session, now: datetime):
        return ReminderService(db, email_service).check_overdue_controls(now.date())

    def daily_digest(db: Session, now: datetime):
        return ReminderService(db, email_service).send_daily_summary(now.date())

    def weekly_digest(db: Session, now: datetime):
        return ReminderService(db, email_service).send_weekly_digest(now.date())

    return [
        ScheduledJob("due-controls", "0 * * * *", due_controls),
        ScheduledJob("overdue-controls", "0 8 * * *", overdue_controls),
        ScheduledJob("daily-digest", "0 9 * * *", daily_digest),
        ScheduledJob("weekly-digest", "0 9 * * 1", weekly_digest),
    ]
