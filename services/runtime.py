"""Runtime utilities for sharing scheduler state across components."""
from __future__ import annotations

from typing import Optional

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import settings
from services.monitor import Monitor

_scheduler: Optional[AsyncIOScheduler] = None
_monitor_job: Optional[Job] = None


def build_scheduler(monitor: Monitor) -> tuple[AsyncIOScheduler, Job]:
    """Create a scheduler firing a full check pass every configured interval."""
    scheduler = AsyncIOScheduler()
    monitor_job = scheduler.add_job(
        monitor.check_all,
        "interval",
        minutes=settings.CHECK_INTERVAL_MINUTES,
        id="keepalive-check",
        coalesce=True,
        max_instances=1,
    )
    configure_scheduler(scheduler, monitor_job)
    return scheduler, monitor_job


def configure_scheduler(scheduler: AsyncIOScheduler, monitor_job: Job) -> None:
    """Register scheduler and monitor job for later access."""
    global _scheduler, _monitor_job
    _scheduler = scheduler
    _monitor_job = monitor_job


def get_scheduler() -> Optional[AsyncIOScheduler]:
    return _scheduler


def get_monitor_job() -> Optional[Job]:
    return _monitor_job
