"""
Service: APScheduler loop for periodic scoring runs.
- Runs once immediately, then every `schedule.interval_minutes`.
- max_instances=1 + coalesce: a slow run never overlaps the next one.
Env:
  SCORE_INTERVAL_MINUTES=N overrides the configured interval (0 = single run)
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..core.config import Settings

logger = logging.getLogger(__name__)


def _guarded(job: Callable[[Settings], object], settings: Settings) -> Callable[[], None]:
    def _run() -> None:
        try:
            job(settings)
        except Exception:
            # keep the schedule alive; the next tick retries the whole run
            logger.exception("Scheduled scoring run failed")
    return _run


def build_scheduler(settings: Settings, job: Callable[[Settings], object]) -> BlockingScheduler:
    scheduler = BlockingScheduler()
    scheduler.add_job(
        _guarded(job, settings),
        IntervalTrigger(minutes=settings.schedule.interval_minutes),
        id="sentiment_scoring",
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(),
    )
    return scheduler


def run_forever(settings: Settings, job: Callable[[Settings], object]) -> None:
    scheduler = build_scheduler(settings, job)
    logger.info("Scoring every %s minutes", settings.schedule.interval_minutes)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
