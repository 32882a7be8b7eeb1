"""Periodic rebuild of the recordings search index.

The index is cleared and refilled from the database, so entries that drifted
(failed saves, manual edits on the index side) are repaired every run.
"""
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from ..core.db import SessionLocal
from ..core.errors import SearchIndexError, report_exception
from ..services.entities import RECORDINGS
from ..services.pipeline import dump
from ..services.search import get_search_index

logger = logging.getLogger(__name__)

JOB_ID = "recordings_reindex"
# every 12 hours
TRIGGER = dict(hour="*/12", minute=0)


def reindex_recordings(db: Optional[Session] = None, index=None) -> int:
    """Replace the recordings index with the current recordings. Returns the count."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        index = index or get_search_index(RECORDINGS.key)
        recordings = RECORDINGS.repository(db).find_many(options=RECORDINGS.list_options())
        documents = [dump(RECORDINGS.list_schema, rec) for rec in recordings]
        index.clear()
        count = index.add_many(documents)
        logger.info("recordings index rebuilt with %d documents", count)
        return count
    finally:
        if own_session:
            db.close()


def run_reindex() -> None:
    """Scheduler entry point; failures are reported, never raised into the scheduler."""
    try:
        reindex_recordings()
    except SearchIndexError as exc:
        report_exception(exc.cause or exc, job=JOB_ID)


def add_reindex_job(scheduler) -> None:
    scheduler.add_job(
        run_reindex,
        CronTrigger(**TRIGGER),
        id=JOB_ID,
        name="Rebuild recordings search index",
        replace_existing=True,
    )


def start_background_scheduler() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    add_reindex_job(scheduler)
    scheduler.start()
    logger.info("reindex job scheduled every 12 hours")
    return scheduler
