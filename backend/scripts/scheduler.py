"""
Standalone runner for the recordings reindex job.
Use this when the API runs with REINDEX_ENABLED off (e.g. several workers).
"""
from apscheduler.schedulers.blocking import BlockingScheduler
import logging

from rasclat.jobs.reindex import TRIGGER, add_reindex_job

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    """Set up scheduler and run."""
    scheduler = BlockingScheduler()
    add_reindex_job(scheduler)

    logger.info("Scheduler started. Recordings index is rebuilt at hour=%s", TRIGGER["hour"])
    logger.info("Press Ctrl+C to exit")

    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")


if __name__ == "__main__":
    main()
