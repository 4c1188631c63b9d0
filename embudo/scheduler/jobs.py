"""EMBUDO — Scheduler Jobs.

APScheduler interval job that re-syncs the published sheet.
"""

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from embudo.config import settings
from embudo.database import get_session
from embudo.analyzer.pipeline import run_sync
from embudo.core.logging import get_logger

logger = get_logger("scheduler")

scheduler = AsyncIOScheduler()


async def sync_sheet_job():
    """Reload the remote sheet. On failure the stored records stay as they are."""
    logger.info("Scheduled sheet sync starting...")
    session_gen = get_session()
    session = next(session_gen)
    try:
        result = await run_sync(session=session)
        logger.info(f"Scheduled sync complete. {len(result.records)} records")
    except Exception as e:
        logger.error(f"Scheduled sync failed: {e}")
    finally:
        session_gen.close()


def start_scheduler():
    """Configure and start the scheduler."""
    if not settings.scheduler_enabled:
        logger.info("Scheduler disabled via config")
        return
    if not settings.sheet_csv_url:
        logger.info("Scheduler not started: no SHEET_CSV_URL configured")
        return

    scheduler.add_job(
        sync_sheet_job,
        "interval",
        minutes=settings.sync_interval_minutes,
        id="sheet_sync",
        replace_existing=True,
        misfire_grace_time=600,
    )
    scheduler.start()
    logger.info(f"Scheduler started. Sheet sync every {settings.sync_interval_minutes} min")


def stop_scheduler():
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
