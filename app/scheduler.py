"""
APScheduler wiring for the periodic reminder scan.
"""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
from app.core.config import settings
from app.db import session as db_session
from app.services.reminder_service import send_date_reminders

logger = logging.getLogger(__name__)

# Prevents the scheduler from starting more than once per process
_scheduler = None


def start_scheduler():
    """
    Start the reminder scheduler.

    - Respects ENABLE_SCHEDULER
    - No double start (reload, repeated startup events)
    - max_instances=1 keeps runs in this process from overlapping; the DB
      lease in reminder_service covers other processes
    """
    global _scheduler

    if not settings.ENABLE_SCHEDULER:
        logger.info("Reminder scheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    if _scheduler is not None:
        logger.info("Reminder scheduler already running, skipping initialization")
        return _scheduler

    _scheduler = AsyncIOScheduler(timezone="UTC")
    _scheduler.add_job(
        run_date_reminders,
        trigger="interval",
        minutes=settings.REMINDER_INTERVAL_MINUTES,
        id="send_date_reminders",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()

    logger.info(f"Reminder scheduler started: scanning every {settings.REMINDER_INTERVAL_MINUTES} minutes")
    return _scheduler


def shutdown_scheduler():
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Reminder scheduler stopped")


async def run_date_reminders():
    """Job entry point. Owns its DB session; errors are logged, never raised into APScheduler."""
    db = db_session.SessionLocal()
    try:
        await send_date_reminders(db)
    except Exception as e:
        logger.error(f"Error sending date reminders: {e}", exc_info=True)
    finally:
        db.close()
