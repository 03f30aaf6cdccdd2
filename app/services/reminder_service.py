"""
Reminder scan: notify both partners shortly before each scheduled date.

Each date is claimed with a conditional update (reminder_sent false -> true)
before anything is sent. A crash between claim and send therefore loses that
reminder instead of sending it twice. Overlapping scans are kept apart by a
named lease in the scheduler_leases table.
"""
import asyncio
import logging
import os
import socket
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.utils import utcnow
from app.models.couple import Couple
from app.models.date import Date, DateStatus
from app.models.lease import SchedulerLease
from app.schemas.date import DateResponse
from app.services.notification_service import NotificationDispatcher, get_dispatcher
from app.services.notification_templates import NotificationType, Recipient

logger = logging.getLogger(__name__)

REMINDER_LEASE_NAME = "date_reminders"


def default_holder() -> str:
    return f"{socket.gethostname()}:{os.getpid()}"


def acquire_lease(db: Session, name: str, holder: str, ttl_seconds: int,
                  now: Optional[datetime] = None) -> bool:
    """Take the named lease if it is free, expired, or already ours."""
    now = now or utcnow()
    expires_at = now + timedelta(seconds=ttl_seconds)

    result = db.execute(
        update(SchedulerLease)
        .where(SchedulerLease.name == name)
        .where((SchedulerLease.expires_at < now) | (SchedulerLease.holder == holder))
        .values(holder=holder, expires_at=expires_at)
    )
    if result.rowcount == 1:
        db.commit()
        return True

    db.rollback()
    if db.query(SchedulerLease).filter(SchedulerLease.name == name).first():
        return False

    db.add(SchedulerLease(name=name, holder=holder, expires_at=expires_at))
    try:
        db.commit()
    except IntegrityError:
        # Another process created it first
        db.rollback()
        return False
    return True


def release_lease(db: Session, name: str, holder: str) -> None:
    db.query(SchedulerLease).filter(
        SchedulerLease.name == name,
        SchedulerLease.holder == holder
    ).delete()
    db.commit()


def find_due_dates(db: Session, now: datetime) -> List[Date]:
    """Scheduled, unreminded dates starting within the reminder window."""
    window_end = now + timedelta(minutes=settings.REMINDER_WINDOW_MINUTES)
    return db.query(Date).filter(
        Date.status == DateStatus.SCHEDULED,
        Date.date_time >= now,
        Date.date_time <= window_end,
        Date.reminder_sent.is_(False)
    ).order_by(Date.date_time.asc()).all()


def claim_reminder(db: Session, date_id: int) -> bool:
    """Atomically flip reminder_sent. True only for the caller that flipped it."""
    result = db.execute(
        update(Date)
        .where(Date.id == date_id)
        .where(Date.reminder_sent.is_(False))
        .values(reminder_sent=True)
    )
    db.commit()
    return result.rowcount == 1


async def send_date_reminders(
    db: Session,
    dispatcher: Optional[NotificationDispatcher] = None,
    now: Optional[datetime] = None,
    holder: Optional[str] = None
) -> int:
    """
    Run one reminder scan. Returns the number of dates reminded, or 0 when
    another scan holds the lease.
    """
    dispatcher = dispatcher or get_dispatcher()
    now = now or utcnow()
    holder = holder or default_holder()

    if not acquire_lease(db, REMINDER_LEASE_NAME, holder, settings.REMINDER_LEASE_SECONDS, now):
        logger.info("Reminder scan already running elsewhere, skipping")
        return 0

    try:
        batches = []
        for date in find_due_dates(db, now):
            if not claim_reminder(db, date.id):
                continue

            couple = db.query(Couple).filter(Couple.code == date.couple_code).first()
            if not couple:
                logger.error(f"Couple {date.couple_code} not found for date {date.id}")
                continue

            recipients = [Recipient.from_member(m) for m in couple.members]
            batches.append((DateResponse.model_validate(date), recipients))

        # Every recipient of every claimed date, concurrently
        await asyncio.gather(*(
            dispatcher.notify_all(recipients, snapshot, NotificationType.REMINDER)
            for snapshot, recipients in batches
        ))

        logger.info(f"Sent {len(batches)} date reminders")
        return len(batches)
    finally:
        release_lease(db, REMINDER_LEASE_NAME, holder)
