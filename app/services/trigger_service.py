"""
Event triggers: react to committed date writes by notifying the right partner(s).

Handlers run after the response has been sent (FastAPI background tasks).
Any failure is logged and swallowed; the write that produced the event is
never rolled back or retried.
"""
import logging
from typing import List, Optional
from fastapi import BackgroundTasks
from app.db import session as db_session
from app.core.exceptions import NotFoundError
from app.models.couple import Couple
from app.models.date import DateStatus
from app.services.events import DateEvent, DateCreated, DateUpdated
from app.services.notification_service import NotificationDispatcher
from app.services.notification_templates import NotificationType, Recipient

logger = logging.getLogger(__name__)


def load_recipients(couple_code: str, session_factory=None) -> List[Recipient]:
    """Detached contact details for every member of a couple."""
    factory = session_factory or db_session.SessionLocal
    db = factory()
    try:
        couple = db.query(Couple).filter(Couple.code == couple_code).first()
        if not couple:
            raise NotFoundError(f"Couple {couple_code} not found")
        return [Recipient.from_member(m) for m in couple.members]
    finally:
        db.close()


def register_reminder(date_id: int) -> None:
    """
    Marker only. Reminders are delivered by the polling scan in
    reminder_service, not by anything registered here.
    """
    logger.info(f"Reminder scheduled for date {date_id}")


async def on_date_created(event: DateCreated, dispatcher: NotificationDispatcher,
                          session_factory=None) -> None:
    date = event.after
    try:
        recipients = load_recipients(date.couple_code, session_factory)

        if date.status == DateStatus.PENDING:
            # Request: only the partner who has to answer it
            partners = [r for r in recipients if r.user_id != date.created_by]
            await dispatcher.notify_all(partners, date, NotificationType.REQUEST)
            logger.info(f"Date request notifications sent for date {event.date_id}")
        else:
            await dispatcher.notify_all(recipients, date, NotificationType.CREATED)
            logger.info(f"Date created notifications sent for date {event.date_id}")
            register_reminder(event.date_id)
    except NotFoundError as e:
        logger.error(f"Cannot notify for new date {event.date_id}: {e}")
    except Exception as e:
        logger.error(f"Error sending date created notifications: {e}", exc_info=True)


async def on_date_updated(event: DateUpdated, dispatcher: NotificationDispatcher,
                          session_factory=None) -> None:
    before, after = event.before, event.after
    if before is None or before.status != DateStatus.PENDING or after.status == DateStatus.PENDING:
        return

    try:
        recipients = load_recipients(after.couple_code, session_factory)
        requester = next((r for r in recipients if r.user_id == after.created_by), None)
        if not requester:
            logger.warning(f"Creator {after.created_by} of date {event.date_id} is no longer a member")
            return

        kind = NotificationType.ACCEPTED if after.status == DateStatus.SCHEDULED else NotificationType.DECLINED
        await dispatcher.notify(requester, after, kind)
        logger.info(f"Date {kind.value} notification sent for date {event.date_id}")

        if after.status == DateStatus.SCHEDULED:
            register_reminder(event.date_id)
    except NotFoundError as e:
        logger.error(f"Cannot notify for updated date {event.date_id}: {e}")
    except Exception as e:
        logger.error(f"Error sending date update notifications: {e}", exc_info=True)


async def handle_event(event: DateEvent, dispatcher: NotificationDispatcher,
                       session_factory=None) -> None:
    """Route an event to its handler."""
    if isinstance(event, DateCreated):
        await on_date_created(event, dispatcher, session_factory)
    elif isinstance(event, DateUpdated):
        await on_date_updated(event, dispatcher, session_factory)


def background_publisher(background_tasks: BackgroundTasks, dispatcher: NotificationDispatcher,
                         session_factory=None):
    """Publisher that queues each event as a background task of the current request."""
    def publish(event: DateEvent) -> None:
        background_tasks.add_task(handle_event, event, dispatcher, session_factory)
    return publish
