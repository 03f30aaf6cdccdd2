"""
Date service: request/approval lifecycle and list partitions.
"""
from datetime import datetime
from typing import Callable, Iterable, List, Optional
import logging
from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError, InvalidStateTransition, PermissionDenied
from app.core.utils import utcnow
from app.models.date import Date, DateStatus, RequestStatus
from app.schemas.date import DateCreate, DateUpdate, DateResponse
from app.services.couple_service import SessionContext
from app.services.events import DateEvent, DateCreated, DateUpdated

logger = logging.getLogger(__name__)

Publisher = Callable[[DateEvent], None]


def snapshot(date: Date) -> DateResponse:
    """Detached copy of a date for events and responses."""
    return DateResponse.model_validate(date)


def _new_date(session: SessionContext, data: DateCreate, status: DateStatus,
              request_status: RequestStatus) -> Date:
    return Date(
        couple_code=session.couple_code,
        title=data.title,
        date_time=data.date_time,
        notes=data.notes,
        date_type=data.date_type,
        created_by=session.user_id,
        created_by_name=session.user_name,
        status=status,
        request_status=request_status,
        reminder_sent=False
    )


def _save_new(date: Date, db: Session, publish: Optional[Publisher]) -> Date:
    db.add(date)
    db.commit()
    db.refresh(date)
    if publish:
        publish(DateCreated(date_id=date.id, after=snapshot(date)))
    return date


def create_date_request(
    session: SessionContext,
    data: DateCreate,
    db: Session,
    publish: Optional[Publisher] = None
) -> Date:
    """Propose a date; it waits for the partner's decision."""
    date = _new_date(session, data, DateStatus.PENDING, RequestStatus.PENDING)
    date = _save_new(date, db, publish)
    logger.info(f"Date request {date.id} created by {session.user_id}")
    return date


def create_date(
    session: SessionContext,
    data: DateCreate,
    db: Session,
    publish: Optional[Publisher] = None
) -> Date:
    """Create a date directly, bypassing approval."""
    date = _new_date(session, data, DateStatus.SCHEDULED, RequestStatus.AUTO_APPROVED)
    date = _save_new(date, db, publish)
    logger.info(f"Date {date.id} created directly by {session.user_id}")
    return date


def get_date(session: SessionContext, date_id: int, db: Session) -> Date:
    """Get a date of the caller's couple. Dates of other couples are not found."""
    date = db.query(Date).filter(
        Date.id == date_id,
        Date.couple_code == session.couple_code
    ).first()
    if not date:
        raise NotFoundError(f"Date {date_id} not found")
    return date


def list_dates(session: SessionContext, db: Session) -> List[Date]:
    """All dates of the caller's couple, soonest first."""
    return db.query(Date).filter(
        Date.couple_code == session.couple_code
    ).order_by(Date.date_time.asc(), Date.id.asc()).all()


def _transition(
    session: SessionContext,
    date_id: int,
    new_status: DateStatus,
    db: Session,
    publish: Optional[Publisher],
    apply: Callable[[Date, datetime], None],
    partner_only: bool = False
) -> Date:
    date = get_date(session, date_id, db)

    if not date.can_transition_to(new_status):
        raise InvalidStateTransition(date.id, date.status.value, new_status.value)
    if partner_only and date.created_by == session.user_id:
        raise PermissionDenied("Only your partner can respond to this request")

    before = snapshot(date)
    now = utcnow()
    date.status = new_status
    apply(date, now)
    date.updated_at = now
    db.commit()
    db.refresh(date)

    logger.info(f"Date {date.id} moved {before.status.value} -> {new_status.value} by {session.user_id}")
    if publish:
        publish(DateUpdated(date_id=date.id, before=before, after=snapshot(date)))
    return date


def accept_date_request(
    session: SessionContext,
    date_id: int,
    db: Session,
    publish: Optional[Publisher] = None
) -> Date:
    """pending -> scheduled. Only the partner who did not create the request may accept."""
    def apply(date: Date, now: datetime):
        date.request_status = RequestStatus.ACCEPTED
        date.accepted_by = session.user_id
        date.accepted_at = now

    return _transition(session, date_id, DateStatus.SCHEDULED, db, publish, apply, partner_only=True)


def decline_date_request(
    session: SessionContext,
    date_id: int,
    reason: str,
    db: Session,
    publish: Optional[Publisher] = None
) -> Date:
    """pending -> declined, with an optional reason."""
    def apply(date: Date, now: datetime):
        date.request_status = RequestStatus.DECLINED
        date.declined_by = session.user_id
        date.declined_at = now
        date.decline_reason = reason or ""

    return _transition(session, date_id, DateStatus.DECLINED, db, publish, apply, partner_only=True)


def complete_date(
    session: SessionContext,
    date_id: int,
    db: Session,
    publish: Optional[Publisher] = None
) -> Date:
    """scheduled -> completed, by either member."""
    return _transition(session, date_id, DateStatus.COMPLETED, db, publish, lambda date, now: None)


def update_date(
    session: SessionContext,
    date_id: int,
    changes: DateUpdate,
    db: Session,
    publish: Optional[Publisher] = None
) -> Date:
    """
    Edit or reschedule a date. Terminal dates are read-only.
    reminder_sent is left alone, so a date already reminded is not reminded again.
    """
    date = get_date(session, date_id, db)
    if date.status in (DateStatus.DECLINED, DateStatus.COMPLETED):
        raise InvalidStateTransition(date.id, date.status.value, date.status.value)

    before = snapshot(date)
    for field, value in changes.model_dump(exclude_unset=True).items():
        if value is None and field != "notes":
            continue
        setattr(date, field, value)
    date.updated_at = utcnow()
    db.commit()
    db.refresh(date)

    if publish:
        publish(DateUpdated(date_id=date.id, before=before, after=snapshot(date)))
    return date


def delete_date(session: SessionContext, date_id: int, db: Session) -> None:
    """Delete a date (and its mood entries)."""
    date = get_date(session, date_id, db)
    db.delete(date)
    db.commit()
    logger.info(f"Date {date_id} deleted by {session.user_id}")


# List partitions, computed over an already loaded list of dates

def upcoming_dates(dates: Iterable[Date], now: Optional[datetime] = None) -> list:
    now = now or utcnow()
    return [d for d in dates if d.date_time > now and d.status == DateStatus.SCHEDULED]


def past_dates(dates: Iterable[Date], now: Optional[datetime] = None) -> list:
    now = now or utcnow()
    return [d for d in dates if d.date_time <= now or d.status == DateStatus.COMPLETED]


def pending_requests_for(dates: Iterable[Date], user_id: str) -> list:
    """Requests waiting for this user's decision."""
    return [d for d in dates if d.status == DateStatus.PENDING and d.created_by != user_id]


def my_pending_requests(dates: Iterable[Date], user_id: str) -> list:
    """Requests this user made that the partner has not answered yet."""
    return [d for d in dates if d.status == DateStatus.PENDING and d.created_by == user_id]


def declined_dates(dates: Iterable[Date]) -> list:
    return [d for d in dates if d.status == DateStatus.DECLINED]


def partition_dates(dates: Iterable[Date], user_id: str, view: str,
                    now: Optional[datetime] = None) -> list:
    """Select one partition by name; 'all' returns the list unchanged."""
    dates = list(dates)
    if view == "upcoming":
        return upcoming_dates(dates, now)
    if view == "past":
        return past_dates(dates, now)
    if view == "pending":
        return pending_requests_for(dates, user_id)
    if view == "my-pending":
        return my_pending_requests(dates, user_id)
    if view == "declined":
        return declined_dates(dates)
    return dates
