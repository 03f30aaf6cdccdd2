"""
Date routes: requests, approvals, direct scheduling and calendar export.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.core.exceptions import SoulSyncError
from app.schemas.date import DateCreate, DateUpdate, DateDecline, DateResponse
from app.services import date_service, calendar_service
from app.services.couple_service import SessionContext
from app.services.notification_service import NotificationDispatcher, get_dispatcher
from app.services.trigger_service import background_publisher
from app.api.dependencies import get_current_session, to_http_error

router = APIRouter(prefix="/dates", tags=["dates"])

DATE_VIEWS = ("all", "upcoming", "past", "pending", "my-pending", "declined")


@router.get("", response_model=List[DateResponse])
async def list_dates(
    view: str = Query("all", description="One of: " + ", ".join(DATE_VIEWS)),
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """List the couple's dates, optionally narrowed to one view."""
    if view not in DATE_VIEWS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown view '{view}'"
        )
    dates = date_service.list_dates(session, db)
    return date_service.partition_dates(dates, session.user_id, view)


@router.post("/requests", response_model=DateResponse, status_code=status.HTTP_201_CREATED)
async def create_date_request(
    date_data: DateCreate,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    """Propose a date to the partner."""
    publish = background_publisher(background_tasks, dispatcher)
    return date_service.create_date_request(session, date_data, db, publish)


@router.post("", response_model=DateResponse, status_code=status.HTTP_201_CREATED)
async def create_date(
    date_data: DateCreate,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    """Schedule a date directly, without approval."""
    publish = background_publisher(background_tasks, dispatcher)
    return date_service.create_date(session, date_data, db, publish)


@router.get("/{date_id}", response_model=DateResponse)
async def get_date(
    date_id: int,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Get one date."""
    try:
        return date_service.get_date(session, date_id, db)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.post("/{date_id}/accept", response_model=DateResponse)
async def accept_date_request(
    date_id: int,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    """Accept the partner's pending request."""
    publish = background_publisher(background_tasks, dispatcher)
    try:
        return date_service.accept_date_request(session, date_id, db, publish)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.post("/{date_id}/decline", response_model=DateResponse)
async def decline_date_request(
    date_id: int,
    decline: DateDecline,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    """Decline the partner's pending request."""
    publish = background_publisher(background_tasks, dispatcher)
    try:
        return date_service.decline_date_request(session, date_id, decline.reason, db, publish)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.post("/{date_id}/complete", response_model=DateResponse)
async def complete_date(
    date_id: int,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    """Mark a scheduled date as done."""
    publish = background_publisher(background_tasks, dispatcher)
    try:
        return date_service.complete_date(session, date_id, db, publish)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.patch("/{date_id}", response_model=DateResponse)
async def update_date(
    date_id: int,
    changes: DateUpdate,
    background_tasks: BackgroundTasks,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
):
    """Edit or reschedule a date."""
    publish = background_publisher(background_tasks, dispatcher)
    try:
        return date_service.update_date(session, date_id, changes, db, publish)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.delete("/{date_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_date(
    date_id: int,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Delete a date."""
    try:
        date_service.delete_date(session, date_id, db)
    except SoulSyncError as e:
        raise to_http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{date_id}/calendar-link")
async def get_calendar_link(
    date_id: int,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Google Calendar 'add event' link."""
    try:
        date = date_service.get_date(session, date_id, db)
    except SoulSyncError as e:
        raise to_http_error(e)
    return {"url": calendar_service.google_calendar_link(date.title, date.date_time, date.notes)}


@router.get("/{date_id}/calendar.ics")
async def download_ical(
    date_id: int,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """iCalendar file for Apple Calendar, Outlook and others."""
    try:
        date = date_service.get_date(session, date_id, db)
    except SoulSyncError as e:
        raise to_http_error(e)

    content = calendar_service.ical_content(date.id, date.title, date.date_time, date.notes)
    filename = calendar_service.ical_filename(date.id)
    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
