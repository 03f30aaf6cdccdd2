"""
Mood routes for post-date mood tracking.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.core.exceptions import SoulSyncError
from app.schemas.mood import MoodCreate, MoodResponse
from app.services import mood_service
from app.services.couple_service import SessionContext
from app.api.dependencies import get_current_session, to_http_error

router = APIRouter(prefix="/moods", tags=["moods"])


@router.get("", response_model=List[MoodResponse])
async def list_moods(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """All mood entries of the couple, newest first."""
    return mood_service.list_moods(session, db)


@router.post("", response_model=MoodResponse, status_code=status.HTTP_201_CREATED)
async def add_mood(
    mood_data: MoodCreate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Log (or replace) the caller's mood for a date."""
    try:
        return mood_service.add_mood_entry(session, mood_data, db)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.get("/dates/{date_id}", response_model=List[MoodResponse])
async def get_moods_for_date(
    date_id: int,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Both partners' moods for one date."""
    try:
        return mood_service.moods_for_date(session, date_id, db)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.get("/dates/{date_id}/logged")
async def has_logged_mood(
    date_id: int,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Whether the caller already logged a mood for this date."""
    return {"logged": mood_service.has_user_logged_mood(date_id, session.user_id, db)}
