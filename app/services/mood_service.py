"""
Mood service for post-date mood tracking.
"""
from typing import List
from sqlalchemy.orm import Session
from app.models.mood import MoodEntry
from app.schemas.mood import MoodCreate
from app.services.couple_service import SessionContext
from app.services.date_service import get_date


def add_mood_entry(session: SessionContext, data: MoodCreate, db: Session) -> MoodEntry:
    """
    Log the caller's mood for a date. One entry per user per date: logging
    again replaces the earlier mood and notes.
    """
    get_date(session, data.date_id, db)

    existing = db.query(MoodEntry).filter(
        MoodEntry.date_id == data.date_id,
        MoodEntry.user_id == session.user_id
    ).first()

    if existing:
        existing.mood = data.mood
        existing.notes = data.notes
        db.commit()
        db.refresh(existing)
        return existing

    entry = MoodEntry(
        couple_code=session.couple_code,
        date_id=data.date_id,
        user_id=session.user_id,
        user_name=session.user_name,
        mood=data.mood,
        notes=data.notes
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def list_moods(session: SessionContext, db: Session) -> List[MoodEntry]:
    """Newest first."""
    return db.query(MoodEntry).filter(
        MoodEntry.couple_code == session.couple_code
    ).order_by(MoodEntry.created_at.desc(), MoodEntry.id.desc()).all()


def moods_for_date(session: SessionContext, date_id: int, db: Session) -> List[MoodEntry]:
    get_date(session, date_id, db)
    return db.query(MoodEntry).filter(
        MoodEntry.couple_code == session.couple_code,
        MoodEntry.date_id == date_id
    ).order_by(MoodEntry.created_at.asc()).all()


def has_user_logged_mood(date_id: int, user_id: str, db: Session) -> bool:
    return db.query(MoodEntry.id).filter(
        MoodEntry.date_id == date_id,
        MoodEntry.user_id == user_id
    ).first() is not None
