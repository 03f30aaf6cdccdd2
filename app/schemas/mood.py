"""
Pydantic schemas for Mood entity.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.models.mood import Mood


class MoodBase(BaseModel):
    """Base mood schema."""
    date_id: int
    mood: Mood
    notes: Optional[str] = None


class MoodCreate(MoodBase):
    """Schema for mood creation."""
    pass


class MoodResponse(MoodBase):
    """Schema for mood response."""
    id: int
    couple_code: str
    user_id: str
    user_name: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
