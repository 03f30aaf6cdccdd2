"""
Mood model for how each partner felt about a date.
"""
from sqlalchemy import Column, String, Text, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class Mood(str, enum.Enum):
    """Mood tag."""
    HAPPY = "happy"
    LOVED = "loved"
    CONTENT = "content"
    EXCITED = "excited"
    GRATEFUL = "grateful"
    PEACEFUL = "peaceful"
    TIRED = "tired"
    SAD = "sad"
    ANXIOUS = "anxious"
    DISCONNECTED = "disconnected"


class MoodEntry(BaseModel):
    """Mood model for one mood per user per date."""
    __tablename__ = "moods"

    couple_code = Column(String(32), ForeignKey("couples.code"), nullable=False, index=True)
    date_id = Column(Integer, ForeignKey("dates.id"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    user_name = Column(String(100), nullable=False)
    mood = Column(SQLEnum(Mood), nullable=False)
    notes = Column(Text, nullable=True)

    # Relationships
    couple = relationship("Couple", back_populates="moods")
    date = relationship("Date", back_populates="moods")

    # Unique constraint: one mood per user per date
    __table_args__ = (
        UniqueConstraint('date_id', 'user_id', name='uq_date_user_mood'),
    )
