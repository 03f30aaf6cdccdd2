"""
Date model: a scheduled activity and the subject of the request workflow.
"""
from sqlalchemy import Column, String, DateTime, Text, Boolean, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class DateStatus(str, enum.Enum):
    """Date lifecycle status."""
    PENDING = "pending"
    SCHEDULED = "scheduled"
    DECLINED = "declined"
    COMPLETED = "completed"


class RequestStatus(str, enum.Enum):
    """Approval outcome of a date request."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    AUTO_APPROVED = "auto-approved"


class DateType(str, enum.Enum):
    """Kind of date."""
    DEEP_TALK = "deep-talk"
    SILENT_CONNECTION = "silent-connection"
    QUALITY_TIME = "quality-time"
    SURPRISE = "surprise"
    GAME_NIGHT = "game-night"
    WATCH_PARTY = "watch-party"
    SELF_CARE = "self-care"
    OTHER = "other"


# Allowed status moves; anything missing here is an invalid transition
DATE_TRANSITIONS = {
    DateStatus.PENDING: {DateStatus.SCHEDULED, DateStatus.DECLINED},
    DateStatus.SCHEDULED: {DateStatus.COMPLETED},
    DateStatus.DECLINED: set(),
    DateStatus.COMPLETED: set(),
}


class Date(BaseModel):
    """Date between the two members of a couple. date_time is naive UTC."""
    __tablename__ = "dates"

    couple_code = Column(String(32), ForeignKey("couples.code"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    date_time = Column(DateTime, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    date_type = Column(SQLEnum(DateType), default=DateType.OTHER, nullable=False)

    created_by = Column(String(64), nullable=False, index=True)
    created_by_name = Column(String(100), nullable=False)

    status = Column(SQLEnum(DateStatus), default=DateStatus.PENDING, nullable=False, index=True)
    request_status = Column(SQLEnum(RequestStatus), default=RequestStatus.PENDING, nullable=False)

    accepted_by = Column(String(64), nullable=True)
    accepted_at = Column(DateTime, nullable=True)
    declined_by = Column(String(64), nullable=True)
    declined_at = Column(DateTime, nullable=True)
    decline_reason = Column(Text, nullable=True)

    # Flipped false -> true once by the reminder scan, never reset
    reminder_sent = Column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    couple = relationship("Couple", back_populates="dates")
    moods = relationship("MoodEntry", back_populates="date", cascade="all, delete-orphan")

    def can_transition_to(self, new_status: DateStatus) -> bool:
        return new_status in DATE_TRANSITIONS[self.status]
