"""
Couple models: the shared couple record and its (at most two) members.
"""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.core.utils import utcnow

MAX_COUPLE_MEMBERS = 2


class Couple(BaseModel):
    """Couple identified by a human-readable code."""
    __tablename__ = "couples"

    code = Column(String(32), unique=True, nullable=False, index=True)
    recovery_code = Column(String(19), nullable=False, index=True)

    # Relationships
    members = relationship("CoupleMember", back_populates="couple", cascade="all, delete-orphan")
    dates = relationship("Date", back_populates="couple", cascade="all, delete-orphan")
    bucket_list_items = relationship("BucketListItem", back_populates="couple", cascade="all, delete-orphan")
    moods = relationship("MoodEntry", back_populates="couple", cascade="all, delete-orphan")


class CoupleMember(BaseModel):
    """
    One linked user. Each client only ever writes its own row, so presence
    and push-token updates from both partners never clobber each other.
    """
    __tablename__ = "couple_members"

    couple_id = Column(Integer, ForeignKey("couples.id"), nullable=False, index=True)
    user_id = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    timezone = Column(String(64), nullable=False, default="UTC")
    joined_at = Column(DateTime, default=utcnow, nullable=False)
    last_seen = Column(DateTime, default=utcnow, nullable=False)
    push_token = Column(Text, nullable=True)
    push_token_updated_at = Column(DateTime, nullable=True)

    # Relationships
    couple = relationship("Couple", back_populates="members")
