"""
Bucket list model for shared couple goals.
"""
from sqlalchemy import Column, String, DateTime, Text, Boolean, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class BucketCategory(str, enum.Enum):
    """Bucket list category."""
    TRAVEL = "travel"
    FOOD = "food"
    EXPERIENCE = "experience"
    ADVENTURE = "adventure"
    LEARNING = "learning"
    MILESTONE = "milestone"
    OTHER = "other"


class BucketPriority(str, enum.Enum):
    """Bucket list priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BucketListItem(BaseModel):
    """Bucket list item shared by a couple."""
    __tablename__ = "bucket_list_items"

    couple_code = Column(String(32), ForeignKey("couples.code"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(SQLEnum(BucketCategory), default=BucketCategory.OTHER, nullable=False)
    priority = Column(SQLEnum(BucketPriority), default=BucketPriority.MEDIUM, nullable=False)

    created_by = Column(String(64), nullable=False)
    created_by_name = Column(String(100), nullable=False)

    completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    completed_by = Column(String(64), nullable=True)

    # Relationships
    couple = relationship("Couple", back_populates="bucket_list_items")
