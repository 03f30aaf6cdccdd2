"""
Pydantic schemas for BucketListItem entity.
"""
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.models.bucket_list import BucketCategory, BucketPriority


class BucketListItemBase(BaseModel):
    """Base bucket list schema."""
    title: str
    description: Optional[str] = None
    category: BucketCategory = BucketCategory.OTHER
    priority: BucketPriority = BucketPriority.MEDIUM


class BucketListItemCreate(BucketListItemBase):
    """Schema for bucket list item creation."""
    pass


class BucketListItemUpdate(BaseModel):
    """Schema for bucket list item update."""
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[BucketCategory] = None
    priority: Optional[BucketPriority] = None


class BucketListToggle(BaseModel):
    """Schema for toggling completion."""
    completed: bool


class BucketListItemResponse(BucketListItemBase):
    """Schema for bucket list item response."""
    id: int
    couple_code: str
    created_by: str
    created_by_name: str
    completed: bool
    completed_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
