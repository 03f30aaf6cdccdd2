"""
Pydantic schemas for Date entity.
"""
from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from app.core.utils import to_naive_utc
from app.models.date import DateStatus, RequestStatus, DateType


class DateBase(BaseModel):
    """Base date schema."""
    title: str
    date_time: datetime
    notes: Optional[str] = None
    date_type: DateType = DateType.OTHER

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, v):
        """Store as naive UTC."""
        return to_naive_utc(v)


class DateCreate(DateBase):
    """Schema for date creation (request or direct)."""
    pass


class DateUpdate(BaseModel):
    """Schema for editing or rescheduling a date."""
    title: Optional[str] = None
    date_time: Optional[datetime] = None
    notes: Optional[str] = None
    date_type: Optional[DateType] = None

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, v):
        return to_naive_utc(v) if v is not None else v


class DateDecline(BaseModel):
    """Schema for declining a date request."""
    reason: str = ""


class DateResponse(DateBase):
    """Schema for date response. Also used as the snapshot carried by date events."""
    id: int
    couple_code: str
    created_by: str
    created_by_name: str
    status: DateStatus
    request_status: RequestStatus
    accepted_by: Optional[str] = None
    accepted_at: Optional[datetime] = None
    declined_by: Optional[str] = None
    declined_at: Optional[datetime] = None
    decline_reason: Optional[str] = None
    reminder_sent: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
