"""
Pydantic schemas for Couple and CoupleMember entities.
"""
from pydantic import BaseModel, EmailStr
from typing import List, Optional
from datetime import datetime


class CoupleCreate(BaseModel):
    """Schema for creating a couple (first member)."""
    email: EmailStr
    name: str
    timezone: str = "UTC"


class CoupleJoin(CoupleCreate):
    """Schema for joining an existing couple."""
    code: str


class AccountRecover(BaseModel):
    """Schema for recovering a session with a recovery code."""
    recovery_code: str
    email: EmailStr


class PushTokenUpdate(BaseModel):
    """Schema for saving a device push token."""
    token: str


class SessionResponse(BaseModel):
    """Schema returned after create/join/recover."""
    couple_code: str
    user_id: str
    user_name: str
    email: str
    recovery_code: str
    access_token: str
    token_type: str = "bearer"


class MemberResponse(BaseModel):
    """Schema for member response."""
    user_id: str
    email: str
    name: str
    timezone: str
    joined_at: datetime
    last_seen: datetime
    has_push_token: bool = False

    class Config:
        from_attributes = True


class CoupleResponse(BaseModel):
    """Schema for couple detail from the caller's point of view."""
    code: str
    created_at: datetime
    me: MemberResponse
    partner: Optional[MemberResponse] = None
    is_partner_online: bool = False
    members: List[MemberResponse] = []
