"""
Couple routes: create, join, recover, presence and push tokens.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.exceptions import SoulSyncError
from app.models.couple import CoupleMember
from app.schemas.couple import (
    CoupleCreate, CoupleJoin, AccountRecover, PushTokenUpdate,
    SessionResponse, MemberResponse, CoupleResponse
)
from app.services import couple_service
from app.services.couple_service import SessionContext
from app.api.dependencies import get_current_session, to_http_error

router = APIRouter(prefix="/couples", tags=["couples"])


def member_response(member: CoupleMember) -> MemberResponse:
    return MemberResponse(
        user_id=member.user_id,
        email=member.email,
        name=member.name,
        timezone=member.timezone,
        joined_at=member.joined_at,
        last_seen=member.last_seen,
        has_push_token=bool(member.push_token)
    )


def session_response(couple, member, token: str) -> SessionResponse:
    return SessionResponse(
        couple_code=couple.code,
        user_id=member.user_id,
        user_name=member.name,
        email=member.email,
        recovery_code=couple.recovery_code,
        access_token=token
    )


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_couple(data: CoupleCreate, db: Session = Depends(get_db)):
    """Create a couple code; the caller becomes its first member."""
    couple, member, token = couple_service.create_couple(data.email, data.name, data.timezone, db)
    return session_response(couple, member, token)


@router.post("/join", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def join_couple(data: CoupleJoin, db: Session = Depends(get_db)):
    """Join the partner's couple code."""
    try:
        couple, member, token = couple_service.join_couple(data.code, data.email, data.name, data.timezone, db)
    except SoulSyncError as e:
        raise to_http_error(e)
    return session_response(couple, member, token)


@router.post("/recover", response_model=SessionResponse)
async def recover_account(data: AccountRecover, db: Session = Depends(get_db)):
    """Restore a session with the recovery code."""
    try:
        couple, member, token = couple_service.recover_account(data.recovery_code, data.email, db)
    except SoulSyncError as e:
        raise to_http_error(e)
    return session_response(couple, member, token)


@router.get("/me", response_model=CoupleResponse)
async def get_my_couple(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Couple details with partner info and online flag."""
    couple = couple_service.get_couple(session.couple_code, db)
    me = next(m for m in couple.members if m.user_id == session.user_id)
    partner = couple_service.get_partner(session, db)

    return CoupleResponse(
        code=couple.code,
        created_at=couple.created_at,
        me=member_response(me),
        partner=member_response(partner) if partner else None,
        is_partner_online=couple_service.is_member_online(partner),
        members=[member_response(m) for m in couple.members]
    )


@router.post("/heartbeat", response_model=MemberResponse)
async def heartbeat(
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Update the caller's last-seen time."""
    try:
        member = couple_service.touch_last_seen(session, db)
    except SoulSyncError as e:
        raise to_http_error(e)
    return member_response(member)


@router.put("/push-token", response_model=MemberResponse)
async def save_push_token(
    data: PushTokenUpdate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Save the caller's device push token."""
    try:
        member = couple_service.save_push_token(session, data.token, db)
    except SoulSyncError as e:
        raise to_http_error(e)
    return member_response(member)
