"""
Couple service: linking, recovery, presence and push-token bookkeeping.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple
import logging
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import NotFoundError, CoupleFull
from app.core.security import (
    generate_couple_code, generate_user_id, generate_recovery_code, create_session_token
)
from app.core.utils import utcnow
from app.models.couple import Couple, CoupleMember, MAX_COUPLE_MEMBERS

logger = logging.getLogger(__name__)

COUPLE_CODE_ATTEMPTS = 10


@dataclass(frozen=True)
class SessionContext:
    """Identity of the calling member, passed explicitly to every operation."""
    couple_id: int
    couple_code: str
    user_id: str
    user_name: str
    email: str


def build_session(member: CoupleMember) -> SessionContext:
    return SessionContext(
        couple_id=member.couple_id,
        couple_code=member.couple.code,
        user_id=member.user_id,
        user_name=member.name,
        email=member.email
    )


def _new_member(email: str, name: str, timezone: str) -> CoupleMember:
    now = utcnow()
    return CoupleMember(
        user_id=generate_user_id(),
        email=email.strip().lower(),
        name=name.strip(),
        timezone=timezone or "UTC",
        joined_at=now,
        last_seen=now
    )


def _unique_couple_code(db: Session) -> str:
    for _ in range(COUPLE_CODE_ATTEMPTS):
        code = generate_couple_code()
        if not db.query(Couple.id).filter(Couple.code == code).first():
            return code
    raise RuntimeError("Could not generate a unique couple code")


def create_couple(email: str, name: str, timezone: str, db: Session) -> Tuple[Couple, CoupleMember, str]:
    """
    Create a new couple with the caller as its first member.
    Returns (couple, member, session token).
    """
    couple = Couple(
        code=_unique_couple_code(db),
        recovery_code=generate_recovery_code()
    )
    member = _new_member(email, name, timezone)
    couple.members.append(member)
    db.add(couple)
    db.commit()
    db.refresh(couple)
    db.refresh(member)

    logger.info(f"Created couple {couple.code} for member {member.user_id}")
    return couple, member, create_session_token(member.user_id, couple.code)


def join_couple(code: str, email: str, name: str, timezone: str, db: Session) -> Tuple[Couple, CoupleMember, str]:
    """Join an existing couple. Fails when the code is unknown or the couple is full."""
    couple = db.query(Couple).filter(Couple.code == code.strip().upper()).first()
    if not couple:
        raise NotFoundError("Couple code not found")

    member_count = db.query(CoupleMember).filter(CoupleMember.couple_id == couple.id).count()
    if member_count >= MAX_COUPLE_MEMBERS:
        raise CoupleFull(f"This couple code already has {MAX_COUPLE_MEMBERS} users")

    member = _new_member(email, name, timezone)
    member.couple_id = couple.id
    db.add(member)
    db.commit()
    db.refresh(member)

    logger.info(f"Member {member.user_id} joined couple {couple.code}")
    return couple, member, create_session_token(member.user_id, couple.code)


def recover_account(recovery_code: str, email: str, db: Session) -> Tuple[Couple, CoupleMember, str]:
    """Re-establish a session from the couple's recovery code and the member's email."""
    member = db.query(CoupleMember).join(Couple).filter(
        Couple.recovery_code == recovery_code.strip().upper(),
        CoupleMember.email == email.strip().lower()
    ).first()
    if not member:
        raise NotFoundError("Recovery code or email not found")

    member.last_seen = utcnow()
    db.commit()
    db.refresh(member)

    logger.info(f"Recovered session for member {member.user_id}")
    return member.couple, member, create_session_token(member.user_id, member.couple.code)


def get_member(user_id: str, couple_code: str, db: Session) -> Optional[CoupleMember]:
    """Member row for a session token's claims, or None if it no longer matches."""
    return db.query(CoupleMember).join(Couple).filter(
        CoupleMember.user_id == user_id,
        Couple.code == couple_code
    ).first()


def get_couple(couple_code: str, db: Session) -> Couple:
    couple = db.query(Couple).filter(Couple.code == couple_code).first()
    if not couple:
        raise NotFoundError(f"Couple {couple_code} not found")
    return couple


def get_partner(session: SessionContext, db: Session) -> Optional[CoupleMember]:
    """The other member of the caller's couple, if someone has joined."""
    return db.query(CoupleMember).filter(
        CoupleMember.couple_id == session.couple_id,
        CoupleMember.user_id != session.user_id
    ).first()


def is_member_online(member: Optional[CoupleMember]) -> bool:
    """Online if seen within the presence window."""
    if not member or not member.last_seen:
        return False
    window = timedelta(minutes=settings.PARTNER_ONLINE_WINDOW_MINUTES)
    return utcnow() - member.last_seen < window


def touch_last_seen(session: SessionContext, db: Session) -> CoupleMember:
    """Presence heartbeat. Only the caller's own member row is written."""
    member = _own_member(session, db)
    member.last_seen = utcnow()
    db.commit()
    db.refresh(member)
    return member


def save_push_token(session: SessionContext, token: str, db: Session) -> CoupleMember:
    """Store the caller's device push token."""
    member = _own_member(session, db)
    member.push_token = token
    member.push_token_updated_at = utcnow()
    db.commit()
    db.refresh(member)

    logger.info(f"Push token saved for member {member.user_id}")
    return member


def _own_member(session: SessionContext, db: Session) -> CoupleMember:
    member = db.query(CoupleMember).filter(
        CoupleMember.user_id == session.user_id,
        CoupleMember.couple_id == session.couple_id
    ).first()
    if not member:
        raise NotFoundError("Member not found")
    return member
