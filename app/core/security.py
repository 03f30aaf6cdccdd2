"""
Security utilities for session tokens and couple credentials.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import secrets
from jose import JWTError, jwt
from app.core.config import settings

COUPLE_CODE_ADJECTIVES = ["Sweet", "Lovely", "Happy", "Soul", "Heart", "Star", "Moon", "Sun"]
COUPLE_CODE_NOUNS = ["Mates", "Hearts", "Lovers", "Pair", "Team", "Duo", "Bond", "Connection"]
RECOVERY_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"


def generate_couple_code() -> str:
    """Human-readable couple code such as SWEETHEARTS42."""
    adj = secrets.choice(COUPLE_CODE_ADJECTIVES)
    noun = secrets.choice(COUPLE_CODE_NOUNS)
    return f"{adj}{noun}{secrets.randbelow(1000)}".upper()


def generate_user_id() -> str:
    """Opaque member id."""
    return f"user_{secrets.token_hex(6)}"


def generate_recovery_code() -> str:
    """
    16-character recovery code grouped in fours, e.g. ABCD-EF12-3456-7890.
    """
    chars = "".join(secrets.choice(RECOVERY_CODE_ALPHABET) for _ in range(16))
    return "-".join(chars[i:i + 4] for i in range(0, 16, 4))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT session token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def create_session_token(user_id: str, couple_code: str) -> str:
    """Session token identifying one member of one couple."""
    return create_access_token(data={"sub": user_id, "couple_code": couple_code})


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and verify a JWT token."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return payload
    except JWTError:
        return None
