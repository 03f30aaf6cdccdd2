"""
Shared route dependencies: session resolution and error translation.
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.exceptions import (
    SoulSyncError, NotFoundError, InvalidStateTransition, PermissionDenied, CoupleFull
)
from app.core.security import decode_access_token
from app.services.couple_service import SessionContext, get_member, build_session

bearer_scheme = HTTPBearer()


async def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> SessionContext:
    """Resolve the bearer token into the caller's SessionContext."""
    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub") or not payload.get("couple_code"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"}
        )

    member = get_member(payload["sub"], payload["couple_code"], db)
    if not member:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session no longer matches a couple member",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return build_session(member)


def to_http_error(error: SoulSyncError) -> HTTPException:
    """Map a domain error raised by a service to an HTTP error."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (InvalidStateTransition, CoupleFull)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, PermissionDenied):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
