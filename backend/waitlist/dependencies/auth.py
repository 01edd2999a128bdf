# waitlist/dependencies/auth.py
from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from waitlist.auth.context import AuthContext
from waitlist.core.database import get_db
from waitlist.core.security import verify_session_token
from waitlist.models.organizer import Organizer
from waitlist.services.identity import validate_organizer

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_auth_context(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthContext:
    """
    Validates:
      - Authorization: Bearer <token>
      - session token signature + exp + purpose
    Returns:
      - AuthContext carrying the organizer id
    """
    if not creds or creds.scheme.lower() != "bearer":
        raise _unauthorized("Missing Authorization header")

    # SessionExpired / SessionInvalid propagate; the app renders them as 401 with their own codes.
    organizer_id = verify_session_token(creds.credentials)

    return AuthContext.from_session_subject(organizer_id)


def get_current_organizer(
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
) -> Organizer:
    organizer = validate_organizer(db, ctx.organizer_id)
    if not organizer:
        raise _unauthorized("Organizer not found")
    return organizer
