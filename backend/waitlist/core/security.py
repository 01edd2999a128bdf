# waitlist/core/security.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from waitlist.auth.errors import SessionExpired, SessionInvalid
from waitlist.core.config import settings

SESSION_PURPOSE = "session"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


# -------------------------
# Password hashing
# -------------------------
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    # passlib's bcrypt verify is constant-time with respect to the hash.
    return pwd_context.verify(password, password_hash)


# -------------------------
# JWT helpers
# -------------------------
def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _require_jwt_secret() -> None:
    if not settings.JWT_SECRET or not settings.JWT_SECRET.strip():
        raise RuntimeError("JWT_SECRET must be set (auth is required).")


def encode_token(claims: dict[str, Any], *, expires_in: timedelta) -> str:
    """Sign ``claims`` with the process-wide key, adding ``iat``/``exp``."""
    _require_jwt_secret()

    now = _now_utc()
    payload = {
        **claims,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    _require_jwt_secret()
    # Let callers decide how to handle JWTError
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


# -------------------------
# Session tokens
# -------------------------
def issue_session_token(organizer_id: str) -> str:
    """
    Session token used for API auth: Authorization: Bearer <token>
    subject = organizer id
    """
    return encode_token(
        {"sub": str(organizer_id), "purpose": SESSION_PURPOSE},
        expires_in=timedelta(minutes=settings.SESSION_TOKEN_EXPIRE_MINUTES),
    )


def verify_session_token(token: str) -> str:
    """
    Returns the organizer id embedded in a session token.

    Raises:
        SessionExpired: signature is fine but ``exp`` has passed.
        SessionInvalid: bad signature, malformed token, wrong purpose or no subject.
    """
    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise SessionExpired()
    except JWTError:
        raise SessionInvalid()

    if payload.get("purpose") != SESSION_PURPOSE:
        raise SessionInvalid()

    organizer_id = str(payload.get("sub") or "").strip()
    if not organizer_id:
        raise SessionInvalid()
    return organizer_id
