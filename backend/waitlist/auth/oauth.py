"""
Redirect-based OAuth flow (authorization code grant).

State is a signed, self-contained token: it names the provider, expires after
OAUTH_STATE_TTL_SECONDS, and carries a random nonce that is also handed to the
browser as an HttpOnly cookie. Nothing is kept server-side, so any instance can
complete a flow started by another.
"""
from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from urllib.parse import urlencode

import httpx
from fastapi import Request, Response
from jose import JWTError

from waitlist.auth.errors import InvalidToken, OAuthStateInvalid, UnsupportedProvider
from waitlist.auth.providers import require_supported_provider
from waitlist.core.config import settings
from waitlist.core.security import decode_token, encode_token

logger = logging.getLogger(__name__)

STATE_PURPOSE = "oauth_state"

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"


# -----------------------------
# State tokens
# -----------------------------
def create_oauth_state(provider: str) -> tuple[str, str]:
    """Returns ``(state, nonce)``. The nonce goes in the state cookie."""
    require_supported_provider(provider)
    nonce = secrets.token_urlsafe(24)
    state = encode_token(
        {"purpose": STATE_PURPOSE, "provider": provider, "nonce": nonce},
        expires_in=timedelta(seconds=settings.OAUTH_STATE_TTL_SECONDS),
    )
    return state, nonce


def verify_oauth_state(state: str | None, *, provider: str, nonce: str | None) -> None:
    if not state or not nonce:
        raise OAuthStateInvalid()
    try:
        payload = decode_token(state)
    except JWTError:
        raise OAuthStateInvalid()

    if payload.get("purpose") != STATE_PURPOSE or payload.get("provider") != provider:
        raise OAuthStateInvalid()
    if not secrets.compare_digest(str(payload.get("nonce") or ""), nonce):
        raise OAuthStateInvalid()


# -----------------------------
# State cookie helpers
# -----------------------------
def state_cookie_name() -> str:
    return settings.OAUTH_STATE_COOKIE_NAME.strip() or "oauth_state_nonce"


def set_state_cookie(resp: Response, nonce: str) -> None:
    resp.set_cookie(
        key=state_cookie_name(),
        value=nonce,
        httponly=True,
        secure=settings.is_prod,
        samesite="lax",
        max_age=settings.OAUTH_STATE_TTL_SECONDS,
        path="/auth",
    )


def clear_state_cookie(resp: Response) -> None:
    resp.delete_cookie(key=state_cookie_name(), path="/auth")


def read_state_cookie(req: Request) -> str | None:
    val = (req.cookies.get(state_cookie_name()) or "").strip()
    return val or None


# -----------------------------
# Provider endpoints
# -----------------------------
def authorize_url(provider: str, state: str) -> str:
    if provider == "google":
        params = {
            "client_id": settings.GOOGLE_CLIENT_ID,
            "redirect_uri": settings.GOOGLE_REDIRECT_URI,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
        }
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"
    if provider == "github":
        params = {
            "client_id": settings.GITHUB_CLIENT_ID,
            "redirect_uri": settings.GITHUB_REDIRECT_URI,
            "scope": "user:email",
            "state": state,
        }
        return f"{GITHUB_AUTHORIZE_URL}?{urlencode(params)}"
    raise UnsupportedProvider(f"Unsupported provider: {provider}")


def exchange_code(provider: str, code: str) -> str:
    """
    Trade an authorization code for the provider's access token.

    Raises:
        InvalidToken: the provider rejected the code or returned no access token.
    """
    if provider == "google":
        response = httpx.post(
            GOOGLE_TOKEN_URL,
            data={
                "code": code,
                "client_id": settings.GOOGLE_CLIENT_ID,
                "client_secret": settings.GOOGLE_CLIENT_SECRET,
                "redirect_uri": settings.GOOGLE_REDIRECT_URI,
                "grant_type": "authorization_code",
            },
            timeout=settings.PROVIDER_HTTP_TIMEOUT,
        )
    elif provider == "github":
        response = httpx.post(
            GITHUB_TOKEN_URL,
            data={
                "code": code,
                "client_id": settings.GITHUB_CLIENT_ID,
                "client_secret": settings.GITHUB_CLIENT_SECRET,
                "redirect_uri": settings.GITHUB_REDIRECT_URI,
            },
            headers={"Accept": "application/json"},
            timeout=settings.PROVIDER_HTTP_TIMEOUT,
        )
    else:
        raise UnsupportedProvider(f"Unsupported provider: {provider}")

    if 400 <= response.status_code < 500:
        raise InvalidToken(f"Invalid {provider} authorization code")
    response.raise_for_status()

    # GitHub reports bad codes with a 200 and an "error" field.
    access_token = response.json().get("access_token")
    if not access_token:
        logger.warning("OAuth code exchange returned no access token: provider=%s", provider)
        raise InvalidToken(f"Invalid {provider} authorization code")
    return access_token
