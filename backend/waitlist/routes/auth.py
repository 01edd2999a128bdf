# waitlist/routes/auth.py
from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from waitlist.auth.context import AuthContext
from waitlist.auth.errors import AuthError, InvalidToken
from waitlist.auth.oauth import (
    authorize_url,
    clear_state_cookie,
    create_oauth_state,
    exchange_code,
    read_state_cookie,
    set_state_cookie,
    verify_oauth_state,
)
from waitlist.auth.providers import require_supported_provider
from waitlist.core.config import settings
from waitlist.core.database import get_db
from waitlist.core.rate_limit import maybe_limit
from waitlist.core.security import issue_session_token
from waitlist.dependencies.auth import get_auth_context, get_current_organizer
from waitlist.models.organizer import Organizer
from waitlist.schemas.auth import LoginIn, MessageOut, SignupIn, SocialTokenIn, TokenOut
from waitlist.schemas.organizer import OrganizerOut, OrganizerProfileOut
from waitlist.services import identity, provider_links

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(organizer: Organizer) -> dict:
    return {"access_token": issue_session_token(organizer.id), "token_type": "bearer"}


# -----------------------------
# Email / password
# -----------------------------
@router.post("/signup", response_model=OrganizerOut, status_code=status.HTTP_201_CREATED)
@maybe_limit("10/minute")
def signup(request: Request, payload: SignupIn, db: Session = Depends(get_db)):
    return identity.signup(db, payload.email, payload.password)


@router.post("/login", response_model=TokenOut)
@maybe_limit("10/minute")
def login(request: Request, payload: LoginIn, db: Session = Depends(get_db)):
    organizer = identity.login(db, payload.email, payload.password)
    return _token_response(organizer)


# -----------------------------
# Client-side OAuth (provider token in body)
# -----------------------------
@router.post("/social/{provider}", response_model=TokenOut)
@maybe_limit("10/minute")
def social_login(request: Request, provider: str, payload: SocialTokenIn, db: Session = Depends(get_db)):
    organizer = identity.authenticate_social(db, provider, payload.token)
    return _token_response(organizer)


# -----------------------------
# Session-backed profile + provider links
# -----------------------------
@router.get("/me", response_model=OrganizerOut)
def get_me(organizer: Organizer = Depends(get_current_organizer)) -> Organizer:
    return organizer


@router.get("/profile", response_model=OrganizerProfileOut)
def get_profile(ctx: AuthContext = Depends(get_auth_context), db: Session = Depends(get_db)):
    return provider_links.get_full_profile(db, ctx.organizer_id)


@router.post("/link/{provider}", response_model=MessageOut)
def link_provider(
    provider: str,
    payload: SocialTokenIn,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    provider_links.link_provider(db, ctx.organizer_id, provider, payload.token)
    return {"message": f"{provider} account linked successfully"}


@router.delete("/unlink/{provider}", response_model=MessageOut)
def unlink_provider(
    provider: str,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    provider_links.unlink_provider(db, ctx.organizer_id, provider)
    return {"message": f"{provider} account unlinked successfully"}


# -----------------------------
# Redirect-based OAuth
# -----------------------------
def _frontend_redirect(path: str, **params: str) -> RedirectResponse:
    url = f"{settings.FRONTEND_BASE_URL}{path}?{urlencode(params)}"
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/{provider}")
def oauth_start(provider: str):
    state, nonce = create_oauth_state(provider)
    response = RedirectResponse(authorize_url(provider, state), status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    set_state_cookie(response, nonce)
    return response


@router.get("/{provider}/callback")
def oauth_callback(
    request: Request,
    provider: str,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    db: Session = Depends(get_db),
):
    require_supported_provider(provider)

    try:
        if error:
            response = _frontend_redirect("/auth/error", error="ACCESS_DENIED")
        else:
            verify_oauth_state(state, provider=provider, nonce=read_state_cookie(request))
            if not code:
                raise InvalidToken("Missing authorization code")
            provider_token = exchange_code(provider, code)
            organizer = identity.authenticate_social(db, provider, provider_token)
            response = _frontend_redirect("/auth/success", token=issue_session_token(organizer.id))
    except AuthError as exc:
        logger.info("OAuth callback failed: provider=%s code=%s", provider, exc.code)
        response = _frontend_redirect("/auth/error", error=exc.code)

    clear_state_cookie(response)
    return response
