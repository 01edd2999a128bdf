"""
Social provider token verification.

Given a provider-issued bearer token (from a client-side OAuth flow, or
obtained by the redirect flow's code exchange), ask the provider who it
belongs to and return the verified email plus the provider-scoped subject id.

Transport errors and unexpected statuses propagate as ``httpx`` exceptions;
nothing here retries.
"""
from __future__ import annotations

from dataclasses import dataclass

import httpx

from waitlist.auth.errors import InvalidToken, NoVerifiedEmail, UnsupportedProvider
from waitlist.core.config import settings
from waitlist.models.organizer import SUPPORTED_PROVIDERS

GOOGLE_TOKENINFO_URL = "https://www.googleapis.com/oauth2/v1/tokeninfo"
GITHUB_USER_URL = "https://api.github.com/user"
GITHUB_EMAILS_URL = "https://api.github.com/user/emails"


@dataclass(frozen=True)
class ProviderIdentity:
    provider: str
    provider_id: str
    email: str


def _github_headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
    }


def verify_google(token: str) -> ProviderIdentity:
    """
    Validate a Google access token via the tokeninfo endpoint.

    Raises:
        InvalidToken: Google rejected the token (4xx) or returned no email/user id.
    """
    response = httpx.get(
        GOOGLE_TOKENINFO_URL,
        params={"access_token": token},
        timeout=settings.PROVIDER_HTTP_TIMEOUT,
    )
    if 400 <= response.status_code < 500:
        raise InvalidToken("Invalid Google token")
    response.raise_for_status()

    payload = response.json()
    email = payload.get("email")
    user_id = payload.get("user_id")
    if not email or not user_id:
        raise InvalidToken("Invalid Google token")

    return ProviderIdentity(provider="google", provider_id=str(user_id), email=email)


def _github_primary_email(token: str) -> str:
    response = httpx.get(
        GITHUB_EMAILS_URL,
        headers=_github_headers(token),
        timeout=settings.PROVIDER_HTTP_TIMEOUT,
    )
    if response.status_code == 401:
        raise InvalidToken("Invalid GitHub token")
    response.raise_for_status()

    for entry in response.json() or []:
        if entry.get("primary") and entry.get("verified") and entry.get("email"):
            return entry["email"]
    raise NoVerifiedEmail()


def verify_github(token: str) -> ProviderIdentity:
    """
    Validate a GitHub access token against the user endpoint.

    Users without a public email fall back to their primary verified address.

    Raises:
        InvalidToken: GitHub answered 401.
        NoVerifiedEmail: no public email and no primary+verified address.
    """
    response = httpx.get(
        GITHUB_USER_URL,
        headers=_github_headers(token),
        timeout=settings.PROVIDER_HTTP_TIMEOUT,
    )
    if response.status_code == 401:
        raise InvalidToken("Invalid GitHub token")
    response.raise_for_status()

    payload = response.json()
    github_id = payload.get("id")
    if github_id is None:
        raise InvalidToken("Invalid GitHub token")

    email = payload.get("email") or _github_primary_email(token)
    return ProviderIdentity(provider="github", provider_id=str(github_id), email=email)


def require_supported_provider(provider: str) -> str:
    if provider not in SUPPORTED_PROVIDERS:
        raise UnsupportedProvider(f"Unsupported provider: {provider}")
    return provider


def verify_provider_token(provider: str, token: str) -> ProviderIdentity:
    """Dispatch to the provider's verifier; unknown providers raise ``UnsupportedProvider``."""
    if provider == "google":
        return verify_google(token)
    if provider == "github":
        return verify_github(token)
    raise UnsupportedProvider(f"Unsupported provider: {provider}")
