# waitlist/services/identity.py
"""
Organizer identity resolution.

Responsibilities:
- Email/password signup and login
- Social login: find-or-create an organizer for a verified provider identity
- Profile lookup for already-verified sessions

Every entry point returns an Organizer (or raises one of the error kinds in
``waitlist.auth.errors``); session issuing happens at the route layer.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from waitlist.auth.errors import (
    AlreadyLinked,
    Conflict,
    EmailTaken,
    InvalidCredentials,
    PasswordRequired,
    ProviderIdentityConflict,
    ProviderTaken,
    SocialOnlyAccount,
)
from waitlist.auth.providers import ProviderIdentity, verify_provider_token
from waitlist.core.config import settings
from waitlist.core.security import hash_password, verify_password
from waitlist.models.organizer import Organizer, OrganizerSocialProvider
from waitlist.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


def translate_conflict(exc: Conflict) -> Exception:
    """Map a raw store uniqueness violation onto the user-facing error kind."""
    if exc.field == "email":
        return EmailTaken()
    if exc.field == "provider_identity":
        return ProviderTaken()
    if exc.field == "organizer_provider":
        return AlreadyLinked()
    return exc


def signup(db: Session, email: str, password: str) -> Organizer:
    store = CredentialStore(db)

    if store.find_by_email(email):
        raise EmailTaken()

    if not password:
        raise PasswordRequired()

    try:
        organizer = store.create(email, password_hash=hash_password(password))
    except Conflict as exc:
        raise translate_conflict(exc) from exc

    logger.info("Organizer signed up: id=%s", organizer.id)
    return organizer


def login(db: Session, email: str, password: str) -> Organizer:
    organizer = CredentialStore(db).find_by_email(email)
    if not organizer:
        raise InvalidCredentials()

    if not organizer.password_hash:
        raise SocialOnlyAccount()

    if not verify_password(password, organizer.password_hash):
        raise InvalidCredentials()

    return organizer


def resolve_social_identity(db: Session, identity: ProviderIdentity) -> Organizer:
    """
    Find or create the organizer for an already-verified provider identity.

    - Known (provider, provider_id): same email -> that organizer; different
      email -> ProviderIdentityConflict (never silently rebind).
    - Unknown identity, known email -> link the provider to that organizer.
    - Otherwise -> new social-only organizer.
    """
    store = CredentialStore(db)
    provider, provider_id, email = identity.provider, identity.provider_id, identity.email

    linked = store.find_by_provider_identity(provider, provider_id)
    if linked:
        if linked.email != email:
            logger.warning(
                "Provider identity already bound to a different email: provider=%s organizer=%s",
                provider,
                linked.id,
            )
            raise ProviderIdentityConflict(f"This {provider} account is already linked to another account")
        return linked

    organizer = store.find_by_email(email)
    try:
        if organizer is None:
            organizer = store.create(email, social_providers=[(provider, provider_id)])
            logger.info("Provisioned organizer from social login: id=%s provider=%s", organizer.id, provider)
            return organizer

        if not settings.ALLOW_IMPLICIT_SOCIAL_LINKING:
            raise EmailTaken("An account with this email already exists. Sign in and link the provider instead.")

        # Another account of the same provider is linked here already; keep that link.
        if organizer.has_provider(provider):
            return organizer

        # TODO: gate implicit linking behind re-authentication once security review lands.
        organizer.social_providers.append(OrganizerSocialProvider(provider=provider, provider_id=provider_id))
        store.save(organizer)
        logger.warning(
            "Implicitly linked %s to existing organizer by email match: id=%s",
            provider,
            organizer.id,
        )
        return organizer
    except Conflict as exc:
        raise translate_conflict(exc) from exc


def authenticate_social(db: Session, provider: str, token: str) -> Organizer:
    identity = verify_provider_token(provider, token)
    return resolve_social_identity(db, identity)


def validate_organizer(db: Session, organizer_id: str) -> Optional[Organizer]:
    return CredentialStore(db).find_by_id(organizer_id)
