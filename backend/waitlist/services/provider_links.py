# waitlist/services/provider_links.py
"""
Linking and unlinking social providers on an authenticated organizer.

An organizer must always keep at least one way to sign in: a password or a
linked provider. Linking never moves a provider identity between organizers.
"""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from waitlist.auth.errors import (
    AlreadyLinked,
    Conflict,
    LastMethodRemaining,
    NotFound,
    NotLinked,
    ProviderTaken,
)
from waitlist.auth.providers import verify_provider_token
from waitlist.models.organizer import Organizer, OrganizerSocialProvider
from waitlist.services.credential_store import CredentialStore
from waitlist.services.identity import translate_conflict

logger = logging.getLogger(__name__)


def _require_organizer(store: CredentialStore, organizer_id: str) -> Organizer:
    organizer = store.find_by_id(organizer_id)
    if not organizer:
        raise NotFound()
    return organizer


def link_provider(db: Session, organizer_id: str, provider: str, token: str) -> Organizer:
    identity = verify_provider_token(provider, token)

    store = CredentialStore(db)
    organizer = _require_organizer(store, organizer_id)

    if organizer.has_provider(provider):
        raise AlreadyLinked(f"{provider} account is already linked to this organizer")

    owner = store.find_by_provider_identity(provider, identity.provider_id)
    if owner and owner.id != organizer.id:
        raise ProviderTaken(f"This {provider} account is already linked to another organizer")

    organizer.social_providers.append(
        OrganizerSocialProvider(provider=provider, provider_id=identity.provider_id)
    )
    try:
        store.save(organizer)
    except Conflict as exc:
        raise translate_conflict(exc) from exc

    logger.info("Linked provider: organizer=%s provider=%s", organizer.id, provider)
    return organizer


def unlink_provider(db: Session, organizer_id: str, provider: str) -> Organizer:
    store = CredentialStore(db)
    organizer = _require_organizer(store, organizer_id)

    if not organizer.has_provider(provider):
        raise NotLinked(f"{provider} provider is not linked to this account")

    if organizer.auth_method_count <= 1:
        raise LastMethodRemaining()

    organizer.social_providers = [p for p in organizer.social_providers if p.provider != provider]
    store.save(organizer)

    logger.info("Unlinked provider: organizer=%s provider=%s", organizer.id, provider)
    return organizer


def auth_methods(organizer: Organizer) -> list[str]:
    """``email`` when a password is set, then each distinct linked provider in link order."""
    methods: list[str] = []
    if organizer.password_hash:
        methods.append("email")
    for link in organizer.social_providers:
        if link.provider not in methods:
            methods.append(link.provider)
    return methods


def get_full_profile(db: Session, organizer_id: str) -> dict[str, Any]:
    organizer = _require_organizer(CredentialStore(db), organizer_id)
    return {
        "id": organizer.id,
        "email": organizer.email,
        "created_at": organizer.created_at,
        "auth_methods": auth_methods(organizer),
        "social_providers": [
            {"provider": p.provider, "provider_id": p.provider_id} for p in organizer.social_providers
        ],
    }
