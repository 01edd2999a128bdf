# waitlist/services/credential_store.py
"""
Organizer credential persistence.

Responsibilities:
- Lookups by id, email and (provider, provider_id)
- Creating and saving organizers with their linked social providers
- Surfacing unique-constraint violations as ``Conflict`` so callers can
  translate them (EmailTaken / ProviderTaken / AlreadyLinked)
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from waitlist.auth.errors import Conflict
from waitlist.models.organizer import Organizer, OrganizerSocialProvider

logger = logging.getLogger(__name__)

# Ordered: the organizer/provider constraint message also mentions "provider".
_CONFLICT_MARKERS: tuple[tuple[str, str], ...] = (
    ("uq_social_providers_organizer_provider", "organizer_provider"),
    ("organizer_social_providers.organizer_id", "organizer_provider"),
    ("uq_social_providers_provider_identity", "provider_identity"),
    ("organizer_social_providers.provider", "provider_identity"),
    ("email", "email"),
)


def conflict_field(exc: IntegrityError) -> str | None:
    """Best-effort name of the violated unique constraint (works for Postgres and SQLite)."""
    message = str(getattr(exc, "orig", None) or exc)
    for marker, field in _CONFLICT_MARKERS:
        if marker in message:
            return field
    return None


class CredentialStore:
    """Thin repository over the organizers tables."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, organizer_id: str) -> Optional[Organizer]:
        if not organizer_id:
            return None
        return self.db.get(Organizer, organizer_id)

    def find_by_email(self, email: str) -> Optional[Organizer]:
        return self.db.query(Organizer).filter(Organizer.email == email).first()

    def find_by_provider_identity(self, provider: str, provider_id: str) -> Optional[Organizer]:
        return (
            self.db.query(Organizer)
            .join(OrganizerSocialProvider, OrganizerSocialProvider.organizer_id == Organizer.id)
            .filter(
                OrganizerSocialProvider.provider == provider,
                OrganizerSocialProvider.provider_id == provider_id,
            )
            .first()
        )

    def create(
        self,
        email: str,
        *,
        password_hash: str | None = None,
        social_providers: Iterable[tuple[str, str]] = (),
    ) -> Organizer:
        organizer = Organizer(email=email, password_hash=password_hash)
        for provider, provider_id in social_providers:
            organizer.social_providers.append(
                OrganizerSocialProvider(provider=provider, provider_id=provider_id)
            )
        self.db.add(organizer)
        self._commit()
        self.db.refresh(organizer)
        return organizer

    def save(self, organizer: Organizer) -> Organizer:
        self.db.add(organizer)
        self._commit()
        self.db.refresh(organizer)
        return organizer

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            field = conflict_field(exc)
            logger.warning("Organizer write hit a uniqueness constraint: field=%s", field)
            raise Conflict(field=field) from exc
