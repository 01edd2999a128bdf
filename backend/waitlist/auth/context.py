# waitlist/auth/context.py
"""
Authenticated request context.

Built once at the session-verification boundary (see
``waitlist.dependencies.auth``) and passed explicitly to downstream
operations. It carries exactly the organizer id; anything else about the
organizer is looked up from the store when needed.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthContext:
    organizer_id: str

    @classmethod
    def from_session_subject(cls, subject: str) -> AuthContext:
        """Create a context from the ``sub`` claim of a verified session token."""
        return cls(organizer_id=str(subject))
