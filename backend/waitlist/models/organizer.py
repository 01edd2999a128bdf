# waitlist/models/organizer.py
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from waitlist.core.base import Base

SUPPORTED_PROVIDERS = ("google", "github")


def new_organizer_id() -> str:
    return uuid.uuid4().hex


class Organizer(Base):
    __tablename__ = "organizers"

    id = Column(String(32), primary_key=True, default=new_organizer_id)

    # Stored as given; uniqueness is exact-match.
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Only set by direct signup. Social-only organizers have no password.
    password_hash = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # ✅ organizer → linked social providers (ordered by link order)
    social_providers = relationship(
        "OrganizerSocialProvider",
        back_populates="organizer",
        cascade="all, delete-orphan",
        order_by="OrganizerSocialProvider.id",
    )

    # ✅ organizer → services
    services = relationship(
        "Service",
        back_populates="organizer",
        cascade="all, delete-orphan",
    )

    def has_provider(self, provider: str) -> bool:
        return any(p.provider == provider for p in self.social_providers)

    @property
    def auth_method_count(self) -> int:
        return (1 if self.password_hash else 0) + len(self.social_providers)


class OrganizerSocialProvider(Base):
    __tablename__ = "organizer_social_providers"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_social_providers_provider_identity"),
        UniqueConstraint("organizer_id", "provider", name="uq_social_providers_organizer_provider"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    organizer_id = Column(
        String(32),
        ForeignKey("organizers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    provider = Column(String(20), nullable=False)  # google | github

    # Provider's opaque subject id (Google user_id, GitHub numeric id as string)
    provider_id = Column(String(255), nullable=False)

    linked_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    organizer = relationship("Organizer", back_populates="social_providers")
