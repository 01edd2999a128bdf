from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import JSON

from waitlist.core.base import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)

    organizer_id = Column(
        String(32),
        ForeignKey("organizers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)

    # Public waitlist URL segment; globally unique.
    slug = Column(String(50), unique=True, index=True, nullable=False)

    waitlist_title = Column(String(100), nullable=True)
    waitlist_description = Column(String(500), nullable=True)
    waitlist_background = Column(String(200), nullable=True)

    image = Column(String(200), nullable=True)
    icon = Column(String(200), nullable=True)
    category = Column(String(50), nullable=True)

    # Detail page fields
    tagline = Column(String(200), nullable=True)
    full_description = Column(Text, nullable=True)
    developer = Column(String(100), nullable=True)
    language = Column(String(50), nullable=True)
    platform = Column(String(100), nullable=True)
    launch_date = Column(String(40), nullable=True)
    screenshots = Column(JSON, nullable=False, default=list)
    rating = Column(Float, nullable=False, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    organizer = relationship("Organizer", back_populates="services")

    # ✅ service → waitlist participants
    participants = relationship(
        "WaitlistParticipant",
        back_populates="service",
        cascade="all, delete-orphan",
    )
