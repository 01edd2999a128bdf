from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from waitlist.core.base import Base


class WaitlistParticipant(Base):
    __tablename__ = "waitlist_participants"
    __table_args__ = (
        UniqueConstraint("service_id", "email", name="uq_waitlist_participants_service_id_email"),
    )

    id = Column(Integer, primary_key=True, index=True)

    service_id = Column(
        Integer,
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    email = Column(String(255), nullable=False)

    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    service = relationship("Service", back_populates="participants")
