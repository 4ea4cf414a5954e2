import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(
        String, primary_key=True, default=lambda: f"reg_{uuid.uuid4().hex[:12]}"
    )
    event_id = Column(
        String, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String, ForeignKey("profiles.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, server_default="registered")
    # Set once at creation; cancelling does not touch it.
    registered_at = Column(DateTime(timezone=True), nullable=False)

    event = relationship("Event", back_populates="registrations")
    profile = relationship("Profile")

    __table_args__ = (
        # At most one active registration per (event, user). Cancelled rows
        # are kept as history and do not take part in the constraint.
        Index(
            "uq_registrations_active_event_user",
            "event_id",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'registered'"),
            sqlite_where=text("status = 'registered'"),
        ),
        Index("ix_registrations_event_status", "event_id", "status"),
        CheckConstraint(
            "status IN ('registered', 'cancelled')", name="check_registration_status"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Registration(id={self.id}, event={self.event_id}, "
            f"user={self.user_id}, status={self.status})>"
        )
