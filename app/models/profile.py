# app/models/profile.py
"""
Profile model linked 1:1 to an identity of the hosted auth provider.

The primary key is the auth provider's user id (the JWT `sub` claim), so the
row is created alongside account signup and never re-keyed.
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, String

from app.db.base_class import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    role = Column(String(20), nullable=False, server_default="student")
    full_name = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)
    student_id = Column(String, nullable=True)
    department = Column(String, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("role IN ('student', 'admin')", name="check_profile_role"),
    )
