"""create profiles, events and registrations

Revision ID: c001_campus_portal
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "c001_campus_portal"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="student"),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("student_id", sa.String(), nullable=True),
        sa.Column("department", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint("role IN ('student', 'admin')", name="check_profile_role"),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])

    op.create_table(
        "events",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("registration_deadline", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.String(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "max_participants IS NULL OR max_participants > 0",
            name="check_max_participants_positive",
        ),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"])
    op.create_index("ix_events_created_by", "events", ["created_by"])

    op.create_table(
        "registrations",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "event_id",
            sa.String(),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("user_id", sa.String(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="registered"),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('registered', 'cancelled')", name="check_registration_status"
        ),
    )
    op.create_index("ix_registrations_event_id", "registrations", ["event_id"])
    op.create_index("ix_registrations_user_id", "registrations", ["user_id"])
    op.create_index(
        "ix_registrations_event_status", "registrations", ["event_id", "status"]
    )
    # One active registration per (event, user); cancelled rows are history.
    op.create_index(
        "uq_registrations_active_event_user",
        "registrations",
        ["event_id", "user_id"],
        unique=True,
        postgresql_where=sa.text("status = 'registered'"),
    )


def downgrade() -> None:
    op.drop_index("uq_registrations_active_event_user", table_name="registrations")
    op.drop_index("ix_registrations_event_status", table_name="registrations")
    op.drop_index("ix_registrations_user_id", table_name="registrations")
    op.drop_index("ix_registrations_event_id", table_name="registrations")
    op.drop_table("registrations")
    op.drop_index("ix_events_created_by", table_name="events")
    op.drop_index("ix_events_event_date", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
