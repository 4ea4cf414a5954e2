# app/crud/crud_registration.py
"""
CRUD operations for event registrations.

Registrations are never deleted here: cancelling flips the active row to
`cancelled`, and re-registering inserts a fresh active row. The partial
unique index on (event_id, user_id) WHERE status = 'registered' is the final
arbiter of the one-active-row invariant.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.constants.registration import RegistrationStatus
from app.models.profile import Profile
from app.models.registration import Registration

logger = logging.getLogger(__name__)


class CRUDRegistration:
    """CRUD operations for Registration."""

    def __init__(self, model=Registration):
        self.model = model

    def get(self, db: Session, id: str) -> Optional[Registration]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_active(
        self, db: Session, *, event_id: str, user_id: str
    ) -> Optional[Registration]:
        """Get the user's active registration for an event, if any."""
        return (
            db.query(self.model)
            .filter(
                and_(
                    self.model.event_id == event_id,
                    self.model.user_id == user_id,
                    self.model.status == RegistrationStatus.REGISTERED,
                )
            )
            .first()
        )

    def get_active_count_by_event(self, db: Session, *, event_id: str) -> int:
        return (
            db.query(func.count(self.model.id))
            .filter(
                self.model.event_id == event_id,
                self.model.status == RegistrationStatus.REGISTERED,
            )
            .scalar()
            or 0
        )

    def get_all_active(self, db: Session) -> List[Registration]:
        return (
            db.query(self.model)
            .filter(self.model.status == RegistrationStatus.REGISTERED)
            .all()
        )

    def get_active_event_ids_for_user(self, db: Session, *, user_id: str) -> set[str]:
        rows = (
            db.query(self.model.event_id)
            .filter(
                self.model.user_id == user_id,
                self.model.status == RegistrationStatus.REGISTERED,
            )
            .all()
        )
        return {event_id for (event_id,) in rows}

    def get_multi_by_user(
        self, db: Session, *, user_id: str, status: Optional[str] = None
    ) -> List[Registration]:
        """A user's registration history with events eager-loaded, newest first."""
        query = (
            db.query(self.model)
            .options(joinedload(self.model.event))
            .filter(self.model.user_id == user_id)
        )
        if status:
            query = query.filter(self.model.status == status)
        return query.order_by(self.model.registered_at.desc()).all()

    def get_registrants(
        self, db: Session, *, event_id: str, joined: bool = True
    ) -> List[Tuple[Registration, Optional[Profile]]]:
        """
        Active registrations for an event, newest first, each paired with the
        registrant's profile.

        Args:
            joined: True fetches registrations and profiles in one joined
                    query. False fetches registrations, then all referenced
                    profiles in a single keyed batch, and merges them.
        """
        query = db.query(self.model).filter(
            self.model.event_id == event_id,
            self.model.status == RegistrationStatus.REGISTERED,
        )
        if joined:
            registrations = (
                query.options(joinedload(self.model.profile))
                .order_by(self.model.registered_at.desc())
                .all()
            )
            return [(reg, reg.profile) for reg in registrations]

        registrations = query.order_by(self.model.registered_at.desc()).all()
        user_ids = {reg.user_id for reg in registrations}
        profiles_by_id = {}
        if user_ids:
            profiles = db.query(Profile).filter(Profile.id.in_(user_ids)).all()
            profiles_by_id = {profile.id: profile for profile in profiles}
        return [(reg, profiles_by_id.get(reg.user_id)) for reg in registrations]

    def create_active(
        self,
        db: Session,
        *,
        event_id: str,
        user_id: str,
        registered_at: datetime,
    ) -> Optional[Registration]:
        """
        Insert a new active registration.
        Returns None if the unique index rejects it because an active row
        already exists (concurrent registration).
        """
        registration = self.model(
            event_id=event_id,
            user_id=user_id,
            status=RegistrationStatus.REGISTERED,
            registered_at=registered_at,
        )
        try:
            db.add(registration)
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(
                f"Duplicate active registration rejected for user {user_id}, event {event_id}"
            )
            return None
        db.refresh(registration)
        return registration

    def cancel_active(
        self, db: Session, *, event_id: str, user_id: str
    ) -> Optional[Registration]:
        """
        Flip the user's active registration to cancelled with a single
        update-by-filter. Returns the cancelled row, or None when no active
        row matched.
        """
        target = self.get_active(db, event_id=event_id, user_id=user_id)
        if target is None:
            return None

        updated = (
            db.query(self.model)
            .filter(
                self.model.id == target.id,
                self.model.status == RegistrationStatus.REGISTERED,
            )
            .update(
                {self.model.status: RegistrationStatus.CANCELLED},
                synchronize_session=False,
            )
        )
        if updated == 0:
            # Another request cancelled it between the read and the update.
            db.rollback()
            return None
        db.commit()
        db.refresh(target)
        return target


registration = CRUDRegistration(Registration)
