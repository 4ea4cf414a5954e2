# app/services/registration/registration_service.py
"""
Registration Service

Drives the per (event, user) registration lifecycle:

    NotRegistered -> Registered -> Cancelled -> Registered -> ...

Re-registering after a cancellation inserts a new active row; the cancelled
row is kept as history. Every transition is a single committed write, and
the returned outcome is rebuilt from the store after the commit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    AlreadyRegisteredError,
    EventNotFoundError,
    NotRegisteredError,
    RegistrationNotAllowedError,
    StoreUnavailableError,
)
from app.crud.crud_event import event as event_crud
from app.crud.crud_registration import registration as registration_crud
from app.models.event import Event
from app.models.registration import Registration
from app.schemas.registration import EligibilityState
from app.services.registration.eligibility import EligibilityResult, evaluate_eligibility
from app.utils.timezone import utcnow

logger = logging.getLogger(__name__)


@dataclass
class RegistrationOutcome:
    registration: Optional[Registration]
    eligibility: EligibilityResult
    current_participants: int


class RegistrationService:
    """Register/cancel transitions guarded by the eligibility rules."""

    def __init__(self, now_fn: Callable[[], datetime] = utcnow):
        self._now = now_fn

    def evaluate(
        self, db: Session, *, event: Event, user_id: str, now: Optional[datetime] = None
    ) -> RegistrationOutcome:
        """Read the current state for one user and event."""
        now = now or self._now()
        try:
            active = registration_crud.get_active(db, event_id=event.id, user_id=user_id)
            count = registration_crud.get_active_count_by_event(db, event_id=event.id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to read registration state for event {event.id}: {e}", exc_info=True)
            raise StoreUnavailableError() from e

        eligibility = evaluate_eligibility(
            event, now=now, is_registered=active is not None, active_count=count
        )
        return RegistrationOutcome(
            registration=active, eligibility=eligibility, current_participants=count
        )

    def current_state(self, db: Session, *, event_id: str, user_id: str) -> RegistrationOutcome:
        return self.evaluate(db, event=self._get_event(db, event_id), user_id=user_id)

    def register(self, db: Session, *, event_id: str, user_id: str) -> RegistrationOutcome:
        """
        Register a user for an event.

        Raises:
            EventNotFoundError: unknown event.
            AlreadyRegisteredError: an active registration exists, including
                one committed concurrently and caught by the unique index.
            RegistrationNotAllowedError: event ended, deadline passed or full.
            StoreUnavailableError: any other database failure.
        """
        event = self._get_event(db, event_id)
        now = self._now()
        current = self.evaluate(db, event=event, user_id=user_id, now=now)

        if current.eligibility.state == EligibilityState.already_registered:
            raise AlreadyRegisteredError()
        if not current.eligibility.can_register:
            logger.info(
                f"Registration refused for user {user_id}, event {event_id}: "
                f"{current.eligibility.state.value}"
            )
            raise RegistrationNotAllowedError(current.eligibility.state.value)

        try:
            created = registration_crud.create_active(
                db, event_id=event_id, user_id=user_id, registered_at=now
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Failed to register user {user_id} for event {event_id}: {e}",
                exc_info=True,
                extra={"user_id": user_id, "event_id": event_id},
            )
            raise StoreUnavailableError() from e

        if created is None:
            raise AlreadyRegisteredError()

        logger.info(f"User {user_id} registered for event {event_id}")
        refreshed = self.evaluate(db, event=event, user_id=user_id)
        refreshed.registration = created
        return refreshed

    def cancel(self, db: Session, *, event_id: str, user_id: str) -> RegistrationOutcome:
        """
        Cancel a user's active registration. The row is kept with status
        cancelled.

        Raises:
            EventNotFoundError: unknown event.
            RegistrationNotAllowedError: the event has already ended.
            NotRegisteredError: no active registration (safe to treat as no-op).
            StoreUnavailableError: any other database failure.
        """
        event = self._get_event(db, event_id)
        current = self.evaluate(db, event=event, user_id=user_id)

        if current.eligibility.state == EligibilityState.event_ended:
            raise RegistrationNotAllowedError(EligibilityState.event_ended.value)
        if not current.eligibility.can_cancel:
            raise NotRegisteredError()

        try:
            cancelled = registration_crud.cancel_active(
                db, event_id=event_id, user_id=user_id
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(
                f"Failed to cancel registration of user {user_id} for event {event_id}: {e}",
                exc_info=True,
                extra={"user_id": user_id, "event_id": event_id},
            )
            raise StoreUnavailableError() from e

        if cancelled is None:
            raise NotRegisteredError()

        logger.info(f"User {user_id} cancelled registration for event {event_id}")
        refreshed = self.evaluate(db, event=event, user_id=user_id)
        refreshed.registration = cancelled
        return refreshed

    def _get_event(self, db: Session, event_id: str) -> Event:
        try:
            event = event_crud.get(db, id=event_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load event {event_id}: {e}", exc_info=True)
            raise StoreUnavailableError() from e
        if event is None:
            raise EventNotFoundError()
        return event


registration_service = RegistrationService()
