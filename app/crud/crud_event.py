# app/crud/crud_event.py
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from .base import CRUDBase
from app.constants.registration import RegistrationStatus
from app.models.event import Event
from app.models.registration import Registration
from app.schemas.event import EventCreate, EventUpdate


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    def create_with_creator(
        self, db: Session, *, obj_in: EventCreate, created_by: str
    ) -> Event:
        db_obj = self.model(**obj_in.model_dump(), created_by=created_by)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_multi_newest_first(
        self, db: Session, *, skip: int = 0, limit: Optional[int] = 100
    ) -> List[Event]:
        """All events, most recently created first (admin dashboard order)."""
        return (
            db.query(self.model)
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_upcoming(self, db: Session, *, now: datetime) -> List[Event]:
        """Events that have not started yet, soonest first."""
        return (
            db.query(self.model)
            .filter(self.model.event_date >= now)
            .order_by(self.model.event_date.asc())
            .all()
        )

    def get_count(self, db: Session) -> int:
        return db.query(func.count(self.model.id)).scalar() or 0

    def get_active_counts(
        self, db: Session, *, event_ids: List[str]
    ) -> dict[str, int]:
        """
        Active registration count per event, fetched in one grouped query.
        Events without registrations are absent from the result.
        """
        if not event_ids:
            return {}
        rows: List[Tuple[str, int]] = (
            db.query(Registration.event_id, func.count(Registration.id))
            .filter(
                Registration.event_id.in_(event_ids),
                Registration.status == RegistrationStatus.REGISTERED,
            )
            .group_by(Registration.event_id)
            .all()
        )
        return {event_id: count for event_id, count in rows}


event = CRUDEvent(Event)
