# app/api/v1/endpoints/events.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api import deps
from app.core.config import settings
from app.core.exceptions import EventNotFoundError, StoreUnavailableError
from app.crud import crud_event, crud_registration
from app.db.session import get_db
from app.models.profile import Profile
from app.schemas.event import (
    Event as EventSchema,
    EventCreate,
    EventList,
    EventUpdate,
    EventWithCount,
)
from app.schemas.profile import ProfileSummary
from app.schemas.registration import Registrant

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/events", tags=["Admin Events"])


def _with_count(event, count: int) -> EventWithCount:
    return EventWithCount(
        **EventSchema.model_validate(event).model_dump(), current_participants=count
    )


def _get_event_or_404(db: Session, event_id: str):
    event = crud_event.event.get(db, id=event_id)
    if not event:
        raise EventNotFoundError()
    return event


@router.post("", response_model=EventSchema, status_code=status.HTTP_201_CREATED)
def create_event(
    event_in: EventCreate,
    db: Session = Depends(get_db),
    admin: Profile = Depends(deps.require_admin),
):
    """Creates a new event owned by the calling administrator."""
    try:
        event = crud_event.event.create_with_creator(db, obj_in=event_in, created_by=admin.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create event {event_in.title!r}: {e}", exc_info=True)
        raise StoreUnavailableError() from e
    logger.info(f"Event {event.id} created by {admin.id}")
    return event


@router.get("", response_model=EventList)
def list_events(
    db: Session = Depends(get_db),
    admin: Profile = Depends(deps.require_admin),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """All events, newest first, with their active participant counts."""
    events = crud_event.event.get_multi_newest_first(db, skip=skip, limit=limit)
    counts = crud_event.event.get_active_counts(db, event_ids=[e.id for e in events])
    return {
        "data": [_with_count(e, counts.get(e.id, 0)) for e in events],
        "totalCount": crud_event.event.get_count(db),
    }


@router.get("/{eventId}", response_model=EventWithCount)
def get_event_by_id(
    eventId: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(deps.require_admin),
):
    """Get a specific event by its ID."""
    event = _get_event_or_404(db, eventId)
    count = crud_registration.registration.get_active_count_by_event(db, event_id=eventId)
    return _with_count(event, count)


@router.patch("/{eventId}", response_model=EventSchema)
def update_event(
    eventId: str,
    event_in: EventUpdate,
    db: Session = Depends(get_db),
    admin: Profile = Depends(deps.require_admin),
):
    """Partially update an event."""
    event = _get_event_or_404(db, eventId)
    try:
        return crud_event.event.update(db, db_obj=event, obj_in=event_in)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update event {eventId}: {e}", exc_info=True)
        raise StoreUnavailableError() from e


@router.delete("/{eventId}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    eventId: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(deps.require_admin),
):
    """Delete an event together with its registrations."""
    _get_event_or_404(db, eventId)
    try:
        crud_event.event.remove(db, id=eventId)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete event {eventId}: {e}", exc_info=True)
        raise StoreUnavailableError() from e
    logger.info(f"Event {eventId} deleted by {admin.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{eventId}/registrations", response_model=List[Registrant])
def list_event_registrants(
    eventId: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(deps.require_admin),
):
    """Active registrations for an event with the registrants' profile details."""
    _get_event_or_404(db, eventId)
    rows = crud_registration.registration.get_registrants(
        db, event_id=eventId, joined=settings.REGISTRATION_JOINED_FETCH
    )
    return [
        Registrant(
            id=reg.id,
            status=reg.status,
            registered_at=reg.registered_at,
            profile=ProfileSummary.model_validate(profile) if profile else None,
        )
        for reg, profile in rows
    ]
