#app/api/v1/endpoints/registrations.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api import deps
from app.core.config import settings
from app.core.exceptions import AlreadyRegisteredError, NotRegisteredError
from app.core.limiter import limiter
from app.crud import crud_event, crud_registration
from app.db.session import get_db
from app.models.profile import Profile
from app.schemas.event import Event, StudentEvent
from app.schemas.registration import (
    Eligibility,
    RegistrationActionResponse,
    RegistrationStatus,
    RegistrationWithEvent,
)
from app.services.registration import (
    RegistrationOutcome,
    evaluate_eligibility,
    registration_service,
)
from app.utils.receipt import (
    RECEIPT_MEDIA_TYPE,
    generate_receipt_filename,
    generate_registration_receipt,
)
from app.utils.timezone import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Registrations"])


def _eligibility(result) -> Eligibility:
    return Eligibility(state=result.state, action=result.action, label=result.label)


def _action_response(
    outcome: RegistrationOutcome, *, title: str, message: str
) -> RegistrationActionResponse:
    return RegistrationActionResponse(
        success=True,
        title=title,
        message=message,
        registration=outcome.registration,
        eligibility=_eligibility(outcome.eligibility),
        current_participants=outcome.current_participants,
    )


@router.get("/events", response_model=List[StudentEvent])
def browse_events(
    db: Session = Depends(get_db),
    profile: Profile = Depends(deps.get_current_profile),
):
    """
    Upcoming events, soonest first, each with its participant count and the
    caller's eligibility.
    """
    now = utcnow()
    events = crud_event.event.get_upcoming(db, now=now)
    counts = crud_event.event.get_active_counts(db, event_ids=[e.id for e in events])
    registered_ids = crud_registration.registration.get_active_event_ids_for_user(
        db, user_id=profile.id
    )

    results = []
    for event in events:
        count = counts.get(event.id, 0)
        eligibility = evaluate_eligibility(
            event,
            now=now,
            is_registered=event.id in registered_ids,
            active_count=count,
        )
        results.append(
            StudentEvent(
                **Event.model_validate(event).model_dump(),
                current_participants=count,
                eligibility=_eligibility(eligibility),
            )
        )
    return results


@router.post(
    "/events/{eventId}/registrations",
    response_model=RegistrationActionResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.REGISTRATION_RATE_LIMIT)
def register_for_event(
    request: Request,  # Required for rate limiter
    response: Response,
    eventId: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(deps.require_student),
):
    """
    Register the calling student for an event.

    An existing active registration is reported as an informational notice,
    not as a failure. Ended, closed and full events are refused with 409.
    """
    try:
        outcome = registration_service.register(db, event_id=eventId, user_id=profile.id)
    except AlreadyRegisteredError as e:
        # Nothing was created; report the existing registration.
        response.status_code = e.status_code
        outcome = registration_service.current_state(db, event_id=eventId, user_id=profile.id)
        return _action_response(outcome, title=e.title, message=e.message)

    event = outcome.registration.event
    return _action_response(
        outcome,
        title="Registration Successful!",
        message=f"You have successfully registered for {event.title}.",
    )


@router.delete(
    "/events/{eventId}/registrations/me",
    response_model=RegistrationActionResponse,
)
@limiter.limit(settings.REGISTRATION_RATE_LIMIT)
def cancel_registration(
    request: Request,  # Required for rate limiter
    eventId: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(deps.require_student),
):
    """
    Cancel the calling student's registration. The record is kept with status
    `cancelled`. Cancelling without an active registration is a no-op.
    """
    try:
        outcome = registration_service.cancel(db, event_id=eventId, user_id=profile.id)
    except NotRegisteredError as e:
        outcome = registration_service.current_state(db, event_id=eventId, user_id=profile.id)
        return _action_response(outcome, title=e.title, message=e.message)

    event = outcome.registration.event
    return _action_response(
        outcome,
        title="Registration Cancelled",
        message=f"You have cancelled your registration for {event.title}.",
    )


@router.get("/me/registrations", response_model=List[RegistrationWithEvent])
def list_my_registrations(
    status_filter: Optional[RegistrationStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    profile: Profile = Depends(deps.get_current_profile),
):
    """The caller's registrations (active and cancelled), newest first."""
    return crud_registration.registration.get_multi_by_user(
        db,
        user_id=profile.id,
        status=status_filter.value if status_filter else None,
    )


@router.get("/me/registrations/{registrationId}/receipt")
def download_registration_receipt(
    registrationId: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(deps.get_current_profile),
):
    """Download a plain-text receipt for one of the caller's registrations."""
    registration = crud_registration.registration.get(db, id=registrationId)
    if not registration or registration.user_id != profile.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found"
        )

    event = registration.event
    content = generate_registration_receipt(
        event_title=event.title,
        event_date=event.event_date,
        location=event.location,
        registered_at=registration.registered_at,
        status=registration.status,
    )
    filename = generate_receipt_filename(event.title)

    return Response(
        content=content,
        media_type=RECEIPT_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
