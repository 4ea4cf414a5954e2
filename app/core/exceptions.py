# app/core/exceptions.py
"""
Portal error taxonomy.

Every error carries the title/message pair shown to the user and the HTTP
status it maps to. Endpoints catch these at the action boundary; anything
that slips through is converted by the handlers registered in app.main.
"""

from typing import Any, Optional


class PortalError(Exception):
    """Base class for recoverable, user-facing portal errors."""

    status_code: int = 400
    success: bool = False
    title: str = "Request Failed"
    message: str = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None, *, title: Optional[str] = None):
        if message is not None:
            self.message = message
        if title is not None:
            self.title = title
        super().__init__(self.message)

    def to_notice(self) -> dict[str, Any]:
        return {"success": self.success, "title": self.title, "message": self.message}


class AlreadyRegisteredError(PortalError):
    """Informational: the register endpoint answers 200 with the existing registration."""

    status_code = 200
    success = True
    title = "Already Registered"
    message = "You are already registered for this event."


class NotRegisteredError(PortalError):
    """Informational: cancelling without an active registration is a no-op."""

    status_code = 200
    success = True
    title = "Not Registered"
    message = "You have no active registration for this event."


class RegistrationNotAllowedError(PortalError):
    """The eligibility evaluator refused the requested transition."""

    status_code = 409
    title = "Registration Unavailable"

    _MESSAGES = {
        "event_ended": "This event has already ended.",
        "registration_closed": "The registration deadline for this event has passed.",
        "event_full": "This event has reached its maximum capacity.",
    }

    def __init__(self, state: str):
        self.state = state
        super().__init__(
            self._MESSAGES.get(state, "This action is not available for this event.")
        )


class EventNotFoundError(PortalError):
    status_code = 404
    title = "Event Not Found"
    message = "The requested event does not exist."


class StoreUnavailableError(PortalError):
    """Any read/write failure reported by the database. Never retried automatically."""

    status_code = 503
    title = "Service Unavailable"
    message = "Something went wrong. Please try again."


class ValidationError(PortalError):
    """Event input rejected before any write."""

    status_code = 422
    title = "Invalid Input"
    message = "Please check the highlighted fields."

    def __init__(self, errors: list[dict[str, str]], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, raw_errors) -> "ValidationError":
        errors = []
        for err in raw_errors:
            # Drop the request section ("body", "query") from the location.
            loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query")]
            errors.append({"field": ".".join(loc), "message": err.get("msg", "")})
        return cls(errors)

    def to_notice(self) -> dict[str, Any]:
        notice = super().to_notice()
        notice["errors"] = self.errors
        return notice
