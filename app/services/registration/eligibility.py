# app/services/registration/eligibility.py
"""
Registration eligibility rules.

Decides, for one user and one event at one instant, which registration
action is offered. States are evaluated in a fixed order and the first match
wins:

1. event_ended          - the event has started/passed; nothing can change
2. already_registered   - the user holds an active registration; may cancel
3. registration_closed  - the deadline has passed
4. event_full           - bounded capacity is used up
5. open                 - the user may register

The evaluator has no I/O. Callers supply the active registration count and
whether the user is registered, and must re-run it after every write.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.schemas.registration import EligibilityState
from app.utils.timezone import as_utc

ACTION_REGISTER = "register"
ACTION_CANCEL = "cancel"

_LABELS = {
    EligibilityState.event_ended: "Event Ended",
    EligibilityState.already_registered: "Registered",
    EligibilityState.registration_closed: "Registration Closed",
    EligibilityState.event_full: "Event Full",
    EligibilityState.open: "Register",
}


@dataclass(frozen=True)
class EligibilityResult:
    state: EligibilityState
    action: Optional[str]

    @property
    def label(self) -> str:
        return _LABELS[self.state]

    @property
    def can_register(self) -> bool:
        return self.action == ACTION_REGISTER

    @property
    def can_cancel(self) -> bool:
        return self.action == ACTION_CANCEL


def is_full(max_participants: Optional[int], active_count: int) -> bool:
    """Unbounded capacity (None) is never full."""
    return max_participants is not None and active_count >= max_participants


def evaluate_eligibility(
    event,
    *,
    now: datetime,
    is_registered: bool,
    active_count: int,
) -> EligibilityResult:
    """
    Compute the eligibility state for one user and event.

    Args:
        event: Anything exposing event_date, registration_deadline and
               max_participants (ORM row or schema).
        now: The single instant used for every time comparison.
        is_registered: Whether the user holds an active registration.
        active_count: Active registrations for the event.
    """
    now = as_utc(now)

    if as_utc(event.event_date) < now:
        return EligibilityResult(EligibilityState.event_ended, None)
    if is_registered:
        return EligibilityResult(EligibilityState.already_registered, ACTION_CANCEL)
    if as_utc(event.registration_deadline) < now:
        return EligibilityResult(EligibilityState.registration_closed, None)
    if is_full(event.max_participants, active_count):
        return EligibilityResult(EligibilityState.event_full, None)
    return EligibilityResult(EligibilityState.open, ACTION_REGISTER)
