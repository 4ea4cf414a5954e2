"""
Registration statistics for the admin dashboard.

Fill-rate model:
- Only active registrations (status = registered) are counted
- registration_rate = total active / sum of bounded capacities, as a percent
- Events with unbounded capacity are left out of the denominator
- Rounded half-up to a whole percent; 0 when there is no bounded capacity

The figures are derived on every request from the rows passed in and are
never stored.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from app.constants.registration import RegistrationStatus
from app.utils.timezone import as_utc


@dataclass
class EventCount:
    id: str
    title: str
    current_participants: int


@dataclass
class PortalStatistics:
    total_events: int
    upcoming_events: int
    total_registrations: int
    registration_rate: int          # whole percent
    per_event_counts: dict[str, int]
    most_popular_event: Optional[EventCount]
    latest_event_title: Optional[str]


def count_active_by_event(registrations: Iterable) -> dict[str, int]:
    counts: dict[str, int] = {}
    for registration in registrations:
        if registration.status != RegistrationStatus.REGISTERED:
            continue
        counts[registration.event_id] = counts.get(registration.event_id, 0) + 1
    return counts


def registration_rate(total_active: int, capacities: Iterable[Optional[int]]) -> int:
    total_capacity = sum(c for c in capacities if c is not None)
    if total_capacity <= 0:
        return 0
    percent = Decimal(total_active) * 100 / Decimal(total_capacity)
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def most_popular(events: Sequence, counts: dict[str, int]) -> Optional[EventCount]:
    """Event with the highest active count; ties go to the earliest in `events`."""
    best: Optional[EventCount] = None
    for event in events:
        count = counts.get(event.id, 0)
        if best is None or count > best.current_participants:
            best = EventCount(id=event.id, title=event.title, current_participants=count)
    return best


def compute_portal_statistics(
    events: Sequence, registrations: Iterable, *, now: datetime
) -> PortalStatistics:
    """
    Args:
        events: All events, in display order (newest first on the dashboard).
        registrations: Registration rows of any status.
        now: Reference instant for the upcoming-events count.
    """
    counts = count_active_by_event(registrations)
    # Registrations pointing at events outside `events` are still portal-wide
    # registrations.
    total_active = sum(counts.values())
    now = as_utc(now)

    return PortalStatistics(
        total_events=len(events),
        upcoming_events=sum(1 for e in events if as_utc(e.event_date) >= now),
        total_registrations=total_active,
        registration_rate=registration_rate(
            total_active, (e.max_participants for e in events)
        ),
        per_event_counts={e.id: counts.get(e.id, 0) for e in events},
        most_popular_event=most_popular(events, counts),
        latest_event_title=events[0].title if events else None,
    )
