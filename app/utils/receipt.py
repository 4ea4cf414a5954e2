"""
Registration receipt utilities.

Builds the plain-text receipt a student downloads for one of their
registrations. Nothing is stored; the text is generated per request.
"""

import re
from datetime import datetime

from app.utils.timezone import as_utc

RECEIPT_MEDIA_TYPE = "text/plain"


def _format_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _format_time(value: datetime) -> str:
    return value.strftime("%I:%M %p").lstrip("0")


def generate_registration_receipt(
    event_title: str,
    event_date: datetime,
    location: str,
    registered_at: datetime,
    status: str,
) -> str:
    """
    Generate the receipt text for a registration.

    Args:
        event_title: Title of the event
        event_date: Event start (UTC)
        location: Where the event takes place
        registered_at: When the registration was made (UTC)
        status: Registration status, printed upper-cased

    Returns:
        str: Receipt document
    """
    event_date = as_utc(event_date)
    registered_at = as_utc(registered_at)

    lines = [
        "EVENT REGISTRATION RECEIPT",
        "========================",
        "",
        f"Event: {event_title}",
        f"Date: {_format_date(event_date)}",
        f"Time: {_format_time(event_date)} UTC",
        f"Location: {location}",
        "",
        f"Registration Date: {_format_date(registered_at)}",
        f"Status: {status.upper()}",
        "",
        "Thank you for registering!",
    ]
    return "\n".join(lines)


def generate_receipt_filename(event_title: str) -> str:
    """
    Generate the download filename: whitespace runs become underscores and
    characters that are unsafe in a Content-Disposition header are dropped.
    """
    sanitized = "".join(c if c.isalnum() or c in " -_" else "" for c in event_title)
    sanitized = re.sub(r"\s+", "_", sanitized.strip())[:80] or "event"
    return f"{sanitized}_registration.txt"
