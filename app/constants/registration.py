# app/constants/registration.py
"""
Constants for registration status and profile role values.

Stored as plain strings in the database; these classes keep the literals in
one place.
"""


class RegistrationStatus:
    """Event registration status values."""
    REGISTERED = "registered"
    CANCELLED = "cancelled"


class ProfileRole:
    """Portal roles. Assigned at signup, never changed through this service."""
    STUDENT = "student"
    ADMIN = "admin"
