# app/schemas/registration.py
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum
from datetime import datetime

from app.schemas.profile import ProfileSummary


class RegistrationStatus(str, Enum):
    registered = "registered"
    cancelled = "cancelled"


class EligibilityState(str, Enum):
    event_ended = "event_ended"
    already_registered = "already_registered"
    registration_closed = "registration_closed"
    event_full = "event_full"
    open = "open"


class Eligibility(BaseModel):
    state: EligibilityState
    action: Optional[str] = Field(
        None, description="'register', 'cancel' or null when no action is offered."
    )
    label: str = Field(..., json_schema_extra={"example": "Register"})

    model_config = {"from_attributes": True}


class Registration(BaseModel):
    id: str
    event_id: str
    user_id: str
    status: RegistrationStatus
    registered_at: datetime

    model_config = {"from_attributes": True}


class RegistrationEvent(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    event_date: datetime
    location: str

    model_config = {"from_attributes": True}


class RegistrationWithEvent(Registration):
    event: RegistrationEvent


class Registrant(BaseModel):
    """An active registration merged with the registrant's profile."""

    id: str
    status: RegistrationStatus
    registered_at: datetime
    profile: Optional[ProfileSummary] = None


class RegistrationActionResponse(BaseModel):
    success: bool
    title: str
    message: str
    registration: Optional[Registration] = None
    eligibility: Eligibility
    current_participants: int
