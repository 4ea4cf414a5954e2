from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from app.schemas.registration import Eligibility


class Event(BaseModel):
    id: str = Field(..., json_schema_extra={"example": "evt_c5a6d8e0f9b1"})
    title: str = Field(..., json_schema_extra={"example": "Annual Tech Fest"})
    description: Optional[str] = None
    event_date: datetime
    registration_deadline: datetime
    location: str = Field(..., json_schema_extra={"example": "Main Auditorium"})
    max_participants: Optional[int] = Field(
        None, description="Capacity limit. Null means unbounded."
    )
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}


class EventWithCount(Event):
    current_participants: int = Field(
        0, description="Number of active registrations for the event."
    )


class StudentEvent(EventWithCount):
    eligibility: Eligibility


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class EventCreate(BaseModel):
    title: str = Field(..., max_length=200, json_schema_extra={"example": "Annual Tech Fest"})
    description: Optional[str] = Field(None, max_length=5000)
    event_date: datetime
    # Not checked against event_date; a deadline after the event is accepted.
    registration_deadline: datetime
    location: str = Field(..., max_length=200)
    max_participants: Optional[int] = Field(None, gt=0, json_schema_extra={"example": 100})

    @field_validator("title", "location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _strip_required(value)


# Schema for updating an event. All fields are optional.
class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    event_date: Optional[datetime] = None
    registration_deadline: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=200)
    max_participants: Optional[int] = Field(None, gt=0)

    # Only explicitly sent fields reach these validators; omitted ones keep
    # their stored value. max_participants may be sent as null (unbounded).
    @field_validator("title", "location")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("must not be null")
        return _strip_required(value)

    @field_validator("event_date", "registration_deadline")
    @classmethod
    def not_null(cls, value: Optional[datetime]) -> datetime:
        if value is None:
            raise ValueError("must not be null")
        return value


class EventList(BaseModel):
    data: List[EventWithCount]
    totalCount: int
