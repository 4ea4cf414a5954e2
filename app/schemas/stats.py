from pydantic import BaseModel, Field
from typing import Optional


class PopularEvent(BaseModel):
    id: str
    title: str
    current_participants: int

    model_config = {"from_attributes": True}


class PortalStats(BaseModel):
    total_events: int
    upcoming_events: int
    total_registrations: int = Field(..., description="Active registrations across all events.")
    registration_rate: int = Field(
        ...,
        description="Active registrations as a percent of total bounded capacity.",
    )
    most_popular_event: Optional[PopularEvent] = None
    latest_event_title: Optional[str] = None

    model_config = {"from_attributes": True}
