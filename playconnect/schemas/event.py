"""
Event-related Pydantic schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from playconnect.models.enums import ParticipationState
from playconnect.schemas.common import DocumentModel, TimestampedModel

class EventCreate(BaseModel):
    """Schema for creating an event"""
    title: str = Field(min_length=1, max_length=255)
    sport_type: str
    skill_level: str
    date: datetime
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    street: str = ""
    street_number: str = ""
    city: str = ""
    postcode: str = ""
    spots: int = Field(gt=0)
    event_image: str = ""

class EventOut(TimestampedModel):
    """Event read model, optionally enriched with distance from the caller"""
    id: str
    title: str
    sport_type: str
    skill_level: str
    date: datetime
    latitude: float
    longitude: float
    street: str = ""
    street_number: str = ""
    city: str = ""
    postcode: str = ""
    spots: int
    taken_spots: int = 0
    creator_id: str = Field(alias="userId")
    event_image: str = ""
    distance: Optional[str] = None
    distance_num: Optional[float] = None

    @property
    def remaining_spots(self) -> int:
        return self.spots - self.taken_spots

class ParticipationOut(TimestampedModel):
    """A user's participation record for one event"""
    id: str
    event_id: str
    user_id: str
    joined_at: Optional[datetime] = None
    is_checked_in: bool = False
    checked_in_at: Optional[datetime] = None

    @property
    def state(self) -> ParticipationState:
        return ParticipationState.CHECKED_IN if self.is_checked_in else ParticipationState.JOINED

class ParticipantOut(DocumentModel):
    """Display-ready participant summary"""
    id: str
    first_name: str = ""
    last_name: str = ""
    user_rating: float = 0.0
    profile_picture: Optional[str] = None
    is_checked_in: bool = False

class ParticipationStatus(BaseModel):
    """State of the caller's participation in an event"""
    event_id: str
    state: ParticipationState
