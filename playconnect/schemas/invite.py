"""
Invite-related Pydantic schemas
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from playconnect.models.enums import InviteStatus
from playconnect.schemas.common import TimestampedModel

class InviteOut(TimestampedModel):
    """Invite read model"""
    id: str
    event_id: str
    event_creator_id: str
    invited_user_id: str
    status: InviteStatus = InviteStatus.PENDING
    invited_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None

class InviteUsersRequest(BaseModel):
    """Manual invite of specific users"""
    user_ids: List[str] = Field(min_length=1)
