"""
Event invite model
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from playconnect.core.db import Base
from playconnect.models._ids import new_id
from playconnect.models.enums import InviteStatus
from playconnect.utils.timeutils import utcnow_naive

class EventInvite(Base):
    __tablename__ = "event_invites"

    id = Column(String(64), primary_key=True, default=new_id)
    event_id = Column(String(64), ForeignKey("events.id"), nullable=False, index=True)
    event_creator_id = Column(String(128), nullable=False)
    invited_user_id = Column(String(128), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=InviteStatus.PENDING.value)  # pending, accepted, declined
    invited_at = Column(DateTime, default=utcnow_naive)
    responded_at = Column(DateTime, nullable=True)

    # Relationships
    event = relationship("Event", back_populates="invites")

    __table_args__ = (
        UniqueConstraint("event_id", "invited_user_id", name="uq_event_invitee"),
    )
