"""
Participation model: one user joined to one event
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from playconnect.core.db import Base
from playconnect.models._ids import new_id
from playconnect.models.enums import ParticipationState
from playconnect.utils.timeutils import utcnow_naive

class Participation(Base):
    __tablename__ = "event_participants"

    id = Column(String(64), primary_key=True, default=new_id)
    event_id = Column(String(64), ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(String(128), nullable=False, index=True)
    joined_at = Column(DateTime, default=utcnow_naive)
    is_checked_in = Column(Boolean, default=False, nullable=False)
    checked_in_at = Column(DateTime, nullable=True)

    # Relationships
    event = relationship("Event", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_participant"),
    )

    @property
    def state(self) -> ParticipationState:
        return ParticipationState.CHECKED_IN if self.is_checked_in else ParticipationState.JOINED
