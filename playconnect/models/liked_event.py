"""
User-liked-event model
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint

from playconnect.core.db import Base
from playconnect.models._ids import new_id
from playconnect.utils.timeutils import utcnow_naive

class LikedEvent(Base):
    __tablename__ = "user_liked_events"

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(128), nullable=False, index=True)
    event_id = Column(String(64), ForeignKey("events.id"), nullable=False)
    liked_at = Column(DateTime, default=utcnow_naive)

    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_user_liked_event"),
    )
