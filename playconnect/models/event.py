"""
Event model
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, CheckConstraint
from sqlalchemy.orm import relationship

from playconnect.core.db import Base
from playconnect.models._ids import new_id
from playconnect.utils.timeutils import utcnow_naive

class Event(Base):
    __tablename__ = "events"

    id = Column(String(64), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    sport_type = Column(String(50), nullable=False, index=True)
    skill_level = Column(String(50), nullable=False)
    date = Column(DateTime, nullable=False, index=True)  # naive UTC
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    street = Column(String(255), default="")
    street_number = Column(String(20), default="")
    city = Column(String(100), default="")
    postcode = Column(String(20), default="")
    spots = Column(Integer, nullable=False)
    taken_spots = Column(Integer, nullable=False, default=0)
    creator_id = Column(String(128), nullable=False, index=True)
    event_image = Column(String(1024), default="")
    created_at = Column(DateTime, default=utcnow_naive)

    # Relationships
    participants = relationship("Participation", back_populates="event", cascade="all, delete-orphan")
    invites = relationship("EventInvite", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("spots > 0", name="check_spots_positive"),
        CheckConstraint("taken_spots >= 0", name="check_taken_spots_non_negative"),
        CheckConstraint("taken_spots <= spots", name="check_taken_lte_spots"),
    )
