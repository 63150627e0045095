"""
User profile model
"""

from sqlalchemy import Column, String, Boolean, Float, JSON

from playconnect.core.db import Base

class User(Base):
    __tablename__ = "users"

    id = Column(String(128), primary_key=True)  # auth provider uid
    email = Column(String(255), default="")
    first_name = Column(String(100), default="")
    last_name = Column(String(100), default="")
    favourite_sport = Column(String(50), default="", index=True)
    skill_level = Column(String(50), default="")
    availability = Column(JSON, default=list)  # weekday names
    is_available = Column(Boolean, default=True, nullable=False)
    user_rating = Column(Float, default=0.0)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    profile_picture = Column(String(1024), nullable=True)
