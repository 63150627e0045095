"""
Database models package
"""

from .enums import InviteStatus, ParticipationState, WEEKDAYS
from .event import Event
from .participation import Participation
from .invite import EventInvite
from .user import User
from .liked_event import LikedEvent

__all__ = [
    "Event",
    "Participation",
    "EventInvite",
    "User",
    "LikedEvent",
    "InviteStatus",
    "ParticipationState",
    "WEEKDAYS",
]
