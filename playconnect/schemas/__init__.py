"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .invite import *
from .user import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "EventCreate",
    "EventOut",
    "ParticipationOut",
    "ParticipantOut",
    "ParticipationStatus",
    "InviteOut",
    "InviteUsersRequest",
    "UserOut",
    "PreferencesUpdate",
    "SkillAssessmentRequest",
]
