"""
User-related Pydantic schemas
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, field_validator

from playconnect.models.enums import WEEKDAYS
from playconnect.schemas.common import DocumentModel

class UserOut(DocumentModel):
    """User profile read model"""
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    favourite_sport: str = ""
    skill_level: str = ""
    availability: List[str] = []
    is_available: bool = False
    user_rating: float = 0.0
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    profile_picture: Optional[str] = None

class PreferencesUpdate(BaseModel):
    """Schema for updating matching preferences"""
    favourite_sport: str
    skill_level: str
    availability: List[str]
    is_available: Optional[bool] = None

    @field_validator("availability")
    @classmethod
    def _known_weekdays(cls, value: List[str]) -> List[str]:
        unknown = [day for day in value if day not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown weekday(s): {', '.join(unknown)}")
        return list(dict.fromkeys(value))

class SkillAssessmentRequest(BaseModel):
    """Questionnaire answers: question id -> chosen option index (0-based)"""
    answers: Dict[int, int]
