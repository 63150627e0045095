"""
User profile routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from playconnect.core.db import get_db
from playconnect.schemas.user import PreferencesUpdate, SkillAssessmentRequest
from playconnect.services import user_service
from playconnect.services.matching import assess_skill_level
from playconnect.utils.responses import error_response, success_response
from playconnect.utils.security import get_current_user_id

router = APIRouter()


@router.get("/me")
def me(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return success_response(message="Profile retrieved", data=user_service.get_user(user_id, db))


@router.put("/me/preferences")
def update_preferences(
    preferences: PreferencesUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    user = user_service.update_preferences(user_id, preferences, db)
    return success_response(message="Preferences updated", data=user)


@router.post("/skill-assessment")
def skill_assessment(request: SkillAssessmentRequest):
    """Skill level from the onboarding questionnaire"""
    try:
        level = assess_skill_level(request.answers)
    except ValueError as e:
        return error_response(message=str(e), error_code="invalid_answer", status_code=422)
    return success_response(message="Skill level assessed", data={"skillLevel": level})
