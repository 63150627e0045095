"""
Eligibility matching: which users fit an event's sport, day and (optionally) skill level
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from playconnect.core.config import settings
from playconnect.models import WEEKDAYS
from playconnect.schemas.user import UserOut
from playconnect.services.repositories import UserRepo, use_firestore
from playconnect.utils.timeutils import parse_instant

logger = logging.getLogger(__name__)

# Onboarding questionnaire: question id -> weight
SKILL_QUESTION_WEIGHTS: Dict[int, float] = {
    1: 0.5,   # rally length
    2: 0.25,  # serve
    3: 0.1,   # net play
    4: 0.15,  # slices, lobs, drop shots
}
OPTIONS_PER_QUESTION = 3


def day_of_week(value: str | datetime) -> str:
    """Weekday name of an instant, taken in UTC"""
    return WEEKDAYS[parse_instant(value).weekday()]


def is_compatible(
    user: UserOut,
    sport: str,
    skill_level: str,
    weekday: str,
    exclude_user_id: Optional[str] = None,
    enforce_skill_match: bool = False
) -> bool:
    if exclude_user_id is not None and user.id == exclude_user_id:
        return False
    if user.favourite_sport != sport or not user.is_available:
        return False
    if weekday not in user.availability:
        return False
    if enforce_skill_match and user.skill_level != skill_level:
        return False
    return True


def find_compatible_users(
    sport: str,
    skill_level: str,
    weekday: str,
    exclude_user_id: Optional[str],
    db: Optional[Session] = None,
    enforce_skill_match: Optional[bool] = None
) -> List[UserOut]:
    """Users whose favourite sport is ``sport``, who are available and free on ``weekday``.

    ``skill_level`` only filters when skill matching is enforced
    (``ENFORCE_SKILL_MATCH``, off by default).
    """
    if enforce_skill_match is None:
        enforce_skill_match = settings.ENFORCE_SKILL_MATCH

    if not use_firestore():
        candidates = UserRepo.list_candidates_sql(db, sport)
    else:
        candidates = UserRepo.list_candidates_fs(sport, weekday)

    users = [
        user for user in (UserOut.model_validate(c) for c in candidates)
        if is_compatible(user, sport, skill_level, weekday, exclude_user_id, enforce_skill_match)
    ]
    users.sort(key=lambda u: u.id)
    logger.info(f"Found {len(users)} compatible users for {sport}/{weekday}")
    return users


def assess_skill_level(answers: Dict[int, int]) -> str:
    """Map questionnaire answers (question id -> option index) to a skill level.

    Each chosen option scores index + 1; unanswered questions score 0.
    """
    weighted_score = 0.0
    total_weight = 0.0
    for question_id, weight in SKILL_QUESTION_WEIGHTS.items():
        option = answers.get(question_id)
        if option is not None and not 0 <= option < OPTIONS_PER_QUESTION:
            raise ValueError(f"Question {question_id} has no option {option}")
        score = option + 1 if option is not None else 0
        weighted_score += score * weight
        total_weight += weight

    percentage = weighted_score / (OPTIONS_PER_QUESTION * total_weight) * 100
    if percentage <= 45:
        return "Beginner"
    if percentage <= 80:
        return "Intermediate"
    return "Advanced"
