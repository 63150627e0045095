"""
User profile reads and matching preferences
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from playconnect.schemas.user import PreferencesUpdate, UserOut
from playconnect.services.errors import UserNotFound
from playconnect.services.repositories import UserRepo, use_firestore

logger = logging.getLogger(__name__)


def get_user(user_id: str, db: Optional[Session] = None) -> UserOut:
    user = UserRepo.get_sql(db, user_id) if not use_firestore() else UserRepo.get_fs(user_id)
    if user is None:
        raise UserNotFound()
    return UserOut.model_validate(user)


def update_preferences(user_id: str, data: PreferencesUpdate, db: Optional[Session] = None) -> UserOut:
    """Store favourite sport, skill level, weekday availability and the availability flag"""
    changes = {
        "favourite_sport": data.favourite_sport,
        "skill_level": data.skill_level,
        "availability": data.availability,
    }
    if data.is_available is not None:
        changes["is_available"] = data.is_available

    if not use_firestore():
        user = UserRepo.get_sql(db, user_id)
        if user is None:
            raise UserNotFound()
        updated = UserRepo.update_preferences_sql(db, user, changes)
    else:
        if UserRepo.get_fs(user_id) is None:
            raise UserNotFound()
        camel = {
            "favouriteSport": changes["favourite_sport"],
            "skillLevel": changes["skill_level"],
            "availability": changes["availability"],
        }
        if "is_available" in changes:
            camel["isAvailable"] = changes["is_available"]
        updated = UserRepo.update_preferences_fs(user_id, camel)

    logger.info(f"Preferences updated for user {user_id}")
    return UserOut.model_validate(updated)
