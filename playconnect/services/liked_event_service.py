"""
Liked ("saved for later") events
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from playconnect.services.event_service import get_event
from playconnect.services.repositories import LikedEventRepo, use_firestore

logger = logging.getLogger(__name__)


def is_event_liked(user_id: str, event_id: str, db: Optional[Session] = None) -> bool:
    if not use_firestore():
        return LikedEventRepo.find_sql(db, user_id, event_id) is not None
    return LikedEventRepo.find_fs(user_id, event_id) is not None


def like_event(user_id: str, event_id: str, db: Optional[Session] = None) -> None:
    """Like an event; liking twice keeps a single record"""
    get_event(event_id, db)
    if not use_firestore():
        LikedEventRepo.create_sql(db, user_id, event_id)
    else:
        LikedEventRepo.create_fs(user_id, event_id)
    logger.info(f"User {user_id} liked event {event_id}")


def unlike_event(user_id: str, event_id: str, db: Optional[Session] = None) -> None:
    if not use_firestore():
        LikedEventRepo.delete_sql(db, user_id, event_id)
    else:
        LikedEventRepo.delete_fs(user_id, event_id)


def liked_event_ids(user_id: str, db: Optional[Session] = None) -> List[str]:
    if not use_firestore():
        return LikedEventRepo.event_ids_for_user_sql(db, user_id)
    return LikedEventRepo.event_ids_for_user_fs(user_id)
