"""
Event queries, distance enrichment, discovery filters, creation and deletion
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from playconnect.core.config import settings
from playconnect.schemas.event import EventCreate, EventOut
from playconnect.schemas.invite import InviteOut
from playconnect.services import invite_service
from playconnect.services.errors import EventNotFound, NotEventCreator
from playconnect.services.repositories import (
    EventRepo,
    LikedEventRepo,
    ParticipationRepo,
    use_firestore,
)
from playconnect.utils.geo import distance_meters, format_distance
from playconnect.utils.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)

ALL_SPORTS = "All"


def _to_events(rows: Iterable) -> List[EventOut]:
    return [EventOut.model_validate(row) for row in rows]


def get_event(event_id: str, db: Optional[Session] = None) -> EventOut:
    event = EventRepo.get_sql(db, event_id) if not use_firestore() else EventRepo.get_fs(event_id)
    if event is None:
        raise EventNotFound()
    return EventOut.model_validate(event)


def list_events(db: Optional[Session] = None) -> List[EventOut]:
    if not use_firestore():
        return _to_events(EventRepo.list_all_sql(db))
    return _to_events(EventRepo.list_all_fs())


def joined_event_ids(user_id: str, db: Optional[Session] = None) -> set:
    if not use_firestore():
        return set(ParticipationRepo.event_ids_for_user_sql(db, user_id))
    return set(ParticipationRepo.event_ids_for_user_fs(user_id))


def list_events_by_participant(user_id: str, db: Optional[Session] = None) -> List[EventOut]:
    """Events the user has joined"""
    event_ids = sorted(joined_event_ids(user_id, db))
    if not use_firestore():
        return _to_events(EventRepo.list_by_ids_sql(db, event_ids))
    return _to_events(EventRepo.list_by_ids_fs(event_ids))


def list_events_by_creator(user_id: str, db: Optional[Session] = None) -> List[EventOut]:
    if not use_firestore():
        return _to_events(EventRepo.list_by_creator_sql(db, user_id))
    return _to_events(EventRepo.list_by_creator_fs(user_id))


def list_liked_events(user_id: str, db: Optional[Session] = None) -> List[EventOut]:
    if not use_firestore():
        return _to_events(EventRepo.list_by_ids_sql(db, LikedEventRepo.event_ids_for_user_sql(db, user_id)))
    return _to_events(EventRepo.list_by_ids_fs(LikedEventRepo.event_ids_for_user_fs(user_id)))


def list_upcoming_not_joined(
    user_id: str,
    db: Optional[Session] = None,
    now: Optional[datetime] = None
) -> List[EventOut]:
    """Future events the user has not joined yet.

    One lookup of the user's joined event ids, then a set difference.
    """
    now = now or utcnow()
    joined = joined_event_ids(user_id, db)
    if not use_firestore():
        upcoming = _to_events(EventRepo.list_upcoming_sql(db, now))
    else:
        upcoming = _to_events(EventRepo.list_upcoming_fs(now))
    return [event for event in upcoming if event.id not in joined]


def enrich_with_distance(events: List[EventOut], origin_lat: float, origin_lon: float) -> List[EventOut]:
    """Copies of ``events`` carrying a display distance and the raw meters"""
    enriched = []
    for event in events:
        meters = distance_meters(origin_lat, origin_lon, event.latitude, event.longitude)
        enriched.append(event.model_copy(update={
            "distance": format_distance(meters),
            "distance_num": meters,
        }))
    return enriched


def filter_events(
    events: List[EventOut],
    sport: Optional[str] = None,
    max_distance_km: Optional[float] = None,
    title: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> List[EventOut]:
    """Discovery-feed filters; every criterion left as None is ignored.

    With a distance bound, events that were not enriched with a distance are dropped.
    """
    result = []
    for event in events:
        if sport and sport != ALL_SPORTS and event.sport_type.lower() != sport.lower():
            continue
        if max_distance_km is not None:
            if event.distance_num is None or event.distance_num / 1000 > max_distance_km:
                continue
        if title and title.lower() not in event.title.lower():
            continue
        if start is not None and as_utc(event.date) < as_utc(start):
            continue
        if end is not None and as_utc(event.date) > as_utc(end):
            continue
        result.append(event)
    return result


def create_event(
    data: EventCreate,
    creator_id: str,
    db: Optional[Session] = None,
    auto_invite: Optional[bool] = None
) -> Tuple[EventOut, List[InviteOut]]:
    """Create an event and, unless disabled, invite every compatible user"""
    if not use_firestore():
        event = EventOut.model_validate(EventRepo.create_sql(db, data, creator_id))
    else:
        event = EventOut.model_validate(EventRepo.create_fs(data, creator_id))
    logger.info(f"Event {event.id} created by {creator_id}")

    if auto_invite is None:
        auto_invite = settings.AUTO_INVITE_ON_CREATE
    invites = invite_service.invite_compatible_users(event, db) if auto_invite else []
    return event, invites


def delete_event(event_id: str, requester_id: str, db: Optional[Session] = None) -> None:
    """Delete an event with its participants, invites and likes; creator only"""
    if not use_firestore():
        event = EventRepo.get_sql(db, event_id)
        if event is None:
            raise EventNotFound()
        if event.creator_id != requester_id:
            raise NotEventCreator()
        EventRepo.delete_sql(db, event)
    else:
        event = EventRepo.get_fs(event_id)
        if event is None:
            raise EventNotFound()
        if event.get("userId") != requester_id:
            raise NotEventCreator()
        EventRepo.delete_fs(event_id)
    logger.info(f"Event {event_id} deleted by {requester_id}")
