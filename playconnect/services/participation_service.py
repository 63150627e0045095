"""
Capacity-safe participation: join, leave and check-in against an event's spots.

Every mutation runs through ``with_event_transaction`` so the capacity check,
the (event, user) uniqueness check and the counter write happen in one atomic
unit.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from playconnect.core.config import settings
from playconnect.models import ParticipationState
from playconnect.schemas.event import EventOut, ParticipantOut, ParticipationOut
from playconnect.schemas.user import UserOut
from playconnect.services.errors import (
    CapacityExceeded,
    CheckInClosed,
    CheckInNotYetOpen,
    EventNotFound,
    InvariantViolation,
)
from playconnect.services.repositories import ParticipationRepo, UserRepo, use_firestore
from playconnect.services.state import CHECK_IN, JOIN, LEAVE, next_participation_state
from playconnect.services.transactions import with_event_transaction
from playconnect.utils.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)


def state_of(records: List[ParticipationOut]) -> ParticipationState:
    if not records:
        return ParticipationState.NOT_JOINED
    if any(record.is_checked_in for record in records):
        return ParticipationState.CHECKED_IN
    return ParticipationState.JOINED


def admit(unit, user_id: str) -> EventOut:
    """Join ``user_id`` inside an open unit; returns the event as it will be committed"""
    event = unit.event
    if event is None:
        raise EventNotFound()
    next_participation_state(state_of(unit.participations(user_id)), JOIN)
    if event.spots - event.taken_spots <= 0:
        raise CapacityExceeded()
    unit.add_participation(user_id)
    unit.set_taken_spots(event.taken_spots + 1)
    return event.model_copy(update={"taken_spots": event.taken_spots + 1})


def check_in_window(event: EventOut, now: datetime) -> None:
    """Raise unless ``now`` is inside the check-in window of ``event``"""
    window = timedelta(minutes=settings.CHECKIN_WINDOW_MINUTES)
    until_start = as_utc(event.date) - as_utc(now)
    if until_start > window:
        raise CheckInNotYetOpen(until_start - window, settings.CHECKIN_WINDOW_MINUTES)
    if until_start < timedelta(0) and settings.CHECKIN_CLOSES_AT_START:
        raise CheckInClosed()


def join_event(event_id: str, user_id: str, db: Optional[Session] = None) -> EventOut:
    """Join an event, taking one spot"""
    event = with_event_transaction(event_id, lambda unit: admit(unit, user_id), db)
    logger.info(f"User {user_id} joined event {event_id} ({event.taken_spots}/{event.spots})")
    return event


def leave_event(event_id: str, user_id: str, db: Optional[Session] = None) -> EventOut:
    """Leave an event, releasing one spot"""

    def _leave(unit):
        records = unit.participations(user_id)
        next_participation_state(state_of(records), LEAVE)
        event = unit.event
        if event is None:
            raise EventNotFound()
        if event.taken_spots <= 0:
            logger.error(f"Event {event_id} has a participant of {user_id} but takenSpots={event.taken_spots}")
            raise InvariantViolation()
        unit.delete_participations(user_id)
        unit.set_taken_spots(event.taken_spots - 1)
        return event.model_copy(update={"taken_spots": event.taken_spots - 1})

    event = with_event_transaction(event_id, _leave, db)
    logger.info(f"User {user_id} left event {event_id} ({event.taken_spots}/{event.spots})")
    return event


def check_in(
    event_id: str,
    user_id: str,
    db: Optional[Session] = None,
    now: Optional[datetime] = None
) -> ParticipationState:
    """Check a joined user in, at most 15 minutes (configurable) before the start"""
    now = now or utcnow()

    def _check_in(unit):
        event = unit.event
        if event is None:
            raise EventNotFound()
        check_in_window(event, now)
        next_state = next_participation_state(state_of(unit.participations(user_id)), CHECK_IN)
        unit.mark_checked_in(user_id, now)
        return next_state

    state = with_event_transaction(event_id, _check_in, db)
    logger.info(f"User {user_id} checked in to event {event_id}")
    return state


def participation_state(event_id: str, user_id: str, db: Optional[Session] = None) -> ParticipationState:
    if not use_firestore():
        record = ParticipationRepo.find_sql(db, event_id, user_id)
    else:
        record = ParticipationRepo.find_fs(event_id, user_id)
    if record is None:
        return ParticipationState.NOT_JOINED
    return state_of([ParticipationOut.model_validate(record)])


def is_joined(event_id: str, user_id: str, db: Optional[Session] = None) -> bool:
    return participation_state(event_id, user_id, db) != ParticipationState.NOT_JOINED


def is_checked_in(event_id: str, user_id: str, db: Optional[Session] = None) -> bool:
    return participation_state(event_id, user_id, db) == ParticipationState.CHECKED_IN


def fetch_participants(event_id: str, db: Optional[Session] = None) -> List[ParticipantOut]:
    """Participants of an event with their profile summary.

    Records whose user has no profile are left out.
    """
    if not use_firestore():
        records = [ParticipationOut.model_validate(p) for p in ParticipationRepo.list_by_event_sql(db, event_id)]
        users = UserRepo.list_by_ids_sql(db, [r.user_id for r in records])
    else:
        records = [ParticipationOut.model_validate(p) for p in ParticipationRepo.list_by_event_fs(event_id)]
        users = UserRepo.list_by_ids_fs([r.user_id for r in records])

    profiles = {u.id: u for u in (UserOut.model_validate(user) for user in users)}
    participants = []
    for record in records:
        profile = profiles.get(record.user_id)
        if profile is None:
            continue
        participants.append(ParticipantOut(
            id=profile.id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            user_rating=profile.user_rating,
            profile_picture=profile.profile_picture,
            is_checked_in=record.is_checked_in,
        ))
    return participants
