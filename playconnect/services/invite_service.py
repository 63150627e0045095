"""
Invitation lifecycle: create, list, accept and decline event invites
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from playconnect.models import ParticipationState
from playconnect.schemas.event import EventOut
from playconnect.schemas.invite import InviteOut
from playconnect.schemas.user import UserOut
from playconnect.services.errors import (
    AlreadyInvited,
    EventNotFound,
    InviteNotFound,
    NotEventCreator,
)
from playconnect.services.matching import day_of_week, find_compatible_users
from playconnect.services.participation_service import admit, state_of
from playconnect.services.repositories import (
    EventRepo,
    InviteRepo,
    ParticipationRepo,
    use_firestore,
)
from playconnect.services.state import ACCEPT, DECLINE, next_invite_status
from playconnect.services.transactions import with_event_transaction

logger = logging.getLogger(__name__)


def _load_event(event_id: str, db: Optional[Session]) -> EventOut:
    event = EventRepo.get_sql(db, event_id) if not use_firestore() else EventRepo.get_fs(event_id)
    if event is None:
        raise EventNotFound()
    return EventOut.model_validate(event)


def _require_creator(event: EventOut, inviter_id: str) -> None:
    if event.creator_id != inviter_id:
        raise NotEventCreator()


def get_invite(invite_id: str, db: Optional[Session] = None) -> InviteOut:
    invite = InviteRepo.get_sql(db, invite_id) if not use_firestore() else InviteRepo.get_fs(invite_id)
    if invite is None:
        raise InviteNotFound()
    return InviteOut.model_validate(invite)


def list_invites_by_event(event_id: str, db: Optional[Session] = None) -> List[InviteOut]:
    if not use_firestore():
        invites = InviteRepo.list_by_event_sql(db, event_id)
    else:
        invites = InviteRepo.list_by_event_fs(event_id)
    return [InviteOut.model_validate(i) for i in invites]


def list_invites_by_user(user_id: str, db: Optional[Session] = None) -> List[InviteOut]:
    if not use_firestore():
        invites = InviteRepo.list_by_user_sql(db, user_id)
    else:
        invites = InviteRepo.list_by_user_fs(user_id)
    return [InviteOut.model_validate(i) for i in invites]


def _insert_invite(event: EventOut, invitee_id: str, db: Optional[Session]) -> Optional[InviteOut]:
    if not use_firestore():
        invite = InviteRepo.create_sql(db, event.id, event.creator_id, invitee_id)
    else:
        invite = InviteRepo.create_fs(event.id, event.creator_id, invitee_id)
    return InviteOut.model_validate(invite) if invite is not None else None


def create_invite(event_id: str, inviter_id: str, invitee_id: str, db: Optional[Session] = None) -> InviteOut:
    """Invite one user; (event, invitee) is unique"""
    event = _load_event(event_id, db)
    _require_creator(event, inviter_id)
    invite = _insert_invite(event, invitee_id, db)
    if invite is None:
        raise AlreadyInvited()
    logger.info(f"User {invitee_id} invited to event {event_id}")
    return invite


def _invite_many(event: EventOut, user_ids: Iterable[str], db: Optional[Session]) -> List[InviteOut]:
    created = []
    for user_id in user_ids:
        if user_id == event.creator_id:
            continue
        invite = _insert_invite(event, user_id, db)
        if invite is not None:
            created.append(invite)
    logger.info(f"Sent {len(created)} invites for event {event.id}")
    return created


def invite_users(event_id: str, inviter_id: str, user_ids: List[str], db: Optional[Session] = None) -> List[InviteOut]:
    """Manual invite flow; users already invited are skipped"""
    event = _load_event(event_id, db)
    _require_creator(event, inviter_id)
    return _invite_many(event, dict.fromkeys(user_ids), db)


def invite_compatible_users(event: EventOut, db: Optional[Session] = None) -> List[InviteOut]:
    """Invite every user the matcher finds for a freshly created event"""
    candidates = find_compatible_users(
        event.sport_type,
        event.skill_level,
        day_of_week(event.date),
        event.creator_id,
        db,
    )
    return _invite_many(event, [user.id for user in candidates], db)


def propose_invite_candidates(event_id: str, inviter_id: str, db: Optional[Session] = None) -> List[UserOut]:
    """Compatible users not yet invited to or joined in the event"""
    event = _load_event(event_id, db)
    _require_creator(event, inviter_id)
    invited = {invite.invited_user_id for invite in list_invites_by_event(event_id, db)}
    if not use_firestore():
        joined = {p.user_id for p in ParticipationRepo.list_by_event_sql(db, event_id)}
    else:
        joined = {p["userId"] for p in ParticipationRepo.list_by_event_fs(event_id)}
    candidates = find_compatible_users(
        event.sport_type,
        event.skill_level,
        day_of_week(event.date),
        event.creator_id,
        db,
    )
    return [user for user in candidates if user.id not in invited and user.id not in joined]


def accept_invite(invite_id: str, event_id: str, user_id: str, db: Optional[Session] = None) -> InviteOut:
    """Accept a pending invite and join the event in one atomic unit.

    On a full event nothing is written: the invite stays pending and
    ``CapacityExceeded`` is raised. A user who already joined the event keeps
    their single participation record and the invite is just marked accepted.
    """

    def _accept(unit):
        invite = unit.invite(invite_id)
        if invite is None or invite.event_id != event_id or invite.invited_user_id != user_id:
            raise InviteNotFound()
        status = next_invite_status(invite.status, ACCEPT)
        if state_of(unit.participations(user_id)) == ParticipationState.NOT_JOINED:
            admit(unit, user_id)
        elif unit.event is None:
            raise EventNotFound()
        unit.set_invite_status(invite_id, status)
        return invite.model_copy(update={"status": status})

    invite = with_event_transaction(event_id, _accept, db)
    logger.info(f"Invite {invite_id} accepted and user {user_id} joined event {event_id}")
    return invite


def decline_invite(invite_id: str, user_id: str, db: Optional[Session] = None) -> InviteOut:
    """Decline a pending invite"""
    current = get_invite(invite_id, db)
    if current.invited_user_id != user_id:
        raise InviteNotFound()

    def _decline(unit):
        invite = unit.invite(invite_id)
        if invite is None:
            raise InviteNotFound()
        status = next_invite_status(invite.status, DECLINE)
        unit.set_invite_status(invite_id, status)
        return invite.model_copy(update={"status": status})

    invite = with_event_transaction(current.event_id, _decline, db)
    logger.info(f"Event invite {invite_id} declined")
    return invite
