"""
Invite routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from playconnect.core.db import get_db
from playconnect.schemas.invite import InviteUsersRequest
from playconnect.services import invite_service
from playconnect.services.errors import InviteNotFound, NotEventCreator
from playconnect.services.event_service import get_event
from playconnect.utils.responses import success_response
from playconnect.utils.security import get_current_user_id

router = APIRouter()


@router.get("/invites")
def my_invites(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Invites addressed to the caller"""
    return success_response(message="Invites retrieved", data=invite_service.list_invites_by_user(user_id, db))


@router.get("/invites/{invite_id}")
def get_invite(
    invite_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    invite = invite_service.get_invite(invite_id, db)
    if user_id not in (invite.invited_user_id, invite.event_creator_id):
        raise InviteNotFound()
    return success_response(message="Invite retrieved", data=invite)


@router.post("/invites/{invite_id}/accept")
def accept_invite(
    invite_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    invite = invite_service.get_invite(invite_id, db)
    accepted = invite_service.accept_invite(invite_id, invite.event_id, user_id, db)
    return success_response(message="Invite accepted, you have joined the event!", data=accepted)


@router.post("/invites/{invite_id}/decline")
def decline_invite(
    invite_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    declined = invite_service.decline_invite(invite_id, user_id, db)
    return success_response(message="Invite declined", data=declined)


@router.get("/events/{event_id}/invites")
def event_invites(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Invites sent for an event; creator only"""
    if get_event(event_id, db).creator_id != user_id:
        raise NotEventCreator()
    return success_response(message="Invites retrieved", data=invite_service.list_invites_by_event(event_id, db))


@router.post("/events/{event_id}/invites")
def invite_users(
    event_id: str,
    request: InviteUsersRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    invites = invite_service.invite_users(event_id, user_id, request.user_ids, db)
    return success_response(message=f"{len(invites)} invites sent", data=invites, status_code=201)


@router.get("/events/{event_id}/invite-candidates")
def invite_candidates(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    users = invite_service.propose_invite_candidates(event_id, user_id, db)
    return success_response(message="Invite candidates retrieved", data=users)
