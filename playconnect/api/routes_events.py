"""
Event routes: discovery feeds, creation, participation
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from playconnect.core.db import get_db
from playconnect.schemas.event import EventCreate, EventOut, ParticipationStatus
from playconnect.services import event_service, liked_event_service, participation_service
from playconnect.utils.responses import success_response
from playconnect.utils.security import get_current_user_id

router = APIRouter()


def _feed(
    events: List[EventOut],
    lat: Optional[float],
    lon: Optional[float],
    sport: Optional[str] = None,
    max_distance_km: Optional[float] = None,
    title: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> List[EventOut]:
    if lat is not None and lon is not None:
        events = event_service.enrich_with_distance(events, lat, lon)
    return event_service.filter_events(events, sport, max_distance_km, title, start, end)


@router.get("")
def list_events(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    sport: Optional[str] = None,
    max_distance_km: Optional[float] = None,
    title: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """All events, optionally enriched with distance and filtered"""
    events = _feed(event_service.list_events(db), lat, lon, sport, max_distance_km, title, start, end)
    return success_response(message="Events retrieved", data=events)


@router.post("")
def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Create an event and invite compatible users"""
    event, invites = event_service.create_event(event_data, user_id, db)
    return success_response(
        message="Event created successfully",
        data={"event": event, "invites_sent": len(invites)},
        status_code=201
    )


@router.get("/upcoming")
def upcoming_events(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    sport: Optional[str] = None,
    max_distance_km: Optional[float] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Quick-join feed: future events the caller has not joined"""
    events = _feed(event_service.list_upcoming_not_joined(user_id, db), lat, lon, sport, max_distance_km)
    return success_response(message="Upcoming events retrieved", data=events)


@router.get("/joined")
def joined_events(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    events = _feed(event_service.list_events_by_participant(user_id, db), lat, lon)
    return success_response(message="Joined events retrieved", data=events)


@router.get("/created")
def created_events(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return success_response(message="Created events retrieved", data=event_service.list_events_by_creator(user_id, db))


@router.get("/liked")
def liked_events(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    events = _feed(event_service.list_liked_events(user_id, db), lat, lon)
    return success_response(message="Liked events retrieved", data=events)


@router.get("/{event_id}")
def get_event(
    event_id: str,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    event = _feed([event_service.get_event(event_id, db)], lat, lon)[0]
    return success_response(message="Event retrieved", data=event)


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    event_service.delete_event(event_id, user_id, db)
    return success_response(message="Event deleted")


@router.post("/{event_id}/join")
def join_event(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    event = participation_service.join_event(event_id, user_id, db)
    return success_response(message="You have successfully joined the event!", data=event)


@router.post("/{event_id}/leave")
def leave_event(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    event = participation_service.leave_event(event_id, user_id, db)
    return success_response(message="You have left the event", data=event)


@router.post("/{event_id}/checkin")
def check_in(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    state = participation_service.check_in(event_id, user_id, db)
    return success_response(
        message="Successfully checked in!",
        data=ParticipationStatus(event_id=event_id, state=state)
    )


@router.get("/{event_id}/participation")
def participation_status(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    state = participation_service.participation_state(event_id, user_id, db)
    return success_response(
        message="Participation status retrieved",
        data=ParticipationStatus(event_id=event_id, state=state)
    )


@router.get("/{event_id}/participants")
def participants(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return success_response(
        message="Participants retrieved",
        data=participation_service.fetch_participants(event_id, db)
    )


@router.post("/{event_id}/like")
def like_event(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    liked_event_service.like_event(user_id, event_id, db)
    return success_response(message="Event liked", data={"liked": True})


@router.delete("/{event_id}/like")
def unlike_event(
    event_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    liked_event_service.unlike_event(user_id, event_id, db)
    return success_response(message="Event unliked", data={"liked": False})
