"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Capacity-affecting writes do not live here: they go through
``playconnect.services.transactions.with_event_transaction``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import AlreadyExists
from firebase_admin import firestore
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from playconnect.core.config import settings
from playconnect.models import Event, EventInvite, InviteStatus, LikedEvent, Participation, User
from playconnect.schemas.event import EventCreate
from playconnect.services.firebase_client import get_firestore_client
from playconnect.utils.timeutils import to_iso_z, to_naive_utc, utcnow_naive

EVENTS = "events"
PARTICIPANTS = "eventParticipants"
INVITES = "eventInvites"
USERS = "users"
LIKED_EVENTS = "userLikedEvents"


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


def participation_doc_id(event_id: str, user_id: str) -> str:
    return f"{event_id}_{user_id}"


def invite_doc_id(event_id: str, invited_user_id: str) -> str:
    return f"{event_id}_{invited_user_id}"


def _doc_to_dict(doc) -> Dict[str, Any]:
    data = doc.to_dict()
    data["id"] = doc.id
    return data


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get_sql(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def list_all_sql(db: Session) -> List[Event]:
        return db.query(Event).order_by(Event.date).all()

    @staticmethod
    def list_by_ids_sql(db: Session, event_ids: List[str]) -> List[Event]:
        if not event_ids:
            return []
        return db.query(Event).filter(Event.id.in_(event_ids)).order_by(Event.date).all()

    @staticmethod
    def list_by_creator_sql(db: Session, creator_id: str) -> List[Event]:
        return db.query(Event).filter(Event.creator_id == creator_id).order_by(Event.date).all()

    @staticmethod
    def list_upcoming_sql(db: Session, after: datetime) -> List[Event]:
        return db.query(Event).filter(Event.date > to_naive_utc(after)).order_by(Event.date).all()

    @staticmethod
    def create_sql(db: Session, data: EventCreate, creator_id: str) -> Event:
        event = Event(
            title=data.title,
            sport_type=data.sport_type,
            skill_level=data.skill_level,
            date=to_naive_utc(data.date),
            latitude=data.latitude,
            longitude=data.longitude,
            street=data.street,
            street_number=data.street_number,
            city=data.city,
            postcode=data.postcode,
            spots=data.spots,
            taken_spots=0,
            creator_id=creator_id,
            event_image=data.event_image,
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete_sql(db: Session, event: Event) -> None:
        # participants and invites go with the event (ORM cascade)
        db.query(LikedEvent).filter(LikedEvent.event_id == event.id).delete(synchronize_session=False)
        db.delete(event)
        db.commit()

    # Firestore shape: collection "events/{id}" with camelCase fields, date as ISO string
    @staticmethod
    def get_fs(event_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        doc = fs.collection(EVENTS).document(event_id).get()
        return _doc_to_dict(doc) if doc.exists else None

    @staticmethod
    def list_all_fs() -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        return [_doc_to_dict(d) for d in fs.collection(EVENTS).get()]

    @staticmethod
    def list_by_ids_fs(event_ids: List[str]) -> List[Dict[str, Any]]:
        if not event_ids:
            return []
        fs = get_firestore_client()
        refs = [fs.collection(EVENTS).document(event_id) for event_id in event_ids]
        return [_doc_to_dict(d) for d in fs.get_all(refs) if d.exists]

    @staticmethod
    def list_by_creator_fs(creator_id: str) -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(EVENTS).where("userId", "==", creator_id).get()
        return [_doc_to_dict(d) for d in docs]

    @staticmethod
    def list_upcoming_fs(after: datetime) -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(EVENTS).where("date", ">", to_iso_z(after)).order_by("date").get()
        return [_doc_to_dict(d) for d in docs]

    @staticmethod
    def create_fs(data: EventCreate, creator_id: str) -> Dict[str, Any]:
        fs = get_firestore_client()
        ref = fs.collection(EVENTS).document()
        doc = {
            "title": data.title,
            "sportType": data.sport_type,
            "skillLevel": data.skill_level,
            "date": to_iso_z(data.date),
            "latitude": data.latitude,
            "longitude": data.longitude,
            "street": data.street,
            "streetNumber": data.street_number,
            "city": data.city,
            "postcode": data.postcode,
            "spots": data.spots,
            "takenSpots": 0,
            "userId": creator_id,
            "eventImage": data.event_image,
        }
        ref.set(doc)
        doc["id"] = ref.id
        return doc

    @staticmethod
    def delete_fs(event_id: str) -> None:
        fs = get_firestore_client()
        batch = fs.batch()
        for collection in (PARTICIPANTS, INVITES, LIKED_EVENTS):
            for doc in fs.collection(collection).where("eventId", "==", event_id).get():
                batch.delete(doc.reference)
        batch.delete(fs.collection(EVENTS).document(event_id))
        batch.commit()


# -------- Participation repository (read side) --------

class ParticipationRepo:
    @staticmethod
    def find_sql(db: Session, event_id: str, user_id: str) -> Optional[Participation]:
        return db.query(Participation).filter(
            Participation.event_id == event_id,
            Participation.user_id == user_id
        ).first()

    @staticmethod
    def list_by_event_sql(db: Session, event_id: str) -> List[Participation]:
        return db.query(Participation).filter(Participation.event_id == event_id).order_by(Participation.joined_at).all()

    @staticmethod
    def event_ids_for_user_sql(db: Session, user_id: str) -> List[str]:
        rows = db.query(Participation.event_id).filter(Participation.user_id == user_id).all()
        return [row.event_id for row in rows]

    @staticmethod
    def find_fs(event_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(PARTICIPANTS).where("userId", "==", user_id).where("eventId", "==", event_id).get()
        return _doc_to_dict(docs[0]) if docs else None

    @staticmethod
    def list_by_event_fs(event_id: str) -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        return [_doc_to_dict(d) for d in fs.collection(PARTICIPANTS).where("eventId", "==", event_id).get()]

    @staticmethod
    def event_ids_for_user_fs(user_id: str) -> List[str]:
        fs = get_firestore_client()
        docs = fs.collection(PARTICIPANTS).where("userId", "==", user_id).get()
        return [d.to_dict().get("eventId") for d in docs]


# -------- Invite repository --------

class InviteRepo:
    @staticmethod
    def get_sql(db: Session, invite_id: str) -> Optional[EventInvite]:
        return db.query(EventInvite).filter(EventInvite.id == invite_id).first()

    @staticmethod
    def list_by_event_sql(db: Session, event_id: str) -> List[EventInvite]:
        return db.query(EventInvite).filter(EventInvite.event_id == event_id).order_by(EventInvite.invited_at).all()

    @staticmethod
    def list_by_user_sql(db: Session, user_id: str) -> List[EventInvite]:
        return db.query(EventInvite).filter(EventInvite.invited_user_id == user_id).order_by(EventInvite.invited_at).all()

    @staticmethod
    def create_sql(db: Session, event_id: str, inviter_id: str, invitee_id: str) -> Optional[EventInvite]:
        """Insert a pending invite; None when (event, invitee) already has one"""
        invite = EventInvite(
            event_id=event_id,
            event_creator_id=inviter_id,
            invited_user_id=invitee_id,
            status=InviteStatus.PENDING.value,
            invited_at=utcnow_naive(),
        )
        try:
            with db.begin_nested():
                db.add(invite)
        except IntegrityError:
            db.rollback()
            return None
        db.commit()
        return invite

    @staticmethod
    def get_fs(invite_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        doc = fs.collection(INVITES).document(invite_id).get()
        return _doc_to_dict(doc) if doc.exists else None

    @staticmethod
    def list_by_event_fs(event_id: str) -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        return [_doc_to_dict(d) for d in fs.collection(INVITES).where("eventId", "==", event_id).get()]

    @staticmethod
    def list_by_user_fs(user_id: str) -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        return [_doc_to_dict(d) for d in fs.collection(INVITES).where("invitedUserId", "==", user_id).get()]

    @staticmethod
    def create_fs(event_id: str, inviter_id: str, invitee_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        ref = fs.collection(INVITES).document(invite_doc_id(event_id, invitee_id))
        doc = {
            "eventId": event_id,
            "eventCreatorId": inviter_id,
            "invitedUserId": invitee_id,
            "status": InviteStatus.PENDING.value,
            "invitedAt": firestore.SERVER_TIMESTAMP,
        }
        try:
            # create() fails if the document exists, so (event, invitee) stays unique
            ref.create(doc)
        except AlreadyExists:
            return None
        return _doc_to_dict(ref.get())


# -------- User repository --------

class UserRepo:
    @staticmethod
    def get_sql(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def list_by_ids_sql(db: Session, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        return db.query(User).filter(User.id.in_(user_ids)).all()

    @staticmethod
    def list_candidates_sql(db: Session, sport: str) -> List[User]:
        # availability is a JSON list; weekday containment is checked in Python
        return db.query(User).filter(
            User.favourite_sport == sport,
            User.is_available == True
        ).all()

    @staticmethod
    def update_preferences_sql(db: Session, user: User, changes: Dict[str, Any]) -> User:
        for key, value in changes.items():
            setattr(user, key, value)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_fs(user_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        doc = fs.collection(USERS).document(user_id).get()
        return _doc_to_dict(doc) if doc.exists else None

    @staticmethod
    def list_by_ids_fs(user_ids: List[str]) -> List[Dict[str, Any]]:
        if not user_ids:
            return []
        fs = get_firestore_client()
        refs = [fs.collection(USERS).document(user_id) for user_id in user_ids]
        return [_doc_to_dict(d) for d in fs.get_all(refs) if d.exists]

    @staticmethod
    def list_candidates_fs(sport: str, weekday: str) -> List[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(USERS) \
            .where("favouriteSport", "==", sport) \
            .where("availability", "array_contains", weekday) \
            .where("isAvailable", "==", True) \
            .get()
        return [_doc_to_dict(d) for d in docs]

    @staticmethod
    def update_preferences_fs(user_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        ref = fs.collection(USERS).document(user_id)
        ref.update(changes)
        doc = ref.get()
        return _doc_to_dict(doc) if doc.exists else None


# -------- Liked event repository --------

class LikedEventRepo:
    @staticmethod
    def find_sql(db: Session, user_id: str, event_id: str) -> Optional[LikedEvent]:
        return db.query(LikedEvent).filter(
            LikedEvent.user_id == user_id,
            LikedEvent.event_id == event_id
        ).first()

    @staticmethod
    def create_sql(db: Session, user_id: str, event_id: str) -> None:
        try:
            with db.begin_nested():
                db.add(LikedEvent(user_id=user_id, event_id=event_id))
        except IntegrityError:
            pass  # already liked
        db.commit()

    @staticmethod
    def delete_sql(db: Session, user_id: str, event_id: str) -> None:
        db.query(LikedEvent).filter(
            LikedEvent.user_id == user_id,
            LikedEvent.event_id == event_id
        ).delete(synchronize_session=False)
        db.commit()

    @staticmethod
    def event_ids_for_user_sql(db: Session, user_id: str) -> List[str]:
        rows = db.query(LikedEvent.event_id).filter(LikedEvent.user_id == user_id).all()
        return [row.event_id for row in rows]

    @staticmethod
    def find_fs(user_id: str, event_id: str) -> Optional[Dict[str, Any]]:
        fs = get_firestore_client()
        docs = fs.collection(LIKED_EVENTS).where("userId", "==", user_id).where("eventId", "==", event_id).get()
        return _doc_to_dict(docs[0]) if docs else None

    @staticmethod
    def create_fs(user_id: str, event_id: str) -> None:
        fs = get_firestore_client()
        fs.collection(LIKED_EVENTS).document(f"{user_id}_{event_id}").set({
            "userId": user_id,
            "eventId": event_id,
            "likedAt": firestore.SERVER_TIMESTAMP,
        })

    @staticmethod
    def delete_fs(user_id: str, event_id: str) -> None:
        fs = get_firestore_client()
        docs = fs.collection(LIKED_EVENTS).where("userId", "==", user_id).where("eventId", "==", event_id).get()
        for doc in docs:
            doc.reference.delete()

    @staticmethod
    def event_ids_for_user_fs(user_id: str) -> List[str]:
        fs = get_firestore_client()
        docs = fs.collection(LIKED_EVENTS).where("userId", "==", user_id).get()
        return [d.to_dict().get("eventId") for d in docs]
