"""
The one atomic unit for everything that touches an event's spot counter,
participation records or an invite's status.

``with_event_transaction(event_id, fn, db)`` runs ``fn(unit)`` inside a single
transaction of the configured provider and returns its result:

* SQL: the event row is locked (``SELECT ... FOR UPDATE``; on SQLite every
  transaction is ``BEGIN IMMEDIATE``), then committed or rolled back.
* Firestore: ``fn`` runs in a ``@firestore.transactional`` body and may be
  re-executed on contention.

``fn`` must perform all of its reads before its first write and must be a pure
function of what it reads, so a retried body reaches the same decision from the
fresh state.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, TypeVar

from firebase_admin import firestore
from sqlalchemy.orm import Session

from playconnect.models import Event, EventInvite, InviteStatus, Participation
from playconnect.schemas.event import EventOut, ParticipationOut
from playconnect.schemas.invite import InviteOut
from playconnect.services.firebase_client import get_firestore_client
from playconnect.services.repositories import (
    EVENTS,
    INVITES,
    PARTICIPANTS,
    participation_doc_id,
    use_firestore,
)
from playconnect.utils.timeutils import to_naive_utc, utcnow_naive

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlEventUnit:
    """Unit of work over one locked event row in a SQLAlchemy session"""

    def __init__(self, db: Session, event_id: str):
        self.db = db
        self.event_id = event_id
        self._event = db.query(Event).filter(Event.id == event_id) \
            .with_for_update().populate_existing().first()

    @property
    def event(self) -> Optional[EventOut]:
        return EventOut.model_validate(self._event) if self._event else None

    def _records(self, user_id: str) -> List[Participation]:
        return self.db.query(Participation).filter(
            Participation.event_id == self.event_id,
            Participation.user_id == user_id
        ).all()

    def participations(self, user_id: str) -> List[ParticipationOut]:
        return [ParticipationOut.model_validate(p) for p in self._records(user_id)]

    def invite(self, invite_id: str) -> Optional[InviteOut]:
        invite = self.db.query(EventInvite).filter(EventInvite.id == invite_id).first()
        return InviteOut.model_validate(invite) if invite else None

    def add_participation(self, user_id: str) -> None:
        self.db.add(Participation(event_id=self.event_id, user_id=user_id, joined_at=utcnow_naive()))

    def delete_participations(self, user_id: str) -> None:
        for record in self._records(user_id):
            self.db.delete(record)

    def mark_checked_in(self, user_id: str, at: datetime) -> None:
        for record in self._records(user_id):
            record.is_checked_in = True
            record.checked_in_at = to_naive_utc(at)

    def set_taken_spots(self, value: int) -> None:
        self._event.taken_spots = value

    def set_invite_status(self, invite_id: str, status: InviteStatus) -> None:
        invite = self.db.query(EventInvite).filter(EventInvite.id == invite_id).first()
        invite.status = status.value
        invite.responded_at = utcnow_naive()


class FirestoreEventUnit:
    """Unit of work over one event document inside a Firestore transaction"""

    def __init__(self, fs, transaction, event_id: str):
        self.fs = fs
        self.transaction = transaction
        self.event_id = event_id
        self.event_ref = fs.collection(EVENTS).document(event_id)
        snapshot = self.event_ref.get(transaction=transaction)
        self._event = snapshot.to_dict() if snapshot.exists else None
        self._participant_refs: Dict[str, list] = {}
        self._invite_refs: Dict[str, object] = {}

    @property
    def event(self) -> Optional[EventOut]:
        if self._event is None:
            return None
        return EventOut.model_validate({**self._event, "id": self.event_id})

    def participations(self, user_id: str) -> List[ParticipationOut]:
        # The deterministic document is read even when absent, so two concurrent
        # joins by the same user conflict on it. The query picks up records
        # written under random ids by older clients.
        own_ref = self.fs.collection(PARTICIPANTS).document(participation_doc_id(self.event_id, user_id))
        own = own_ref.get(transaction=self.transaction)
        query = self.fs.collection(PARTICIPANTS) \
            .where("userId", "==", user_id) \
            .where("eventId", "==", self.event_id)
        snapshots = {doc.id: doc for doc in query.get(transaction=self.transaction)}
        if own.exists:
            snapshots[own.id] = own
        self._participant_refs[user_id] = [doc.reference for doc in snapshots.values()]
        return [ParticipationOut.model_validate({**doc.to_dict(), "id": doc.id}) for doc in snapshots.values()]

    def invite(self, invite_id: str) -> Optional[InviteOut]:
        ref = self.fs.collection(INVITES).document(invite_id)
        snapshot = ref.get(transaction=self.transaction)
        if not snapshot.exists:
            return None
        self._invite_refs[invite_id] = ref
        return InviteOut.model_validate({**snapshot.to_dict(), "id": snapshot.id})

    def add_participation(self, user_id: str) -> None:
        ref = self.fs.collection(PARTICIPANTS).document(participation_doc_id(self.event_id, user_id))
        self.transaction.set(ref, {
            "userId": user_id,
            "eventId": self.event_id,
            "joinedAt": firestore.SERVER_TIMESTAMP,
            "isCheckedIn": False,
        })

    def delete_participations(self, user_id: str) -> None:
        for ref in self._participant_refs.get(user_id, []):
            self.transaction.delete(ref)

    def mark_checked_in(self, user_id: str, at: datetime) -> None:
        for ref in self._participant_refs.get(user_id, []):
            self.transaction.update(ref, {
                "isCheckedIn": True,
                "checkedInAt": firestore.SERVER_TIMESTAMP,
            })

    def set_taken_spots(self, value: int) -> None:
        self.transaction.update(self.event_ref, {"takenSpots": value})

    def set_invite_status(self, invite_id: str, status: InviteStatus) -> None:
        self.transaction.update(self._invite_refs[invite_id], {
            "status": status.value,
            "respondedAt": firestore.SERVER_TIMESTAMP,
        })


def _run_sql(db: Session, event_id: str, fn: Callable[[SqlEventUnit], T]) -> T:
    try:
        result = fn(SqlEventUnit(db, event_id))
        db.commit()
        return result
    except Exception:
        db.rollback()
        raise


def _run_fs(event_id: str, fn: Callable[[FirestoreEventUnit], T]) -> T:
    fs = get_firestore_client()

    @firestore.transactional
    def _body(transaction):
        return fn(FirestoreEventUnit(fs, transaction, event_id))

    return _body(fs.transaction())


def with_event_transaction(event_id: str, fn: Callable, db: Optional[Session] = None):
    """Run ``fn(unit)`` atomically against one event; see the module docstring"""
    if not use_firestore():
        return _run_sql(db, event_id, fn)
    return _run_fs(event_id, fn)
