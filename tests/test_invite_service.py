"""
Tests for the invitation lifecycle
"""

import pytest

from playconnect.models import Event, InviteStatus, Participation, ParticipationState
from playconnect.services import invite_service, participation_service
from playconnect.services.errors import (
    AlreadyInvited,
    CapacityExceeded,
    EventNotFound,
    InviteNotFound,
    InviteNotPending,
    NotEventCreator,
)

def _taken(db, event_id):
    return db.get(Event, event_id, populate_existing=True).taken_spots

def test_create_invite(db_session, make_event):
    event = make_event()

    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)

    assert invite.status == InviteStatus.PENDING
    assert invite.event_creator_id == "creator"
    assert invite.invited_user_id == "alice"
    assert invite.invited_at is not None
    assert invite.invited_at.tzinfo is not None

def test_invite_is_unique_per_event_and_user(db_session, make_event):
    event = make_event()
    invite_service.create_invite(event.id, "creator", "alice", db_session)

    with pytest.raises(AlreadyInvited):
        invite_service.create_invite(event.id, "creator", "alice", db_session)

    assert len(invite_service.list_invites_by_event(event.id, db_session)) == 1

def test_only_creator_can_invite(db_session, make_event):
    event = make_event()

    with pytest.raises(NotEventCreator):
        invite_service.create_invite(event.id, "mallory", "alice", db_session)

def test_invite_to_unknown_event(db_session):
    with pytest.raises(EventNotFound):
        invite_service.create_invite("missing", "creator", "alice", db_session)

def test_invite_users_skips_creator_and_duplicates(db_session, make_event):
    event = make_event()
    invite_service.create_invite(event.id, "creator", "alice", db_session)

    created = invite_service.invite_users(event.id, "creator", ["alice", "bob", "bob", "creator"], db_session)

    assert [i.invited_user_id for i in created] == ["bob"]
    assert {i.invited_user_id for i in invite_service.list_invites_by_event(event.id, db_session)} == {"alice", "bob"}

def test_accept_joins_event(db_session, make_event):
    event = make_event(spots=2)
    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)

    accepted = invite_service.accept_invite(invite.id, event.id, "alice", db_session)

    assert accepted.status == InviteStatus.ACCEPTED
    assert invite_service.get_invite(invite.id, db_session).status == InviteStatus.ACCEPTED
    assert invite_service.get_invite(invite.id, db_session).responded_at is not None
    assert participation_service.participation_state(event.id, "alice", db_session) == ParticipationState.JOINED
    assert _taken(db_session, event.id) == 1

def test_accept_on_full_event_keeps_invite_pending(db_session, make_event):
    """Nothing is written when the event is full"""
    event = make_event(spots=1)
    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)
    participation_service.join_event(event.id, "bob", db_session)

    with pytest.raises(CapacityExceeded):
        invite_service.accept_invite(invite.id, event.id, "alice", db_session)

    assert invite_service.get_invite(invite.id, db_session).status == InviteStatus.PENDING
    assert not participation_service.is_joined(event.id, "alice", db_session)
    assert _taken(db_session, event.id) == 1

def test_accept_when_already_joined_takes_no_second_spot(db_session, make_event):
    event = make_event(spots=3)
    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)
    participation_service.join_event(event.id, "alice", db_session)

    accepted = invite_service.accept_invite(invite.id, event.id, "alice", db_session)

    assert accepted.status == InviteStatus.ACCEPTED
    assert _taken(db_session, event.id) == 1
    assert db_session.query(Participation).filter(
        Participation.event_id == event.id,
        Participation.user_id == "alice"
    ).count() == 1

def test_accept_twice(db_session, make_event):
    event = make_event(spots=3)
    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)
    invite_service.accept_invite(invite.id, event.id, "alice", db_session)

    with pytest.raises(InviteNotPending):
        invite_service.accept_invite(invite.id, event.id, "alice", db_session)
    assert _taken(db_session, event.id) == 1

def test_accept_by_other_user(db_session, make_event):
    event = make_event()
    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)

    with pytest.raises(InviteNotFound):
        invite_service.accept_invite(invite.id, event.id, "bob", db_session)
    assert invite_service.get_invite(invite.id, db_session).status == InviteStatus.PENDING

def test_accept_unknown_invite(db_session, make_event):
    event = make_event()

    with pytest.raises(InviteNotFound):
        invite_service.accept_invite("missing", event.id, "alice", db_session)

def test_decline(db_session, make_event):
    event = make_event()
    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)

    declined = invite_service.decline_invite(invite.id, "alice", db_session)

    assert declined.status == InviteStatus.DECLINED
    assert invite_service.get_invite(invite.id, db_session).status == InviteStatus.DECLINED
    assert not participation_service.is_joined(event.id, "alice", db_session)

def test_declined_invite_cannot_be_accepted(db_session, make_event):
    event = make_event()
    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)
    invite_service.decline_invite(invite.id, "alice", db_session)

    with pytest.raises(InviteNotPending) as exc_info:
        invite_service.accept_invite(invite.id, event.id, "alice", db_session)
    assert exc_info.value.details == {"current_status": "declined"}

def test_decline_by_other_user(db_session, make_event):
    event = make_event()
    invite = invite_service.create_invite(event.id, "creator", "alice", db_session)

    with pytest.raises(InviteNotFound):
        invite_service.decline_invite(invite.id, "bob", db_session)

def test_list_invites_by_user(db_session, make_event):
    first = make_event(title="First")
    second = make_event(title="Second")
    invite_service.create_invite(first.id, "creator", "alice", db_session)
    invite_service.create_invite(second.id, "creator", "alice", db_session)
    invite_service.create_invite(second.id, "creator", "bob", db_session)

    invites = invite_service.list_invites_by_user("alice", db_session)

    assert {i.event_id for i in invites} == {first.id, second.id}

def test_propose_candidates_excludes_invited_and_joined(db_session, make_event, make_user):
    """Compatible users minus those already invited or joined"""
    event = make_event()  # Tuesday
    for user_id in ("alice", "bob", "carol", "dave"):
        make_user(user_id, availability=["Tuesday"])
    make_user("erin", favourite_sport="Football", availability=["Tuesday"])
    invite_service.create_invite(event.id, "creator", "alice", db_session)
    participation_service.join_event(event.id, "bob", db_session)

    candidates = invite_service.propose_invite_candidates(event.id, "creator", db_session)

    assert [u.id for u in candidates] == ["carol", "dave"]

def test_propose_candidates_creator_only(db_session, make_event):
    event = make_event()

    with pytest.raises(NotEventCreator):
        invite_service.propose_invite_candidates(event.id, "alice", db_session)
