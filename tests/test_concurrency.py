"""
Concurrent joins against one event, each worker on its own session
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from playconnect.models import Participation
from playconnect.services import participation_service
from playconnect.services.errors import AlreadyJoined, CapacityExceeded

def _join(session_factory, event_id, user_id):
    db = session_factory()
    try:
        participation_service.join_event(event_id, user_id, db)
        return "joined"
    except CapacityExceeded:
        return "full"
    except AlreadyJoined:
        return "already_joined"
    finally:
        db.close()

def _leave(session_factory, event_id, user_id):
    db = session_factory()
    try:
        participation_service.leave_event(event_id, user_id, db)
        return "left"
    finally:
        db.close()

@pytest.mark.parametrize("spots,workers", [(1, 6), (3, 8)])
def test_concurrent_joins_never_overbook(db_session, session_factory, make_event, spots, workers):
    """Exactly ``spots`` of the racing joins succeed"""
    event = make_event(spots=spots)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(
            lambda i: _join(session_factory, event.id, f"user{i}"),
            range(workers)
        ))

    assert results.count("joined") == spots
    assert results.count("full") == workers - spots
    db_session.refresh(event)
    assert event.taken_spots == spots
    assert db_session.query(Participation).filter(Participation.event_id == event.id).count() == spots

def test_concurrent_joins_by_same_user(db_session, session_factory, make_event):
    event = make_event(spots=10)

    with ThreadPoolExecutor(max_workers=5) as pool:
        results = list(pool.map(lambda _: _join(session_factory, event.id, "alice"), range(5)))

    assert results.count("joined") == 1
    assert results.count("already_joined") == 4
    db_session.refresh(event)
    assert event.taken_spots == 1
    assert db_session.query(Participation).filter(
        Participation.event_id == event.id,
        Participation.user_id == "alice"
    ).count() == 1

def test_concurrent_joins_and_leaves_keep_counter_in_sync(db_session, session_factory, make_event):
    """takenSpots equals the number of records after a mixed burst"""
    event = make_event(spots=4)
    for user_id in ("a", "b"):
        _join(session_factory, event.id, user_id)

    jobs = [(_leave, "a"), (_leave, "b"), (_join, "c"), (_join, "d"), (_join, "e"), (_join, "f")]
    with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
        list(pool.map(lambda job: job[0](session_factory, event.id, job[1]), jobs))

    db_session.refresh(event)
    records = db_session.query(Participation).filter(Participation.event_id == event.id).count()
    assert event.taken_spots == records
    assert 0 <= event.taken_spots <= event.spots
