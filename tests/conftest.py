"""
Shared fixtures: a file-backed SQLite database per test
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from playconnect.core.db import Base, build_engine
from playconnect.models import Event, User
from playconnect.utils.timeutils import to_naive_utc

NOW = datetime(2024, 6, 3, 18, 0, tzinfo=timezone.utc)  # a Monday


@pytest.fixture
def engine(tmp_path):
    """Fresh database with all tables"""
    engine = build_engine(f"sqlite:///{tmp_path / 'playconnect_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    """Create test database session"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_event(db_session):
    """Factory persisting an event; commits so no transaction stays open"""
    def _make(
        spots=2,
        taken_spots=0,
        date=NOW + timedelta(days=1),
        creator_id="creator",
        sport_type="Tennis",
        skill_level="Intermediate",
        title="Evening Tennis",
        latitude=52.3676,
        longitude=4.9041,
    ):
        event = Event(
            title=title,
            sport_type=sport_type,
            skill_level=skill_level,
            date=to_naive_utc(date),
            latitude=latitude,
            longitude=longitude,
            city="Amsterdam",
            spots=spots,
            taken_spots=taken_spots,
            creator_id=creator_id,
        )
        db_session.add(event)
        db_session.commit()
        return event
    return _make


@pytest.fixture
def make_user(db_session):
    """Factory persisting a user profile"""
    def _make(
        user_id,
        favourite_sport="Tennis",
        skill_level="Intermediate",
        availability=("Monday",),
        is_available=True,
        first_name=None,
        last_name="Player",
        user_rating=4.0,
    ):
        user = User(
            id=user_id,
            email=f"{user_id}@example.com",
            first_name=first_name or user_id.capitalize(),
            last_name=last_name,
            favourite_sport=favourite_sport,
            skill_level=skill_level,
            availability=list(availability),
            is_available=is_available,
            user_rating=user_rating,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make
