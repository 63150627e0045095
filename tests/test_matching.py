"""
Tests for eligibility matching and the skill questionnaire
"""

from datetime import datetime, timezone

import pytest

from playconnect.core.config import settings
from playconnect.services.matching import assess_skill_level, day_of_week, find_compatible_users

@pytest.fixture
def players(make_user):
    """A small user base for one Monday tennis event"""
    make_user("creator", availability=["Monday"])
    make_user("dana", availability=["Monday", "Friday"], skill_level="Advanced")
    make_user("alice", availability=["Monday"])
    make_user("bob", availability=["Tuesday"])
    make_user("carl", favourite_sport="Football", availability=["Monday"])
    make_user("erin", availability=["Monday"], is_available=False)

def test_compatible_users(db_session, players):
    users = find_compatible_users("Tennis", "Intermediate", "Monday", "creator", db_session)

    assert [u.id for u in users] == ["alice", "dana"]

def test_results_are_deterministic(db_session, players):
    first = find_compatible_users("Tennis", "Intermediate", "Monday", "creator", db_session)
    second = find_compatible_users("Tennis", "Intermediate", "Monday", "creator", db_session)

    assert [u.id for u in first] == [u.id for u in second]

def test_skill_level_does_not_filter_by_default(db_session, players):
    beginner = find_compatible_users("Tennis", "Beginner", "Monday", "creator", db_session)
    advanced = find_compatible_users("Tennis", "Advanced", "Monday", "creator", db_session)

    assert [u.id for u in beginner] == [u.id for u in advanced] == ["alice", "dana"]

def test_skill_match_when_enforced(db_session, players, monkeypatch):
    monkeypatch.setattr(settings, "ENFORCE_SKILL_MATCH", True)

    users = find_compatible_users("Tennis", "Advanced", "Monday", "creator", db_session)

    assert [u.id for u in users] == ["dana"]

def test_no_exclusion(db_session, players):
    users = find_compatible_users("Tennis", "Intermediate", "Monday", None, db_session)

    assert [u.id for u in users] == ["alice", "creator", "dana"]

def test_no_compatible_users(db_session, players):
    assert find_compatible_users("Padel", "Intermediate", "Monday", "creator", db_session) == []

@pytest.mark.parametrize("value,expected", [
    ("2024-06-03T18:00:00.000Z", "Monday"),
    ("2024-06-09T23:59:59Z", "Sunday"),
    ("2024-06-03T23:30:00-02:00", "Tuesday"),
    (datetime(2024, 6, 5, 0, 30, tzinfo=timezone.utc), "Wednesday"),
])
def test_day_of_week_uses_utc(value, expected):
    assert day_of_week(value) == expected

@pytest.mark.parametrize("answers,expected", [
    ({}, "Beginner"),
    ({1: 0, 2: 0, 3: 0, 4: 0}, "Beginner"),
    ({1: 1, 2: 1, 3: 1, 4: 1}, "Intermediate"),
    ({1: 2, 2: 2}, "Intermediate"),
    ({1: 2, 2: 2, 3: 2}, "Advanced"),
    ({1: 2, 2: 2, 3: 2, 4: 2}, "Advanced"),
])
def test_assess_skill_level(answers, expected):
    assert assess_skill_level(answers) == expected

def test_assess_skill_level_rejects_unknown_option():
    with pytest.raises(ValueError):
        assess_skill_level({1: 3})
