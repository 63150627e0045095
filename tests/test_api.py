"""
Tests for the HTTP surface: auth, response envelopes and error rendering
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from main import app
from playconnect.core.db import get_db
from playconnect.utils.timeutils import to_iso_z, utcnow

def _auth(user_id):
    return {"Authorization": f"Bearer {user_id}"}

@pytest.fixture
def client(db_session):
    """Test client whose requests share the test session"""
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def event_payload():
    return {
        "title": "Saturday Padel",
        "sport_type": "Padel",
        "skill_level": "Beginner",
        "date": to_iso_z(utcnow() + timedelta(days=30)),
        "latitude": 52.3676,
        "longitude": 4.9041,
        "city": "Amsterdam",
        "spots": 1,
    }

def _create(client, payload, user_id="creator"):
    response = client.post("/events", json=payload, headers=_auth(user_id))
    assert response.status_code == 201
    return response.json()["data"]["event"]

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200

def test_requires_bearer_token(client):
    response = client.get("/events")

    assert response.status_code in (401, 403)

def test_create_event(client, event_payload):
    response = client.post("/events", json=event_payload, headers=_auth("creator"))

    body = response.json()
    assert response.status_code == 201
    assert body["success"] is True
    assert body["data"]["event"]["userId"] == "creator"
    assert body["data"]["event"]["takenSpots"] == 0
    assert body["data"]["event"]["date"].endswith("Z") or body["data"]["event"]["date"].endswith("+00:00")
    assert body["data"]["invites_sent"] == 0

def test_create_event_validation(client, event_payload):
    event_payload["spots"] = 0

    response = client.post("/events", json=event_payload, headers=_auth("creator"))

    assert response.status_code == 422

def test_join_and_full_event(client, event_payload):
    event = _create(client, event_payload)

    joined = client.post(f"/events/{event['id']}/join", headers=_auth("alice"))
    full = client.post(f"/events/{event['id']}/join", headers=_auth("bob"))

    assert joined.status_code == 200
    assert joined.json()["data"]["takenSpots"] == 1
    assert full.status_code == 409
    assert full.json() == {
        "success": False,
        "message": "No more places available",
        "error_code": "capacity_exceeded",
        "details": None,
    }

def test_join_twice(client, event_payload):
    event_payload["spots"] = 5
    event = _create(client, event_payload)
    client.post(f"/events/{event['id']}/join", headers=_auth("alice"))

    response = client.post(f"/events/{event['id']}/join", headers=_auth("alice"))

    assert response.status_code == 409
    assert response.json()["error_code"] == "already_joined"

def test_join_unknown_event(client):
    response = client.post("/events/missing/join", headers=_auth("alice"))

    assert response.status_code == 404
    assert response.json()["error_code"] == "event_not_found"

def test_leave_without_joining(client, event_payload):
    event = _create(client, event_payload)

    response = client.post(f"/events/{event['id']}/leave", headers=_auth("alice"))

    assert response.status_code == 409
    assert response.json()["error_code"] == "not_registered"

def test_checkin_too_early(client, event_payload):
    event = _create(client, event_payload)
    client.post(f"/events/{event['id']}/join", headers=_auth("alice"))

    response = client.post(f"/events/{event['id']}/checkin", headers=_auth("alice"))

    body = response.json()
    assert response.status_code == 409
    assert body["error_code"] == "checkin_not_open"
    assert body["details"]["minutes_remaining"] > 15

def test_participation_status(client, event_payload):
    event = _create(client, event_payload)
    client.post(f"/events/{event['id']}/join", headers=_auth("alice"))

    response = client.get(f"/events/{event['id']}/participation", headers=_auth("alice"))

    assert response.json()["data"] == {"event_id": event["id"], "state": "joined"}

def test_events_feed_with_distance_filter(client, event_payload):
    _create(client, event_payload)
    event_payload.update({"title": "Rotterdam Padel", "latitude": 51.9244, "longitude": 4.4777})
    _create(client, event_payload)

    response = client.get(
        "/events",
        params={"lat": 52.3676, "lon": 4.9041, "max_distance_km": 10},
        headers=_auth("alice")
    )

    events = response.json()["data"]
    assert [e["title"] for e in events] == ["Saturday Padel"]
    assert events[0]["distance"] == "0m"

def test_upcoming_excludes_joined(client, event_payload):
    event_payload["spots"] = 3
    first = _create(client, event_payload)
    second = _create(client, event_payload)
    client.post(f"/events/{first['id']}/join", headers=_auth("alice"))

    response = client.get("/events/upcoming", headers=_auth("alice"))

    assert [e["id"] for e in response.json()["data"]] == [second["id"]]

def test_invite_flow(client, event_payload):
    event = _create(client, event_payload)

    sent = client.post(f"/events/{event['id']}/invites", json={"user_ids": ["alice"]}, headers=_auth("creator"))
    invite_id = sent.json()["data"][0]["id"]
    accepted = client.post(f"/invites/{invite_id}/accept", headers=_auth("alice"))

    assert sent.status_code == 201
    assert accepted.status_code == 200
    assert accepted.json()["data"]["status"] == "accepted"
    assert client.get(f"/events/{event['id']}", headers=_auth("alice")).json()["data"]["takenSpots"] == 1

def test_invite_hidden_from_other_users(client, event_payload):
    event = _create(client, event_payload)
    sent = client.post(f"/events/{event['id']}/invites", json={"user_ids": ["alice"]}, headers=_auth("creator"))
    invite_id = sent.json()["data"][0]["id"]

    response = client.get(f"/invites/{invite_id}", headers=_auth("mallory"))

    assert response.status_code == 404
    assert response.json()["error_code"] == "invite_not_found"

def test_non_creator_cannot_invite(client, event_payload):
    event = _create(client, event_payload)

    response = client.post(f"/events/{event['id']}/invites", json={"user_ids": ["bob"]}, headers=_auth("alice"))

    assert response.status_code == 403
    assert response.json()["error_code"] == "not_event_creator"

def test_skill_assessment(client):
    response = client.post("/users/skill-assessment", json={"answers": {"1": 2, "2": 2, "3": 2}})

    assert response.json()["data"] == {"skillLevel": "Advanced"}

def test_skill_assessment_invalid_option(client):
    response = client.post("/users/skill-assessment", json={"answers": {"1": 7}})

    assert response.status_code == 422
    assert response.json()["error_code"] == "invalid_answer"

def test_profile_not_found(client):
    response = client.get("/users/me", headers=_auth("nobody"))

    assert response.status_code == 404
    assert response.json()["error_code"] == "user_not_found"
