from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from aptshift.application.utils.dates import today_in
from aptshift.core.config import settings
from aptshift.core.constants import BOOKINGS_COLLECTION, CONVERSATIONS_COLLECTION
from aptshift.infrastructure.llm.mock_interpreter import MockInterpreter
from aptshift.main import app
from aptshift.wiring import dependencies


@pytest.fixture
def client(monkeypatch, store):
    monkeypatch.setattr(dependencies, "_document_store", store)
    monkeypatch.setattr(dependencies, "get_interpreter", lambda: MockInterpreter())
    return TestClient(app)


@pytest.fixture
def today():
    return today_in(ZoneInfo(settings.BUSINESS_TIMEZONE))


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_message_applies_change(client, store, seed_booking, add_user, today):
    add_user("boss", role="admin")
    booking = seed_booking("562", "checkout", day=today, checkout_time="12:00")

    response = client.post("/messages", json={"text": "виїзд 562 на 11:00", "userId": "boss", "chatId": "c1"})

    assert response.status_code == 200
    body = response.json()
    assert body["outcome"] == "applied"
    assert len(body["replies"]) == 1
    assert store.get(BOOKINGS_COLLECTION, booking.id)["checkoutTime"] == "11:00"


def test_message_requires_text(client):
    response = client.post("/messages", json={"text": "", "userId": "boss"})

    assert response.status_code == 422


def test_assignments_flow(client, add_user):
    add_user("boss", role="admin")
    add_user("cleaner_1")
    headers = {"X-User-Id": "boss"}

    added = client.post("/assignments/cleaner_1", json={"action": "add", "apartmentIds": ["598", "562"]}, headers=headers)
    removed = client.post("/assignments/cleaner_1", json={"action": "remove", "apartmentIds": ["562"]}, headers=headers)
    shown = client.get("/assignments/cleaner_1", headers=headers)

    assert added.status_code == 200
    assert added.json()["apartmentIds"] == ["598", "562"]
    assert removed.json()["apartmentIds"] == ["598"]
    assert shown.json()["userId"] == "cleaner_1"
    assert shown.json()["apartmentIds"] == ["598"]


def test_assignments_forbidden_for_non_admin(client, add_user):
    add_user("cleaner_1")

    response = client.get("/assignments/cleaner_1", headers={"X-User-Id": "cleaner_1"})

    assert response.status_code == 403


def test_booking_info_update(client, store, seed_booking, add_user, today):
    add_user("boss", role="admin")
    booking = seed_booking("562", "checkin", day=today)

    ok = client.patch(f"/bookings/{booking.id}/info", json={"sumToCollect": 250}, headers={"X-User-Id": "boss"})
    empty = client.patch(f"/bookings/{booking.id}/info", json={}, headers={"X-User-Id": "boss"})
    missing = client.patch("/bookings/nope/info", json={"keysCount": 2}, headers={"X-User-Id": "boss"})

    assert ok.status_code == 200
    assert ok.json()["bookingId"] == booking.id
    assert store.get(BOOKINGS_COLLECTION, booking.id)["sumToCollect"] == 250
    assert empty.status_code == 400
    assert missing.status_code == 404


def test_conversation_reset(client, store, add_user):
    add_user("cleaner_1")
    add_user("cleaner_2")
    store.set(CONVERSATIONS_COLLECTION, "cleaner_1", {"userId": "cleaner_1", "messageCount": 3})

    denied = client.delete("/conversations/cleaner_1", headers={"X-User-Id": "cleaner_2"})
    own = client.delete("/conversations/cleaner_1", headers={"X-User-Id": "cleaner_1"})

    assert denied.status_code == 403
    assert own.status_code == 204
    assert store.get(CONVERSATIONS_COLLECTION, "cleaner_1") is None
