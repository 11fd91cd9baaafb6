"""
Tests for Events calendar API endpoints
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clanhub.api.deps import get_db, get_now, get_settings
from clanhub.config import Settings
from clanhub.infrastructure.db.models import EventModel
from clanhub.infrastructure.db.session import Base
from clanhub.main import app

UTC = timezone.utc
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
CLAN = "clan-1"


@pytest.fixture
def api_session():
    """SQLite session shared with the TestClient thread"""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def client(api_session):
    """Test client with DB, clock and settings pinned"""
    def _get_db():
        yield api_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_now] = lambda: NOW
    app.dependency_overrides[get_settings] = lambda: Settings(
        DATABASE_URL="sqlite://", UPCOMING_PAGE_SIZE=2,
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add_event(db, event_id, starts_at, hours=2, **fields):
    db.add(EventModel(
        id=event_id, clan_id=CLAN, title=event_id, description="",
        starts_at=starts_at, ends_at=starts_at + timedelta(hours=hours), **fields,
    ))
    db.commit()


@pytest.fixture
def seeded(api_session):
    _add_event(api_session, "w", datetime(2026, 2, 1, 12, 0, tzinfo=UTC), recurrence_type="weekly")
    _add_event(api_session, "trip", datetime(2026, 3, 10, 10, 0, tzinfo=UTC), hours=48,
               banner_url="/trip.png")
    _add_event(api_session, "pin", datetime(2026, 3, 20, 18, 0, tzinfo=UTC), is_pinned=True)
    _add_event(api_session, "old", datetime(2026, 1, 5, 18, 0, tzinfo=UTC))
    return api_session


def test_calendar_month(client, seeded):
    response = client.get(f"/api/v1/clans/{CLAN}/events/calendar", params={"month": "2026-03"})
    assert response.status_code == 200
    data = response.json()
    assert data["month"] == "2026-03"
    assert data["today_key"] == "2026-03-01"
    assert (data["previous_month"], data["next_month"]) == ("2026-02", "2026-04")
    assert len(data["days"]) == 42
    assert data["days"][0]["day_key"] == "2026-02-23"
    cell = next(d for d in data["days"] if d["day_key"] == "2026-03-11")
    assert cell["banner_url"] == "/trip.png"
    assert cell["banners"] == ["/trip.png"]
    assert [o["id"] for o in cell["occurrences"]] == ["trip"]
    assert cell["occurrences"][0]["duration"] == "48h"


def test_calendar_defaults_to_current_month(client, seeded):
    data = client.get(f"/api/v1/clans/{CLAN}/events/calendar").json()
    assert data["month"] == "2026-03"
    assert [d["day_key"] for d in data["days"] if d["is_today"]] == ["2026-03-01"]


def test_calendar_invalid_month(client):
    response = client.get(f"/api/v1/clans/{CLAN}/events/calendar", params={"month": "2026-13"})
    assert response.status_code == 400
    assert "Invalid month" in response.json()["detail"]


def test_upcoming_paginated_pinned_first(client, seeded):
    first = client.get(f"/api/v1/clans/{CLAN}/events/upcoming").json()
    assert first["page"] == 1
    assert first["total_pages"] == 2
    assert first["total_items"] == 3
    assert [o["id"] for o in first["items"]] == ["pin", "w"]
    assert first["items"][1]["is_virtual"] is True
    assert first["items"][1]["display_key"] == "w:2026-03-01:3"

    second = client.get(f"/api/v1/clans/{CLAN}/events/upcoming", params={"page": 5}).json()
    assert second["page"] == 2
    assert [o["id"] for o in second["items"]] == ["trip"]


def test_upcoming_rejects_page_zero(client, seeded):
    response = client.get(f"/api/v1/clans/{CLAN}/events/upcoming", params={"page": 0})
    assert response.status_code == 400


def test_past(client, seeded):
    data = client.get(f"/api/v1/clans/{CLAN}/events/past").json()
    assert [o["display_key"] for o in data] == ["w", "old"]


def test_day(client, seeded):
    data = client.get(f"/api/v1/clans/{CLAN}/events/day/2026-03-12").json()
    assert data["day_key"] == "2026-03-12"
    assert [(e["occurrence"]["id"], e["time_label"]) for e in data["entries"]] == [("trip", "end_time")]


def test_day_invalid_key(client):
    response = client.get(f"/api/v1/clans/{CLAN}/events/day/2026-02-30")
    assert response.status_code == 400


def test_unknown_clan_is_empty(client, seeded):
    data = client.get("/api/v1/clans/nobody/events/upcoming").json()
    assert data["items"] == []
    assert data["total_pages"] == 1


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "ok"


def test_calendar_navigation_across_year(client):
    data = client.get(f"/api/v1/clans/{CLAN}/events/calendar", params={"month": "2027-01"}).json()
    assert (data["previous_month"], data["next_month"]) == ("2026-12", "2027-02")


def test_calendar_banner_pair_ordered(client, seeded):
    _add_event(seeded, "party", datetime(2026, 3, 11, 17, 0, tzinfo=UTC), banner_url="/party.png")
    _add_event(seeded, "raid", datetime(2026, 3, 11, 18, 0, tzinfo=UTC), hours=1, banner_url="/raid.png")
    data = client.get(f"/api/v1/clans/{CLAN}/events/calendar", params={"month": "2026-03"}).json()
    cell = next(d for d in data["days"] if d["day_key"] == "2026-03-12")
    assert cell["banners"] == ["/trip.png"]
    cell = next(d for d in data["days"] if d["day_key"] == "2026-03-11")
    assert cell["banners"] == ["/trip.png", "/party.png", "/raid.png"]
    assert cell["banner_url"] == "/trip.png"


def test_calendar_two_banners_same_start_shorter_first(client, api_session):
    _add_event(api_session, "long", datetime(2026, 3, 5, 17, 0, tzinfo=UTC), hours=3, banner_url="/long.png")
    _add_event(api_session, "short", datetime(2026, 3, 5, 17, 0, tzinfo=UTC), hours=1, banner_url="/short.png")
    data = client.get(f"/api/v1/clans/{CLAN}/events/calendar", params={"month": "2026-03"}).json()
    cell = next(d for d in data["days"] if d["day_key"] == "2026-03-05")
    assert cell["banners"] == ["/short.png", "/long.png"]


def test_day_invalid_key_skips_database(client, monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("events loaded for an invalid day key")

    monkeypatch.setattr("clanhub.api.v1.events.EventsCalendarService", _fail)
    response = client.get(f"/api/v1/clans/{CLAN}/events/day/not-a-day")
    assert response.status_code == 400
    assert "Invalid day" in response.json()["detail"]
