from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.deps import get_db
from app.db.models.schedule import Schedule
from app.db.models.task import Task
from app.main import app


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Schedule.__table__.create(bind=engine)
    Task.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _seed_schedule(session_factory, *, status: str = "upcoming", shift_time: datetime | None = None, client_name: str = "Melisa Adam") -> UUID:
    session = session_factory()
    try:
        schedule_id = uuid4()
        session.add(
            Schedule(
                id=schedule_id,
                client_name=client_name,
                shift_time=shift_time or datetime(2025, 6, 28, 9, 0, tzinfo=timezone.utc),
                location="Casa Grande Apartment",
                status=status,
            )
        )
        session.commit()
        return schedule_id
    finally:
        session.close()


def _seed_task(session_factory, schedule_id: UUID, description: str, *, created_at: datetime, status: str = "pending") -> UUID:
    session = session_factory()
    try:
        task_id = uuid4()
        session.add(
            Task(
                id=task_id,
                schedule_id=schedule_id,
                description=description,
                status=status,
                created_at=created_at,
                updated_at=created_at,
            )
        )
        session.commit()
        return task_id
    finally:
        session.close()


def test_list_schedules_empty_store_returns_zero_pages(client):
    test_client, _ = client
    resp = test_client.get("/api/schedules", params={"limit": 10, "page": 1})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body.get("data", []) == []
    assert body["pagination"] == {"page": 1, "page_size": 10, "total_items": 0, "total_pages": 0}


def test_list_schedules_paginates_in_shift_order(client):
    test_client, session_factory = client
    base = datetime(2025, 6, 28, 8, 0, tzinfo=timezone.utc)
    for offset in (3, 0, 4, 1, 2):
        _seed_schedule(session_factory, shift_time=base + timedelta(hours=offset), client_name=f"client-{offset}")

    resp = test_client.get("/api/schedules", params={"limit": 2, "page": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert [row["client_name"] for row in body["data"]] == ["client-2", "client-3"]
    assert body["pagination"] == {"page": 2, "page_size": 2, "total_items": 5, "total_pages": 3}
    assert body["data"][0]["start_time"] is None
    assert "tasks" not in body["data"][0]


def test_list_schedules_clamps_zero_page_and_limit(client):
    test_client, session_factory = client
    _seed_schedule(session_factory)
    resp = test_client.get("/api/schedules", params={"limit": 0, "page": 0})
    assert resp.status_code == 200
    assert resp.json()["pagination"]["page"] == 1
    assert resp.json()["pagination"]["page_size"] == 10


def test_list_schedules_filters_by_day(client):
    test_client, session_factory = client
    _seed_schedule(session_factory, shift_time=datetime(2025, 6, 28, 0, 0, tzinfo=timezone.utc), client_name="midnight")
    _seed_schedule(session_factory, shift_time=datetime(2025, 6, 28, 23, 59, 59, tzinfo=timezone.utc), client_name="late")
    _seed_schedule(session_factory, shift_time=datetime(2025, 6, 29, 0, 0, tzinfo=timezone.utc), client_name="next-day")

    resp = test_client.get("/api/schedules", params={"date": "2025-06-28"})
    assert resp.status_code == 200
    body = resp.json()
    assert [row["client_name"] for row in body["data"]] == ["midnight", "late"]
    assert body["pagination"]["total_items"] == 2


@pytest.mark.parametrize("bad_date", ["28-06-2025", "2025/06/28", "2025-6-28", "yesterday"])
def test_list_schedules_rejects_malformed_date(client, bad_date):
    test_client, _ = client
    resp = test_client.get("/api/schedules", params={"date": bad_date})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == 400


def test_list_schedules_rejects_oversized_limit(client):
    test_client, _ = client
    resp = test_client.get("/api/schedules", params={"limit": 101})
    assert resp.status_code == 400


def test_list_schedules_rejects_page_beyond_storage_range(client):
    test_client, session_factory = client
    _seed_schedule(session_factory)
    resp = test_client.get("/api/schedules", params={"page": 10**19, "limit": 10})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == 400
    assert "out of range" in body["error"]["details"]


def test_list_schedules_rejects_non_numeric_page(client):
    test_client, _ = client
    resp = test_client.get("/api/schedules", params={"page": "two"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid query parameters"


def test_schedule_detail_embeds_tasks_in_creation_order(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory)
    start = datetime(2025, 6, 27, 12, 0, tzinfo=timezone.utc)
    _seed_task(session_factory, schedule_id, "Give medication", created_at=start + timedelta(minutes=5))
    _seed_task(session_factory, schedule_id, "Prepare breakfast", created_at=start)

    resp = test_client.get(f"/api/schedules/{schedule_id}")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == str(schedule_id)
    assert [task["description"] for task in data["tasks"]] == ["Prepare breakfast", "Give medication"]
    assert "reason" not in data["tasks"][0]


def test_schedule_detail_invalid_id_is_bad_request(client):
    test_client, _ = client
    resp = test_client.get("/api/schedules/not-a-uuid")
    assert resp.status_code == 400
    assert resp.json()["error"]["details"] == "Invalid schedule ID format"


def test_schedule_detail_missing_is_not_found(client):
    test_client, _ = client
    resp = test_client.get(f"/api/schedules/{uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Resource not found"


def test_start_then_restart_visit_conflicts(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory)

    resp = test_client.post(f"/api/schedules/{schedule_id}/start", json={"latitude": 37.77, "longitude": -122.41})
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    detail = test_client.get(f"/api/schedules/{schedule_id}").json()["data"]
    assert detail["status"] == "in-progress"
    assert detail["start_latitude"] == 37.77
    assert detail["start_longitude"] == -122.41
    assert detail["start_time"] is not None
    assert detail["end_time"] is None

    again = test_client.post(f"/api/schedules/{schedule_id}/start", json={"latitude": 37.77, "longitude": -122.41})
    assert again.status_code == 409
    assert "already in-progress" in again.json()["error"]["details"]


def test_end_visit_completes_in_progress_schedule(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory, status="in-progress")

    resp = test_client.post(f"/api/schedules/{schedule_id}/end", json={"latitude": 40.71, "longitude": -74.0})
    assert resp.status_code == 200

    detail = test_client.get(f"/api/schedules/{schedule_id}").json()["data"]
    assert detail["status"] == "completed"
    assert detail["end_latitude"] == 40.71
    assert detail["end_time"] is not None


def test_end_visit_on_upcoming_schedule_conflicts(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory)
    resp = test_client.post(f"/api/schedules/{schedule_id}/end", json={"latitude": 1.0, "longitude": 2.0})
    assert resp.status_code == 409
    detail = test_client.get(f"/api/schedules/{schedule_id}").json()["data"]
    assert detail["status"] == "upcoming"
    assert detail["end_time"] is None


def test_start_visit_requires_coordinates(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory)
    resp = test_client.post(f"/api/schedules/{schedule_id}/start", json={"latitude": 37.77})
    assert resp.status_code == 400
    assert "longitude" in resp.json()["error"]["details"]


def test_start_visit_malformed_body(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory)
    resp = test_client.post(f"/api/schedules/{schedule_id}/start", json={"latitude": "north"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request body"


def test_set_status_overrides_without_transition_check(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory, status="completed")
    resp = test_client.patch(f"/api/schedules/{schedule_id}/status", json={"status": "upcoming"})
    assert resp.status_code == 200
    detail = test_client.get(f"/api/schedules/{schedule_id}").json()["data"]
    assert detail["status"] == "upcoming"


def test_set_status_rejects_unknown_status(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory)
    resp = test_client.patch(f"/api/schedules/{schedule_id}/status", json={"status": "archived"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request body"
    detail = test_client.get(f"/api/schedules/{schedule_id}").json()["data"]
    assert detail["status"] == "upcoming"


def test_set_status_unknown_schedule(client):
    test_client, _ = client
    resp = test_client.patch(f"/api/schedules/{uuid4()}/status", json={"status": "missed"})
    assert resp.status_code == 404


def test_schedule_tasks_endpoint_returns_empty_list(client):
    test_client, session_factory = client
    schedule_id = _seed_schedule(session_factory)
    resp = test_client.get(f"/api/schedules/{schedule_id}/tasks")
    assert resp.status_code == 200
    assert resp.json().get("data", []) == []


def test_summary_counts_statuses_for_day(client):
    test_client, session_factory = client
    day = datetime(2025, 6, 28, 10, 0, tzinfo=timezone.utc)
    _seed_schedule(session_factory, status="upcoming", shift_time=day)
    _seed_schedule(session_factory, status="upcoming", shift_time=day)
    _seed_schedule(session_factory, status="completed", shift_time=day)
    _seed_schedule(session_factory, status="in-progress", shift_time=day + timedelta(days=1))

    resp = test_client.get("/api/schedules/summary", params={"date": "2025-06-28"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["date"] == "2025-06-28"
    assert data["total"] == 3
    assert data["by_status"]["upcoming"] == 2
    assert data["by_status"]["completed"] == 1
    assert data["by_status"]["in-progress"] == 0


def test_responses_carry_request_id_header(client):
    test_client, _ = client
    resp = test_client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.status_code == 200
    assert resp.headers["X-Request-ID"] == "abc123"
