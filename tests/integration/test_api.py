"""API smoke tests with the unit of work and sync worker swapped for fakes."""
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from task_sync.api.deps import get_sync_worker, get_uow
from task_sync.app import create_app
from task_sync.domain.value_objects.enums import Operation
from task_sync.workers.sync_worker import SyncWorker
from tests.conftest import FakeTransport, FakeUoW, always_error, fake_uow_factory


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def app_with_uow(transport):
    app = create_app()
    uow = FakeUoW()
    worker = SyncWorker(
        fake_uow_factory(uow), transport, interval=60, batch_size=10, max_retries=3,
    )

    async def _override():
        yield uow

    app.dependency_overrides[get_uow] = _override
    app.dependency_overrides[get_sync_worker] = lambda: worker
    return app, uow


@pytest.fixture
def client(app_with_uow):
    app, _ = app_with_uow
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def uow(app_with_uow):
    _, uow = app_with_uow
    return uow


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_readyz_reports_database_failure(client, monkeypatch):
    from task_sync.api.v1.routers import health

    def broken_session():
        raise OSError("database is locked")

    monkeypatch.setattr(health, "AsyncSessionLocal", broken_session)

    resp = client.get("/readyz")

    assert resp.status_code == 503
    assert resp.json()["errors"] == ["database: database is locked"]


def test_create_task_enqueues(client, uow):
    resp = client.post("/api/v1/tasks", json={"title": "Buy milk"})

    assert resp.status_code == 201
    data = resp.json()
    assert data["title"] == "Buy milk"
    assert data["sync_status"] == "pending"
    assert data["server_id"] is None
    [item] = uow.outbox.by_operation(Operation.CREATE)
    assert item.task_id == uuid.UUID(data["id"])


def test_create_task_without_title(client, uow):
    resp = client.post("/api/v1/tasks", json={"description": "no title"})

    assert resp.status_code == 422
    assert uow.outbox._items == {}


def test_update_and_delete(client, uow):
    task_id = client.post("/api/v1/tasks", json={"title": "A"}).json()["id"]

    resp = client.put(f"/api/v1/tasks/{task_id}", json={"title": "B"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "B"

    resp = client.put(f"/api/v1/tasks/{task_id}", json={})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "No update fields provided"

    resp = client.delete(f"/api/v1/tasks/{task_id}")
    assert resp.status_code == 204

    assert client.get(f"/api/v1/tasks/{task_id}").status_code == 404
    assert client.get("/api/v1/tasks").json() == []
    assert [len(uow.outbox.by_operation(op)) for op in Operation] == [1, 1, 1]


def test_missing_task_returns_404(client):
    resp = client.put(f"/api/v1/tasks/{uuid.uuid4()}", json={"title": "B"})
    assert resp.status_code == 404
    assert client.delete(f"/api/v1/tasks/{uuid.uuid4()}").status_code == 404


def test_trigger_sync_and_status(client):
    client.post("/api/v1/tasks", json={"title": "A"})
    client.post("/api/v1/tasks", json={"title": "B"})

    resp = client.post("/api/v1/sync")
    assert resp.status_code == 200
    assert resp.json() == {"success": 1, "synced_items": 2, "failed_items": 0, "errors": []}

    status = client.get("/api/v1/sync/status").json()
    assert status["pending"] == 0
    assert status["synced"] == 2
    assert status["failed"] == 0
    assert status["worker_running"] is False
    assert status["last_result"]["synced_items"] == 2

    tasks = client.get("/api/v1/tasks").json()
    assert {t["sync_status"] for t in tasks} == {"synced"}


def test_failed_items_are_listed(client, transport):
    transport.outcome = always_error("quota exceeded")
    task_id = client.post("/api/v1/tasks", json={"title": "A"}).json()["id"]

    for _ in range(3):
        body = client.post("/api/v1/sync").json()
        assert body["success"] == 0
        assert body["errors"][0]["kind"] == "item_processing"

    resp = client.get("/api/v1/sync/failed")
    assert resp.status_code == 200
    [item] = resp.json()
    assert item["task_id"] == task_id
    assert item["status"] == "failed"
    assert item["retry_count"] == 3
    assert item["error_message"] == "quota exceeded"


def test_sync_when_offline(client, transport):
    transport.reachable = False

    body = client.post("/api/v1/sync").json()

    assert body["success"] == 0
    assert body["synced_items"] == 0
    [error] = body["errors"]
    assert error["kind"] == "connectivity"
    assert error["operation"] == "connectivity"
