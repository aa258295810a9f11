from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from supplyhub.db import get_session
from supplyhub.main import app
from supplyhub.services.requests import ledger_service, period_service
from supplyhub.services.requests.exceptions import RequestConflictError

BODY = {
    "location": "1010",
    "warehouse_code": "KITCHEN",
    "catalog": "FOOD",
    "request_date": "05-06-2024",
    "submitted_by": "chef@hotel.test",
    "cost_center": "CC-42",
    "lines": [
        {"product_code": "MILK", "quantity": 4, "notes": "whole"},
        {"product_code": "EGGS", "quantity": 0},
    ],
}


@pytest.fixture
async def client(session_maker) -> AsyncIterator[AsyncClient]:
    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


async def test_health(client):
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_submit_creates_then_replaces(client):
    created = await client.post("/api/v1/requests", json=BODY)
    replaced = await client.post("/api/v1/requests", json={**BODY, "lines": [{"product_code": "BREAD", "quantity": 2}]})

    assert created.status_code == 201
    assert created.json() == {"header_id": 1, "created": True, "position_count": 1}
    assert replaced.status_code == 200
    assert replaced.json() == {"header_id": 1, "created": False, "position_count": 1}


async def test_get_lines(client):
    await client.post("/api/v1/requests", json=BODY)

    response = await client.get("/api/v1/requests/1010/KITCHEN/05-06-2024")

    assert response.status_code == 200
    lines = response.json()["lines"]
    assert len(lines) == 1
    assert lines[0]["product_code"] == "MILK"
    assert lines[0]["quantity"] == 4
    assert lines[0]["notes"] == "whole"
    assert lines[0]["submitted_by"] == "chef@hotel.test"
    assert lines[0]["exported_downstream"] is False


async def test_get_lines_for_unknown_day_is_empty(client):
    response = await client.get("/api/v1/requests/1010/KITCHEN/06-06-2024")

    assert response.status_code == 200
    assert response.json() == {"lines": []}


async def test_retract(client):
    await client.post("/api/v1/requests", json=BODY)

    deleted = await client.delete("/api/v1/requests/1010/KITCHEN/05-06-2024")
    again = await client.delete("/api/v1/requests/1010/KITCHEN/05-06-2024")

    assert deleted.json()["status"] == "deleted"
    assert again.status_code == 200
    assert again.json()["status"] == "not_found"
    assert (await client.get("/api/v1/requests/1010/KITCHEN/05-06-2024")).json() == {"lines": []}


async def test_activity_uses_iso_dates(client):
    for day in ("05-06-2024", "10-06-2024", "20-06-2024"):
        await client.post("/api/v1/requests", json={**BODY, "request_date": day})

    response = await client.get("/api/v1/activity/1010/KITCHEN", params={"start": "2024-06-01", "end": "2024-06-15"})

    assert response.status_code == 200
    assert response.json() == {
        "days": [
            {"date": "2024-06-05", "has_request": True, "exported_downstream": False},
            {"date": "2024-06-10", "has_request": True, "exported_downstream": False},
        ]
    }


async def test_malformed_request_date_is_rejected(client):
    assert (await client.post("/api/v1/requests", json={**BODY, "request_date": "2024-06-05"})).status_code == 422
    assert (await client.get("/api/v1/requests/1010/KITCHEN/2024-06-05")).status_code == 422


async def test_persistent_conflict_maps_to_409(client, monkeypatch):
    async def always_conflicting(self, **kwargs):
        raise RequestConflictError("lost the race")

    monkeypatch.setattr(ledger_service.RequestLedgerService, "submit", always_conflicting)

    response = await client.post("/api/v1/requests", json=BODY)

    assert response.status_code == 409


async def test_locked_reads_map_to_409(client, monkeypatch):
    async def locked(self, **kwargs):
        raise RequestConflictError("database is locked")

    monkeypatch.setattr(ledger_service.RequestLedgerService, "fetch", locked)
    monkeypatch.setattr(period_service.PeriodIndexService, "list_activity", locked)

    lines = await client.get("/api/v1/requests/1010/KITCHEN/05-06-2024")
    activity = await client.get("/api/v1/activity/1010/KITCHEN", params={"start": "2024-06-01", "end": "2024-06-15"})

    assert lines.status_code == 409
    assert activity.status_code == 409
