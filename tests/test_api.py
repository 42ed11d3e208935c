"""Tests for the JSON API routes.

Uses FastAPI's TestClient against a local-only FuelEntryStore so no
database is involved.
"""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from fueltrack.api.app import create_app
from fueltrack.config import TrackerSettings
from fueltrack.store.entry_store import FuelEntryStore


@pytest.fixture
def entry_store(fixed_clock: Callable[[], datetime]) -> FuelEntryStore:
    return FuelEntryStore(
        settings=TrackerSettings(tank_capacity=Decimal("50")), clock=fixed_clock
    )


@pytest.fixture
def client(entry_store: FuelEntryStore) -> TestClient:
    return TestClient(create_app(entry_store))


def _payload(odometer: str, fuel_amount: str = "40", fuel_price: str = "1.5", day: int = 1) -> dict:
    return {
        "date": f"2025-01-{day:02d}T10:00:00Z",
        "odometer": odometer,
        "fuel_amount": fuel_amount,
        "fuel_price": fuel_price,
    }


def test_create_and_list_entries(client: TestClient) -> None:
    response = client.post("/api/entries", json=_payload("10000"))
    assert response.status_code == 201
    created = response.json()
    assert created["odometer"] == "10000"
    assert created["id"]

    listed = client.get("/api/entries").json()
    assert [e["id"] for e in listed] == [created["id"]]


def test_create_rejects_invalid_odometer(client: TestClient) -> None:
    response = client.post("/api/entries", json=_payload("-100"))

    assert response.status_code == 422
    assert response.json()["error"] == "InvalidOdometer"
    assert client.get("/api/entries").json() == []


def test_create_rejects_future_date(client: TestClient) -> None:
    payload = _payload("10000")
    payload["date"] = "2030-01-01T00:00:00Z"

    response = client.post("/api/entries", json=payload)

    assert response.status_code == 422
    assert response.json()["error"] == "FutureDate"


def test_metrics_without_data_are_null(client: TestClient) -> None:
    body = client.get("/api/metrics").json()

    assert body["average_efficiency"] is None
    assert body["estimated_range"] is None
    assert body["per_entry"] == []
    assert body["entry_count"] == 0
    assert body["tank_capacity"] == "50"


def test_metrics_after_entries(client: TestClient) -> None:
    client.post("/api/entries", json=_payload("10000", day=1))
    client.post("/api/entries", json=_payload("10500", "35", "1.6", day=5))
    client.post("/api/entries", json=_payload("11000", "38", "1.55", day=10))

    body = client.get("/api/metrics").json()

    assert Decimal(body["average_efficiency"]).quantize(Decimal("0.01")) == Decimal("13.70")
    assert Decimal(body["average_cost_per_distance"]) == Decimal("0.1149")
    assert [Decimal(p["distance"]) for p in body["per_entry"]] == [Decimal("500")] * 2


def test_metrics_conflict_on_duplicate_odometer(client: TestClient) -> None:
    client.post("/api/entries", json=_payload("10000", day=1))
    client.post("/api/entries", json=_payload("10000", day=2))

    response = client.get("/api/metrics")

    assert response.status_code == 409
    assert response.json()["error"] == "NonMonotonicOdometer"


def test_partial_update(client: TestClient) -> None:
    created = client.post("/api/entries", json=_payload("10000")).json()

    response = client.patch(f"/api/entries/{created['id']}", json={"fuel_amount": "42"})

    assert response.status_code == 200
    assert response.json()["fuel_amount"] == "42"
    assert response.json()["odometer"] == "10000"


def test_update_invalid_and_unknown(client: TestClient) -> None:
    created = client.post("/api/entries", json=_payload("10000")).json()

    invalid = client.patch(f"/api/entries/{created['id']}", json={"fuel_price": "0"})
    missing = client.patch("/api/entries/missing", json={"fuel_price": "2"})

    assert invalid.status_code == 422
    assert invalid.json()["error"] == "InvalidFuelPrice"
    assert missing.status_code == 404


def test_delete_entry(client: TestClient) -> None:
    created = client.post("/api/entries", json=_payload("10000")).json()

    assert client.delete(f"/api/entries/{created['id']}").status_code == 200
    assert client.get("/api/entries").json() == []
    assert client.delete(f"/api/entries/{created['id']}").status_code == 404


def test_sync_status_local_only(client: TestClient) -> None:
    assert client.get("/api/sync-status").json()["status"] == "synced"


def test_export_includes_entries_and_metrics(client: TestClient) -> None:
    client.post("/api/entries", json=_payload("10000", day=1))
    client.post("/api/entries", json=_payload("10500", "35", day=5))

    response = client.get("/api/export")

    assert response.status_code == 200
    assert "fuel-entries.json" in response.headers["content-disposition"]
    body = response.json()
    assert len(body["entries"]) == 2
    assert body["metrics"]["entry_count"] == 2
