"""Tests for component wiring in main.py."""

import json
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from fueltrack.config import AppSettings, StorageSettings, TrackerSettings
from fueltrack.main import EXPORT_FILENAME, build_entry_store, report
from fueltrack.models import FuelEntryInput
from fueltrack.store.entry_store import FuelEntryStore
from fueltrack.store.sqlite_store import SqliteEntryStore


def test_local_only_when_storage_disabled(mock_settings: AppSettings) -> None:
    store = build_entry_store(mock_settings)

    assert isinstance(store, FuelEntryStore)
    assert store._remote is None
    assert store.tank_capacity == Decimal("50")


def test_sqlite_remote_when_storage_enabled(mock_settings: AppSettings) -> None:
    mock_settings.storage = StorageSettings(enabled=True, db_path=":memory:")

    store = build_entry_store(mock_settings)

    assert isinstance(store._remote, SqliteEntryStore)


@pytest.mark.asyncio
async def test_report_starts_and_stops_store() -> None:
    store = AsyncMock(spec=FuelEntryStore)

    await report(store)

    store.start.assert_awaited_once()
    store.metrics.assert_called_once()
    store.stop.assert_awaited_once()


@pytest.mark.asyncio
async def test_report_writes_export_file(
    tmp_path: Path, fixed_clock: Callable[[], datetime]
) -> None:
    store = FuelEntryStore(settings=TrackerSettings(), clock=fixed_clock)
    for odometer, day in (("10000", 1), ("10500", 5)):
        await store.create_entry(
            FuelEntryInput(
                date=datetime(2025, 1, day, tzinfo=timezone.utc),
                odometer=Decimal(odometer),
                fuel_amount=Decimal("35"),
                fuel_price=Decimal("1.6"),
            )
        )

    await report(store, export_dir=str(tmp_path))

    document = json.loads((tmp_path / f"{EXPORT_FILENAME}.json").read_text())
    assert [e["odometer"] for e in document["entries"]] == ["10500", "10000"]
    assert document["metrics"]["entry_count"] == 2
    assert store.entries == []


@pytest.mark.asyncio
async def test_report_exports_null_metrics_when_unavailable(
    tmp_path: Path, fixed_clock: Callable[[], datetime]
) -> None:
    store = FuelEntryStore(
        settings=TrackerSettings(tank_capacity=Decimal("0")), clock=fixed_clock
    )

    await report(store, export_dir=str(tmp_path))

    document = json.loads((tmp_path / f"{EXPORT_FILENAME}.json").read_text())
    assert document["entries"] == []
    assert document["metrics"] is None
