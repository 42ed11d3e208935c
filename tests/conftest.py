"""Shared test fixtures for the fuel tracker."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from fueltrack.config import AppSettings, StorageSettings, TrackerSettings
from fueltrack.models import FuelEntry

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (local-only storage, 50-unit tank)."""
    return AppSettings(
        log_level="DEBUG",
        tracker=TrackerSettings(tank_capacity=Decimal("50")),
        storage=StorageSettings(enabled=False, db_path=":memory:"),
    )


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock pinned to FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_entry() -> Callable[..., FuelEntry]:
    """Factory for FuelEntry values; dates default to one day per 500 odometer units."""

    def _make(
        entry_id: str,
        odometer: str,
        fuel_amount: str = "40",
        fuel_price: str = "1.5",
        date: datetime | None = None,
        station: str | None = None,
    ) -> FuelEntry:
        if date is None:
            date = datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(
                days=int(Decimal(odometer)) // 500
            )
        return FuelEntry(
            id=entry_id,
            date=date,
            odometer=Decimal(odometer),
            fuel_amount=Decimal(fuel_amount),
            fuel_price=Decimal(fuel_price),
            created_at=date,
            updated_at=date,
            station=station,
        )

    return _make
