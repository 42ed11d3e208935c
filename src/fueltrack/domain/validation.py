"""Write-time validation for fuel entries.

Enforces the per-entry invariants before an entry enters the collection:
  - odometer > 0
  - fuel_amount > 0
  - fuel_price > 0
  - date not strictly after "now"

"now" is an injected clock so tests can pin it. Naive datetimes are
interpreted as UTC before comparison.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal

from fueltrack.exceptions import (
    FutureDate,
    InvalidFuelAmount,
    InvalidFuelPrice,
    InvalidOdometer,
)
from fueltrack.models import FuelEntryInput, FuelEntryUpdate

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return an aware datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _check_odometer(odometer: Decimal) -> None:
    if odometer <= 0:
        raise InvalidOdometer(f"Odometer must be positive, got {odometer}")


def _check_fuel_amount(fuel_amount: Decimal) -> None:
    if fuel_amount <= 0:
        raise InvalidFuelAmount(f"Fuel amount must be positive, got {fuel_amount}")


def _check_fuel_price(fuel_price: Decimal) -> None:
    if fuel_price <= 0:
        raise InvalidFuelPrice(f"Fuel price must be positive, got {fuel_price}")


def _check_date(date: datetime, clock: Clock) -> None:
    now = as_utc(clock())
    if as_utc(date) > now:
        raise FutureDate(
            f"Date cannot be in the future: {date.isoformat()} is after {now.isoformat()}"
        )


def validate_for_create(candidate: FuelEntryInput, clock: Clock = utc_now) -> None:
    """Validate a complete candidate entry.

    Checks run in a fixed order and the first violation raises.

    Args:
        candidate: Entry fields to validate.
        clock: Source of the current instant for the future-date check.

    Raises:
        InvalidOdometer: If odometer <= 0.
        InvalidFuelAmount: If fuel_amount <= 0.
        InvalidFuelPrice: If fuel_price <= 0.
        FutureDate: If date is strictly after clock().
    """
    _check_odometer(candidate.odometer)
    _check_fuel_amount(candidate.fuel_amount)
    _check_fuel_price(candidate.fuel_price)
    _check_date(candidate.date, clock)


def validate_for_update(partial: FuelEntryUpdate, clock: Clock = utc_now) -> None:
    """Validate only the fields present in a partial update.

    Absent fields are not checked, so a caller may change fuel_amount
    without re-validating the stored odometer.

    Raises:
        Same kinds as validate_for_create, for present fields only.
    """
    if partial.odometer is not None:
        _check_odometer(partial.odometer)
    if partial.fuel_amount is not None:
        _check_fuel_amount(partial.fuel_amount)
    if partial.fuel_price is not None:
        _check_fuel_price(partial.fuel_price)
    if partial.date is not None:
        _check_date(partial.date, clock)
