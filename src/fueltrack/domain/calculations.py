"""Fuel efficiency and cost metrics over a sequence of fill-ups.

Pure Decimal calculations: average_efficiency, per_entry_efficiency,
average_cost_per_distance. No side effects, no state, no logging --
invariant violations raise and the caller decides how to surface them.

Every function first sorts a working copy by ascending odometer (stable,
so ties keep input order) and then checks:
  - odometer strictly increasing between adjacent entries
  - no entry dated before the entry with the next-lower odometer
    (a 9000 reading logged after a 10000 one)
  - every fuel_amount > 0

The first entry in odometer order is the baseline fill-up: its odometer
anchors the distance but its fuel was burned before tracking began, so its
fuel and cost are excluded from consumption totals.
"""

from collections.abc import Sequence
from decimal import Decimal

from fueltrack.domain.validation import as_utc
from fueltrack.exceptions import InvalidFuelAmount, NonMonotonicOdometer
from fueltrack.models import FuelEntry, PerEntryEfficiency


def _sorted_checked(entries: Sequence[FuelEntry]) -> list[FuelEntry]:
    """Return entries sorted by odometer after validating calculator preconditions.

    Raises:
        NonMonotonicOdometer: If any odometer does not exceed its predecessor.
        InvalidFuelAmount: If any fuel_amount is zero or negative.
    """
    ordered = sorted(entries, key=lambda e: e.odometer)

    for prev, curr in zip(ordered, ordered[1:]):
        if curr.odometer <= prev.odometer or as_utc(curr.date) < as_utc(prev.date):
            raise NonMonotonicOdometer(
                previous_id=prev.id,
                previous_odometer=prev.odometer,
                current_id=curr.id,
                current_odometer=curr.odometer,
            )

    for entry in ordered:
        if entry.fuel_amount <= 0:
            raise InvalidFuelAmount(
                f"Fuel amount must be positive, got {entry.fuel_amount} for entry {entry.id}"
            )

    return ordered


def _total_distance(ordered: list[FuelEntry]) -> Decimal:
    return ordered[-1].odometer - ordered[0].odometer


def average_efficiency(entries: Sequence[FuelEntry]) -> Decimal | None:
    """Compute average efficiency (distance per unit of fuel) across all entries.

    efficiency = (last.odometer - first.odometer) / sum(fuel_amount of entries[1:])

    Args:
        entries: Fill-ups in any order.

    Returns:
        Average efficiency as Decimal, or None if fewer than 2 entries.

    Raises:
        NonMonotonicOdometer: If odometer readings do not strictly increase.
        InvalidFuelAmount: If any fuel amount is not positive.
    """
    if len(entries) < 2:
        return None

    ordered = _sorted_checked(entries)
    total_fuel = sum((e.fuel_amount for e in ordered[1:]), Decimal("0"))
    return _total_distance(ordered) / total_fuel


def per_entry_efficiency(entries: Sequence[FuelEntry]) -> list[PerEntryEfficiency]:
    """Compute efficiency for each fill-up relative to the previous one.

    For each entry after the baseline (ascending odometer):
        distance = odometer - previous odometer
        fuel_used = fuel_amount
        efficiency = distance / fuel_used

    Args:
        entries: Fill-ups in any order.

    Returns:
        len(entries) - 1 records ordered by odometer, or [] if fewer than 2 entries.

    Raises:
        NonMonotonicOdometer: If odometer readings do not strictly increase.
        InvalidFuelAmount: If any fuel amount is not positive.
    """
    if len(entries) < 2:
        return []

    ordered = _sorted_checked(entries)

    results: list[PerEntryEfficiency] = []
    for prev, curr in zip(ordered, ordered[1:]):
        distance = curr.odometer - prev.odometer
        results.append(
            PerEntryEfficiency(
                entry_id=curr.id,
                efficiency=distance / curr.fuel_amount,
                distance=distance,
                fuel_used=curr.fuel_amount,
            )
        )
    return results


def average_cost_per_distance(entries: Sequence[FuelEntry]) -> Decimal | None:
    """Compute average fuel cost per unit of distance.

    cost_per_distance = sum(fuel_amount * fuel_price of entries[1:]) / total_distance

    Args:
        entries: Fill-ups in any order.

    Returns:
        Cost per distance unit as Decimal, or None if fewer than 2 entries.

    Raises:
        NonMonotonicOdometer: If odometer readings do not strictly increase.
        InvalidFuelAmount: If any fuel amount is not positive.
    """
    if len(entries) < 2:
        return None

    ordered = _sorted_checked(entries)
    total_cost = sum(
        (e.fuel_amount * e.fuel_price for e in ordered[1:]),
        Decimal("0"),
    )
    return total_cost / _total_distance(ordered)
