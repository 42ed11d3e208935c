"""Forward-looking range and cost estimates from aggregate metrics.

Consumes calculator output only; never touches raw entries.
None inputs propagate as None ("not enough data yet").
"""

from decimal import Decimal

from fueltrack.exceptions import InvalidTankCapacity


def estimate_range(
    average_efficiency: Decimal | None,
    tank_capacity: Decimal,
) -> Decimal | None:
    """Estimate the distance a full tank covers.

    range = average_efficiency * tank_capacity

    Tank capacity is validated before the efficiency is inspected, so a bad
    configuration fails even while there is not enough data.

    Args:
        average_efficiency: Distance per fuel unit, or None.
        tank_capacity: Tank size in the entries' fuel unit.

    Returns:
        Estimated range, or None if efficiency is None.

    Raises:
        InvalidTankCapacity: If tank_capacity <= 0.
    """
    if tank_capacity <= 0:
        raise InvalidTankCapacity(f"Tank capacity must be positive, got {tank_capacity}")

    if average_efficiency is None:
        return None

    return average_efficiency * tank_capacity


def estimate_full_tank_cost(
    average_cost_per_distance: Decimal | None,
    average_efficiency: Decimal | None,
    tank_capacity: Decimal,
) -> Decimal | None:
    """Estimate the cost of driving one full tank's range.

    cost = estimate_range(average_efficiency, tank_capacity) * average_cost_per_distance

    Returns:
        Estimated cost, or None if either metric is None.

    Raises:
        InvalidTankCapacity: If tank_capacity <= 0.
    """
    range_ = estimate_range(average_efficiency, tank_capacity)

    if range_ is None or average_cost_per_distance is None:
        return None

    return range_ * average_cost_per_distance
