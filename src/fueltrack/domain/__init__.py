"""Pure derived-metrics core.

Provides write-time validation, efficiency and cost calculations over a
sequence of fill-ups, and range/cost predictions built on those metrics.
Nothing here performs I/O or holds state.
"""

from fueltrack.domain.calculations import (
    average_cost_per_distance,
    average_efficiency,
    per_entry_efficiency,
)
from fueltrack.domain.predictions import estimate_full_tank_cost, estimate_range
from fueltrack.domain.validation import (
    Clock,
    utc_now,
    validate_for_create,
    validate_for_update,
)

__all__ = [
    "Clock",
    "average_cost_per_distance",
    "average_efficiency",
    "estimate_full_tank_cost",
    "estimate_range",
    "per_entry_efficiency",
    "utc_now",
    "validate_for_create",
    "validate_for_update",
]
