"""Shared data models for the fuel tracker.

CRITICAL: All quantities use Decimal. Never use float for odometer readings,
fuel amounts or prices -- metrics must be bit-identical across recomputations.
Units are not modeled: distance, fuel volume and currency only need to be
consistent across the entries of one collection.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class SyncStatus(str, Enum):
    """Synchronization state of the local collection against the remote store."""

    OFFLINE = "offline"
    PENDING = "pending"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


@dataclass(frozen=True)
class FuelEntry:
    """A single fill-up event, owned by FuelEntryStore.

    Immutable: updates replace the whole entry via dataclasses.replace.
    """

    id: str
    date: datetime
    odometer: Decimal
    fuel_amount: Decimal
    fuel_price: Decimal
    created_at: datetime
    updated_at: datetime
    station: str | None = None


@dataclass(frozen=True)
class FuelEntryInput:
    """Candidate entry for creation: every field except identity and timestamps."""

    date: datetime
    odometer: Decimal
    fuel_amount: Decimal
    fuel_price: Decimal
    station: str | None = None


@dataclass(frozen=True)
class FuelEntryUpdate:
    """Partial update. None means the field is absent and left unchanged."""

    date: datetime | None = None
    odometer: Decimal | None = None
    fuel_amount: Decimal | None = None
    fuel_price: Decimal | None = None
    station: str | None = None

    def changes(self) -> dict[str, object]:
        """Return only the fields present in this update."""
        return {
            name: value
            for name, value in (
                ("date", self.date),
                ("odometer", self.odometer),
                ("fuel_amount", self.fuel_amount),
                ("fuel_price", self.fuel_price),
                ("station", self.station),
            )
            if value is not None
        }


@dataclass(frozen=True)
class PerEntryEfficiency:
    """Efficiency of one fill-up relative to the previous one by odometer."""

    entry_id: str
    efficiency: Decimal  # distance / fuel_used
    distance: Decimal  # odometer delta since previous entry
    fuel_used: Decimal  # this entry's fuel_amount


@dataclass
class FuelMetrics:
    """Point-in-time derived metrics for the current collection.

    None means "not enough data" (fewer than two entries), which the
    presentation layer renders as a placeholder rather than an error.
    """

    average_efficiency: Decimal | None
    average_cost_per_distance: Decimal | None
    estimated_range: Decimal | None
    estimated_full_tank_cost: Decimal | None
    tank_capacity: Decimal
    entry_count: int
    per_entry: list[PerEntryEfficiency] = field(default_factory=list)
