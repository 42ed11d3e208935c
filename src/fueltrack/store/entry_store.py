"""Fuel entry collection owner with optimistic local-first synchronization.

FuelEntryStore is the only component that mutates the entry collection.
It validates input before every mutation, applies the mutation locally
before any remote round trip, and recomputes derived metrics from the
current collection on read.

Mutation flow:
1. Validate input (validate_for_create / validate_for_update)
2. Apply to the local collection and bump the version counter
3. Push to the remote store; on failure keep the local state and mark
   the id pending so flush_pending() can retry it later
4. Remote snapshots are merged: locally pending writes win, and
   tombstoned (locally deleted) ids are dropped until a snapshot
   without them confirms the delete
5. Unreachable remotes (any OSError, ConnectionError included) mark the
   sync state offline; other remote failures record an error. The next
   successful round trip clears both

Derived metrics are memoized per version; any mutation or snapshot merge
invalidates them.
"""

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import replace
from decimal import Decimal
from typing import TypeVar
from uuid import uuid4

from fueltrack.config import TrackerSettings
from fueltrack.domain.calculations import (
    average_cost_per_distance,
    average_efficiency,
    per_entry_efficiency,
)
from fueltrack.domain.predictions import estimate_full_tank_cost, estimate_range
from fueltrack.domain.validation import (
    Clock,
    as_utc,
    utc_now,
    validate_for_create,
    validate_for_update,
)
from fueltrack.exceptions import EntryNotFoundError
from fueltrack.logging import get_logger
from fueltrack.models import (
    FuelEntry,
    FuelEntryInput,
    FuelEntryUpdate,
    FuelMetrics,
    PerEntryEfficiency,
)
from fueltrack.store.remote import RemoteEntryStore, Unsubscribe
from fueltrack.store.sync import SyncState

logger = get_logger(__name__)

T = TypeVar("T")


class FuelEntryStore:
    """Owns the fuel entry collection and exposes derived metrics.

    Args:
        settings: Tracker settings (tank capacity for predictions).
        remote: Remote store to synchronize with, or None for local-only mode.
        sync_state: Shared sync flags; a fresh SyncState if omitted.
        clock: Source of "now" for validation and bookkeeping timestamps.
    """

    def __init__(
        self,
        settings: TrackerSettings | None = None,
        remote: RemoteEntryStore | None = None,
        sync_state: SyncState | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._settings = settings or TrackerSettings()
        self._remote = remote
        self._sync = sync_state or SyncState()
        self._clock = clock
        self._entries: dict[str, FuelEntry] = {}
        self._pending_writes: set[str] = set()
        self._pending_deletes: set[str] = set()
        self._tombstones: set[str] = set()
        self._version = 0
        self._memo: dict[str, object] = {}
        self._memo_version = -1
        self._unsubscribe: Unsubscribe | None = None
        self._running = False
        self._lock = asyncio.Lock()

    # ──────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────

    async def start(self) -> None:
        """Connect to the remote store, load its snapshot and subscribe to updates.

        A remote that cannot be reached leaves the store running local-only;
        flush_pending() tries to attach again.
        """
        self._running = True
        if self._remote is None:
            logger.info("entry_store_started", mode="local")
            return

        if await self._attach(self._remote):
            logger.info("entry_store_started", mode="remote", entries=len(self._entries))

    async def stop(self) -> None:
        """Unsubscribe from the remote store, close it and clear local state."""
        self._running = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._remote is not None:
            await self._remote.close()
        self._entries.clear()
        self._bump()
        logger.info("entry_store_stopped")

    # ──────────────────────────────────────────────
    # Reads
    # ──────────────────────────────────────────────

    @property
    def version(self) -> int:
        """Counter incremented on every change to the collection."""
        return self._version

    @property
    def sync_state(self) -> SyncState:
        return self._sync

    @property
    def tank_capacity(self) -> Decimal:
        return self._settings.tank_capacity

    @property
    def entries(self) -> list[FuelEntry]:
        """Current entries, newest fill-up date first."""
        return sorted(
            self._entries.values(),
            key=lambda e: (as_utc(e.date), as_utc(e.created_at)),
            reverse=True,
        )

    def get_entry(self, entry_id: str) -> FuelEntry:
        """Return the entry with the given id.

        Raises:
            EntryNotFoundError: If no such entry exists.
        """
        try:
            return self._entries[entry_id]
        except KeyError:
            raise EntryNotFoundError(f"Fuel entry {entry_id} not found") from None

    # ──────────────────────────────────────────────
    # Mutations
    # ──────────────────────────────────────────────

    async def create_entry(self, data: FuelEntryInput) -> FuelEntry:
        """Validate and add a new entry, then sync it to the remote store.

        Raises:
            ValidationError: If the candidate fails validate_for_create.
        """
        validate_for_create(data, self._clock)

        now = as_utc(self._clock())
        entry = FuelEntry(
            id=uuid4().hex,
            date=as_utc(data.date),
            odometer=data.odometer,
            fuel_amount=data.fuel_amount,
            fuel_price=data.fuel_price,
            station=data.station,
            created_at=now,
            updated_at=now,
        )

        async with self._lock:
            self._entries[entry.id] = entry
            self._pending_writes.add(entry.id)
            self._bump()
            logger.info(
                "entry_created",
                entry_id=entry.id,
                odometer=str(entry.odometer),
                fuel_amount=str(entry.fuel_amount),
                fuel_price=str(entry.fuel_price),
            )
            await self._push(entry)

        return entry

    async def update_entry(self, entry_id: str, changes: FuelEntryUpdate) -> FuelEntry:
        """Apply a partial update to an existing entry.

        Only the fields present in changes are validated and replaced.

        Raises:
            EntryNotFoundError: If entry_id is unknown.
            ValidationError: If a present field fails validation.
        """
        validate_for_update(changes, self._clock)

        async with self._lock:
            existing = self.get_entry(entry_id)
            fields = changes.changes()
            if "date" in fields:
                fields["date"] = as_utc(changes.date)  # type: ignore[arg-type]
            updated = replace(existing, **fields, updated_at=as_utc(self._clock()))

            self._entries[entry_id] = updated
            self._pending_writes.add(entry_id)
            self._bump()
            logger.info("entry_updated", entry_id=entry_id, fields=sorted(fields))
            await self._push(updated)

        return updated

    async def delete_entry(self, entry_id: str) -> None:
        """Hard-delete an entry locally and from the remote store.

        The id is tombstoned so a later remote snapshot that still contains
        it cannot bring it back.

        Raises:
            EntryNotFoundError: If entry_id is unknown.
        """
        async with self._lock:
            self.get_entry(entry_id)
            del self._entries[entry_id]
            self._pending_writes.discard(entry_id)
            self._tombstones.add(entry_id)
            self._pending_deletes.add(entry_id)
            self._bump()
            logger.info("entry_deleted", entry_id=entry_id)
            await self._remove(entry_id)

    def apply_snapshot(self, snapshot: Sequence[FuelEntry]) -> None:
        """Merge a remote snapshot into the local collection.

        Tombstoned ids are dropped; entries with unconfirmed local writes
        keep their local version. A tombstone is released once its delete
        has been confirmed and a snapshot no longer contains the id.
        """
        remote_ids = {e.id for e in snapshot}
        merged = {e.id: e for e in snapshot if e.id not in self._tombstones}
        for entry_id in self._pending_writes:
            local = self._entries.get(entry_id)
            if local is not None:
                merged[entry_id] = local

        dropped = len(remote_ids & self._tombstones)
        released = self._tombstones - remote_ids - self._pending_deletes
        self._tombstones -= released
        self._entries = merged
        self._bump()
        logger.debug(
            "snapshot_applied",
            remote_entries=len(snapshot),
            local_entries=len(merged),
            tombstoned=dropped,
            tombstones_released=len(released),
        )

    async def flush_pending(self) -> int:
        """Retry remote writes and deletes that previously failed.

        A store whose start() could not reach the remote attaches first;
        nothing is retried while the remote is still unreachable.

        Returns:
            Number of pending operations still unconfirmed afterwards.
        """
        if self._remote is None:
            return 0

        async with self._lock:
            attached = self._unsubscribe is not None
            if not attached and self._running:
                attached = await self._attach(self._remote)
            if attached:
                for entry_id in sorted(self._pending_writes):
                    entry = self._entries.get(entry_id)
                    if entry is not None:
                        await self._push(entry)
                for entry_id in sorted(self._pending_deletes):
                    await self._remove(entry_id)

        remaining = len(self._pending_writes) + len(self._pending_deletes)
        logger.info("pending_flushed", remaining=remaining, attached=attached)
        return remaining

    # ──────────────────────────────────────────────
    # Derived metrics
    # ──────────────────────────────────────────────

    def average_efficiency(self) -> Decimal | None:
        return self._memoized(
            "average_efficiency",
            lambda: average_efficiency(list(self._entries.values())),
        )

    def per_entry_efficiency(self) -> list[PerEntryEfficiency]:
        return list(
            self._memoized(
                "per_entry_efficiency",
                lambda: per_entry_efficiency(list(self._entries.values())),
            )
        )

    def average_cost_per_distance(self) -> Decimal | None:
        return self._memoized(
            "average_cost_per_distance",
            lambda: average_cost_per_distance(list(self._entries.values())),
        )

    def estimated_range(self) -> Decimal | None:
        return estimate_range(self.average_efficiency(), self.tank_capacity)

    def estimated_full_tank_cost(self) -> Decimal | None:
        return estimate_full_tank_cost(
            self.average_cost_per_distance(),
            self.average_efficiency(),
            self.tank_capacity,
        )

    def metrics(self) -> FuelMetrics:
        """Compute every derived metric for the current collection.

        Raises:
            NonMonotonicOdometer: If stored odometers do not strictly increase.
            InvalidFuelAmount: If a stored fuel amount is not positive.
            InvalidTankCapacity: If the configured tank capacity is not positive.
        """
        return FuelMetrics(
            average_efficiency=self.average_efficiency(),
            average_cost_per_distance=self.average_cost_per_distance(),
            estimated_range=self.estimated_range(),
            estimated_full_tank_cost=self.estimated_full_tank_cost(),
            tank_capacity=self.tank_capacity,
            entry_count=len(self._entries),
            per_entry=self.per_entry_efficiency(),
        )

    # ──────────────────────────────────────────────
    # Internals
    # ──────────────────────────────────────────────

    def _bump(self) -> None:
        self._version += 1

    def _memoized(self, key: str, compute: Callable[[], T]) -> T:
        if self._memo_version != self._version:
            self._memo.clear()
            self._memo_version = self._version
        if key not in self._memo:
            self._memo[key] = compute()
        return self._memo[key]  # type: ignore[return-value]

    async def _attach(self, remote: RemoteEntryStore) -> bool:
        """Connect, load the remote snapshot and subscribe. False if the remote failed."""
        self._sync.set_syncing(True)
        try:
            await remote.connect()
            snapshot = await remote.fetch_entries()
        except Exception as e:
            logger.warning("remote_store_unavailable", error=str(e))
            self._record_failure(e)
            return False
        finally:
            self._sync.set_syncing(False)

        self._record_success()
        self.apply_snapshot(snapshot)
        self._unsubscribe = remote.subscribe(self.apply_snapshot)
        return True

    def _record_failure(self, error: Exception) -> None:
        # ConnectionError and socket/file errors mean the remote is unreachable
        if isinstance(error, OSError):
            self._sync.set_online(False)
        else:
            self._sync.set_error(str(error))

    def _record_success(self) -> None:
        self._sync.set_online(True)
        self._sync.set_error(None)

    async def _push(self, entry: FuelEntry) -> None:
        if self._remote is None:
            self._pending_writes.discard(entry.id)
            return

        self._sync.set_syncing(True)
        try:
            await self._remote.put_entry(entry)
        except Exception as e:
            logger.warning("remote_write_failed", entry_id=entry.id, error=str(e))
            self._record_failure(e)
        else:
            self._pending_writes.discard(entry.id)
            self._record_success()
        finally:
            self._sync.set_syncing(False)
            self._refresh_pending()

    async def _remove(self, entry_id: str) -> None:
        if self._remote is None:
            self._pending_deletes.discard(entry_id)
            return

        self._sync.set_syncing(True)
        try:
            await self._remote.delete_entry(entry_id)
        except Exception as e:
            logger.warning("remote_delete_failed", entry_id=entry_id, error=str(e))
            self._record_failure(e)
        else:
            self._pending_deletes.discard(entry_id)
            self._record_success()
        finally:
            self._sync.set_syncing(False)
            self._refresh_pending()

    def _refresh_pending(self) -> None:
        self._sync.set_pending(bool(self._pending_writes or self._pending_deletes))
