"""SQLite-backed remote entry store with snapshot listeners.

Implements RemoteEntryStore on top of EntryDatabase. Every committed
write is followed by a full snapshot pushed to all subscribers, which is
how the coordinator receives remote-origin state.

CRITICAL: Decimal values are stored as TEXT and datetimes as ISO-8601 TEXT,
both restored exactly on read.
"""

from datetime import datetime
from decimal import Decimal

from fueltrack.logging import get_logger
from fueltrack.models import FuelEntry
from fueltrack.store.database import EntryDatabase
from fueltrack.store.remote import RemoteEntryStore, SnapshotListener, Unsubscribe

logger = get_logger(__name__)


def _row_to_entry(row: tuple) -> FuelEntry:
    return FuelEntry(
        id=row[0],
        date=datetime.fromisoformat(row[1]),
        odometer=Decimal(row[2]),
        fuel_amount=Decimal(row[3]),
        fuel_price=Decimal(row[4]),
        station=row[5],
        created_at=datetime.fromisoformat(row[6]),
        updated_at=datetime.fromisoformat(row[7]),
    )


class SqliteEntryStore(RemoteEntryStore):
    """Async SQLite document store for fuel entries.

    Args:
        database: Connection manager; connected by connect() if needed.
    """

    def __init__(self, database: EntryDatabase) -> None:
        self._database = database
        self._listeners: list[SnapshotListener] = []

    async def connect(self) -> None:
        if not self._database.is_connected:
            await self._database.connect()

    async def close(self) -> None:
        self._listeners.clear()
        await self._database.close()

    # ──────────────────────────────────────────────
    # Write methods
    # ──────────────────────────────────────────────

    async def put_entry(self, entry: FuelEntry) -> None:
        """Insert or replace an entry, then notify subscribers."""
        await self._database.db.execute(
            "INSERT OR REPLACE INTO fuel_entries "
            "(id, date, odometer, fuel_amount, fuel_price, station, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                entry.id,
                entry.date.isoformat(),
                str(entry.odometer),
                str(entry.fuel_amount),
                str(entry.fuel_price),
                entry.station,
                entry.created_at.isoformat(),
                entry.updated_at.isoformat(),
            ),
        )
        await self._database.db.commit()
        logger.debug("entry_stored", entry_id=entry.id)
        await self._notify()

    async def delete_entry(self, entry_id: str) -> None:
        """Delete an entry by id, then notify subscribers."""
        cursor = await self._database.db.execute(
            "DELETE FROM fuel_entries WHERE id = ?",
            (entry_id,),
        )
        await self._database.db.commit()
        logger.debug("entry_deleted", entry_id=entry_id, deleted=cursor.rowcount)
        await self._notify()

    # ──────────────────────────────────────────────
    # Read methods
    # ──────────────────────────────────────────────

    async def fetch_entries(self) -> list[FuelEntry]:
        """Return all stored entries ordered by date descending."""
        cursor = await self._database.db.execute(
            "SELECT id, date, odometer, fuel_amount, fuel_price, station, created_at, updated_at "
            "FROM fuel_entries ORDER BY date DESC"
        )
        rows = await cursor.fetchall()
        return [_row_to_entry(row) for row in rows]

    # ──────────────────────────────────────────────
    # Subscriptions
    # ──────────────────────────────────────────────

    def subscribe(self, listener: SnapshotListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = await self.fetch_entries()
        for listener in list(self._listeners):
            try:
                listener(list(snapshot))
            except Exception:
                logger.exception("snapshot_listener_failed", entries=len(snapshot))
