"""Entry collection ownership and remote synchronization.

Provides the FuelEntryStore coordinator, the RemoteEntryStore interface
with its aiosqlite implementation, and sync status tracking.
"""

from fueltrack.store.database import EntryDatabase
from fueltrack.store.entry_store import FuelEntryStore
from fueltrack.store.remote import RemoteEntryStore
from fueltrack.store.sqlite_store import SqliteEntryStore
from fueltrack.store.sync import SyncState

__all__ = [
    "EntryDatabase",
    "FuelEntryStore",
    "RemoteEntryStore",
    "SqliteEntryStore",
    "SyncState",
]
