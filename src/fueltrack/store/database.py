"""SQLite connection owner for the fuel entry table.

One aiosqlite connection in WAL mode. Decimals and datetimes are stored
as TEXT by SqliteEntryStore, so the table has no numeric affinity to lose
precision through.
"""

from pathlib import Path

import aiosqlite

from fueltrack.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS fuel_entries (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    odometer TEXT NOT NULL,
    fuel_amount TEXT NOT NULL,
    fuel_price TEXT NOT NULL,
    station TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_fuel_entries_date ON fuel_entries(date);
"""


class EntryDatabase:
    """Opens, initializes and closes the fuel entry database.

    connect() may be called again after a failed attempt or after close();
    a connection that is already open is reused.
    """

    def __init__(self, db_path: str = "data/fuel_entries.db") -> None:
        self._db_path = db_path
        self._connection: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        """The open connection.

        Raises:
            RuntimeError: If connect() has not succeeded.
        """
        if self._connection is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self) -> None:
        if self._connection is not None:
            return

        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        connection = await aiosqlite.connect(self._db_path)
        try:
            await connection.execute("PRAGMA journal_mode=WAL")
            await connection.execute("PRAGMA synchronous=NORMAL")
            await connection.executescript(_SCHEMA_SQL)
            await connection.execute(
                "INSERT OR IGNORE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            await connection.commit()
        except aiosqlite.Error:
            await connection.close()
            raise

        self._connection = connection
        logger.info("entry_db_connected", db_path=self._db_path, schema=SCHEMA_VERSION)

    async def close(self) -> None:
        if self._connection is None:
            return
        await self._connection.close()
        self._connection = None
        logger.info("entry_db_closed", db_path=self._db_path)
