"""Entry point for the fuel tracker.

Wires settings, logging, the remote store and the entry store together,
then either serves the JSON API via uvicorn or, with the API disabled,
logs a one-shot metrics report for the stored entries and optionally
writes the JSON export file.

Component wiring order (in build_entry_store):
1. AppSettings (configuration)
2. Logging setup
3. EntryDatabase + SqliteEntryStore (skipped when storage is disabled)
4. SyncState (shared sync flags)
5. FuelEntryStore (collection owner and metrics)
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from fueltrack.config import AppSettings
from fueltrack.domain.validation import utc_now
from fueltrack.exceptions import FuelTrackError
from fueltrack.export import build_export, export_to_json
from fueltrack.logging import get_logger, setup_logging
from fueltrack.models import FuelMetrics
from fueltrack.store.database import EntryDatabase
from fueltrack.store.entry_store import FuelEntryStore
from fueltrack.store.remote import RemoteEntryStore
from fueltrack.store.sqlite_store import SqliteEntryStore
from fueltrack.store.sync import SyncState

EXPORT_FILENAME = "fuel-entries"


def build_entry_store(settings: AppSettings) -> FuelEntryStore:
    """Build the entry store and its remote from settings.

    Does NOT call start() -- that happens in the lifespan (API mode)
    or report() (API disabled).
    """
    remote: RemoteEntryStore | None = None
    if settings.storage.enabled:
        remote = SqliteEntryStore(EntryDatabase(settings.storage.db_path))

    return FuelEntryStore(
        settings=settings.tracker,
        remote=remote,
        sync_state=SyncState(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the entry store with the server and stop it on shutdown."""
    logger = get_logger("fueltrack.main")
    entry_store: FuelEntryStore = app.state.entry_store

    await entry_store.start()
    logger.info("lifespan_started", entries=len(entry_store.entries))

    yield

    await entry_store.stop()
    logger.info("fueltrack_stopped")


async def report(entry_store: FuelEntryStore, export_dir: str | None = None) -> None:
    """Load entries once, log the derived metrics and optionally write an export.

    Args:
        entry_store: Store to report on; started and stopped here.
        export_dir: When set, fuel-entries.json is written there with the
            entries and the metrics (null when they cannot be computed).
    """
    logger = get_logger("fueltrack.main")

    await entry_store.start()
    try:
        metrics: FuelMetrics | None = None
        try:
            metrics = entry_store.metrics()
        except FuelTrackError as e:
            logger.error("metrics_unavailable", error=type(e).__name__, message=str(e))
        else:
            logger.info(
                "fuel_metrics",
                entries=metrics.entry_count,
                average_efficiency=str(metrics.average_efficiency),
                average_cost_per_distance=str(metrics.average_cost_per_distance),
                estimated_range=str(metrics.estimated_range),
                estimated_full_tank_cost=str(metrics.estimated_full_tank_cost),
            )

        if export_dir is not None:
            document = build_export(entry_store.entries, metrics, exported_at=utc_now())
            export_to_json(document, EXPORT_FILENAME, export_dir)
    finally:
        await entry_store.stop()


async def run() -> None:
    """Run the fuel tracker.

    When the API is enabled (API_ENABLED=true, the default) the entry store
    lives inside the uvicorn server's lifespan. Otherwise a single metrics
    report is logged (and written to EXPORT_DIR when set) and the process
    exits.
    """
    settings = AppSettings()

    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("fueltrack.main")

    entry_store = build_entry_store(settings)

    if settings.api.enabled:
        from fueltrack.api.app import create_app

        app = create_app(entry_store, lifespan=lifespan)
        app.state.settings = settings

        logger.info(
            "starting_api",
            host=settings.api.host,
            port=settings.api.port,
            storage=settings.storage.enabled,
        )

        config = uvicorn.Config(
            app,
            host=settings.api.host,
            port=settings.api.port,
            log_level="warning",
        )
        server = uvicorn.Server(config)
        await server.serve()
    else:
        await report(entry_store, settings.export_dir)


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
