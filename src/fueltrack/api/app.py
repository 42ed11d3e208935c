"""FastAPI application factory for the fuel tracker JSON API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from fueltrack.api import routes
from fueltrack.store.entry_store import FuelEntryStore


def create_app(entry_store: FuelEntryStore, lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        entry_store: Collection owner that every route reads from and mutates.
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to start and stop the entry store.

    Returns:
        Configured FastAPI application with the API router mounted at /api.
    """
    app = FastAPI(
        title="Fuel Tracker",
        lifespan=lifespan,
    )

    app.state.entry_store = entry_store

    app.include_router(routes.router, prefix="/api")

    return app
