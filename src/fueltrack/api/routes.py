"""JSON API endpoints for fuel entries, derived metrics, sync status and export."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fueltrack.domain.validation import utc_now
from fueltrack.exceptions import (
    EntryNotFoundError,
    FuelTrackError,
    ValidationError,
)
from fueltrack.export import build_export, entry_to_dict, to_jsonable
from fueltrack.logging import log_context
from fueltrack.models import FuelEntryInput, FuelEntryUpdate
from fueltrack.store.entry_store import FuelEntryStore

log = structlog.get_logger(__name__)

router = APIRouter()


class EntryCreateRequest(BaseModel):
    date: datetime
    odometer: Decimal
    fuel_amount: Decimal
    fuel_price: Decimal
    station: str | None = None


class EntryUpdateRequest(BaseModel):
    date: datetime | None = None
    odometer: Decimal | None = None
    fuel_amount: Decimal | None = None
    fuel_price: Decimal | None = None
    station: str | None = None


def _store(request: Request) -> FuelEntryStore:
    return request.app.state.entry_store


def _error(status_code: int, error: FuelTrackError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(error).__name__, "message": str(error)},
    )


@router.get("/entries")
async def list_entries(request: Request) -> JSONResponse:
    """JSON list of entries, newest fill-up first."""
    store = _store(request)
    return JSONResponse(content=[entry_to_dict(e) for e in store.entries])


@router.post("/entries")
async def create_entry(request: Request, body: EntryCreateRequest) -> JSONResponse:
    """Validate and create a fuel entry. 422 with the failure kind on invalid input."""
    store = _store(request)
    try:
        entry = await store.create_entry(FuelEntryInput(**body.model_dump()))
    except ValidationError as e:
        log.info("entry_rejected", error=type(e).__name__, message=str(e))
        return _error(422, e)
    return JSONResponse(status_code=201, content=entry_to_dict(entry))


@router.patch("/entries/{entry_id}")
async def update_entry(
    request: Request, entry_id: str, body: EntryUpdateRequest
) -> JSONResponse:
    """Apply a partial update; only the supplied fields are validated."""
    store = _store(request)
    with log_context(entry_id=entry_id):
        try:
            entry = await store.update_entry(
                entry_id, FuelEntryUpdate(**body.model_dump(exclude_none=True))
            )
        except EntryNotFoundError as e:
            return _error(404, e)
        except ValidationError as e:
            log.info("entry_update_rejected", error=type(e).__name__)
            return _error(422, e)
    return JSONResponse(content=entry_to_dict(entry))


@router.delete("/entries/{entry_id}")
async def delete_entry(request: Request, entry_id: str) -> JSONResponse:
    store = _store(request)
    with log_context(entry_id=entry_id):
        try:
            await store.delete_entry(entry_id)
        except EntryNotFoundError as e:
            return _error(404, e)
    return JSONResponse(content={"deleted": entry_id})


@router.get("/metrics")
async def get_metrics(request: Request) -> JSONResponse:
    """Derived metrics for the current collection.

    Null metric values mean "not enough data". A collection that violates
    calculator invariants returns 409 so the client shows the metric as
    unavailable instead of retrying.
    """
    store = _store(request)
    try:
        metrics = store.metrics()
    except FuelTrackError as e:
        log.warning("metrics_unavailable", error=type(e).__name__, message=str(e))
        return _error(409, e)

    return JSONResponse(
        content=to_jsonable(
            {
                "average_efficiency": metrics.average_efficiency,
                "average_cost_per_distance": metrics.average_cost_per_distance,
                "estimated_range": metrics.estimated_range,
                "estimated_full_tank_cost": metrics.estimated_full_tank_cost,
                "tank_capacity": metrics.tank_capacity,
                "entry_count": metrics.entry_count,
                "per_entry": [
                    {
                        "entry_id": p.entry_id,
                        "efficiency": p.efficiency,
                        "distance": p.distance,
                        "fuel_used": p.fuel_used,
                    }
                    for p in metrics.per_entry
                ],
            }
        )
    )


@router.get("/sync-status")
async def get_sync_status(request: Request) -> JSONResponse:
    store = _store(request)
    return JSONResponse(content=store.sync_state.to_dict())


@router.get("/export")
async def export_entries(request: Request) -> JSONResponse:
    """Full export document; metrics are null when they cannot be computed."""
    store = _store(request)
    try:
        metrics = store.metrics()
    except FuelTrackError as e:
        log.warning("export_without_metrics", error=type(e).__name__)
        metrics = None

    document = build_export(store.entries, metrics, exported_at=utc_now())
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": 'attachment; filename="fuel-entries.json"'},
    )
