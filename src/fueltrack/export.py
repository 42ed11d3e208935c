"""JSON export of fuel entries and their derived metrics.

Decimals are written as strings and datetimes as ISO-8601 so the export
round-trips without float rounding.
"""

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from fueltrack.logging import get_logger
from fueltrack.models import FuelEntry, FuelMetrics

logger = get_logger(__name__)


def to_jsonable(obj: Any) -> Any:
    """Recursively convert Decimal and datetime values to strings for JSON serialization."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(item) for item in obj]
    return obj


def entry_to_dict(entry: FuelEntry) -> dict[str, Any]:
    return to_jsonable(asdict(entry))


def build_export(
    entries: list[FuelEntry],
    metrics: FuelMetrics | None = None,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """Assemble the export document.

    Args:
        entries: Entries to export, in the order they should appear.
        metrics: Derived metrics, or None when they are unavailable.
        exported_at: Timestamp recorded in the document.

    Returns:
        JSON-ready dict with "entries", "metrics" and "exported_at" keys.
    """
    return {
        "exported_at": to_jsonable(exported_at) if exported_at else None,
        "entries": [entry_to_dict(e) for e in entries],
        "metrics": to_jsonable(asdict(metrics)) if metrics is not None else None,
    }


def export_to_json(data: Any, filename: str, directory: str | Path = ".") -> Path:
    """Write data to <directory>/<filename>.json with 2-space indentation.

    Returns:
        Path of the written file.
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"{filename}.json"

    path.write_text(json.dumps(to_jsonable(data), indent=2), encoding="utf-8")

    logger.info("export_written", path=str(path))
    return path
