"""Tests for JSON export of entries and metrics."""

import json
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from fueltrack.export import build_export, export_to_json, to_jsonable
from fueltrack.models import FuelEntry, FuelMetrics, PerEntryEfficiency


def test_to_jsonable_converts_nested_values() -> None:
    stamp = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
    value = {"a": [Decimal("1.50"), {"b": stamp}], "c": None, "d": 3}

    assert to_jsonable(value) == {
        "a": ["1.50", {"b": "2025-01-01T10:00:00+00:00"}],
        "c": None,
        "d": 3,
    }


def test_build_export_with_metrics(make_entry: Callable[..., FuelEntry]) -> None:
    entries = [make_entry("2", "10500", fuel_amount="35"), make_entry("1", "10000")]
    metrics = FuelMetrics(
        average_efficiency=Decimal("14.5"),
        average_cost_per_distance=Decimal("0.112"),
        estimated_range=Decimal("725"),
        estimated_full_tank_cost=Decimal("81.2"),
        tank_capacity=Decimal("50"),
        entry_count=2,
        per_entry=[
            PerEntryEfficiency(
                entry_id="2",
                efficiency=Decimal("14.5"),
                distance=Decimal("500"),
                fuel_used=Decimal("35"),
            )
        ],
    )

    document = build_export(
        entries, metrics, exported_at=datetime(2025, 6, 1, tzinfo=timezone.utc)
    )

    assert document["exported_at"] == "2025-06-01T00:00:00+00:00"
    assert [e["id"] for e in document["entries"]] == ["2", "1"]
    assert document["entries"][0]["odometer"] == "10500"
    assert document["metrics"]["average_efficiency"] == "14.5"
    assert document["metrics"]["per_entry"][0]["entry_id"] == "2"
    assert document["metrics"]["entry_count"] == 2


def test_build_export_without_metrics(make_entry: Callable[..., FuelEntry]) -> None:
    document = build_export([make_entry("1", "10000")])
    assert document["metrics"] is None
    assert document["exported_at"] is None


def test_export_to_json_writes_file(
    tmp_path: Path, make_entry: Callable[..., FuelEntry]
) -> None:
    document = build_export([make_entry("1", "10000", station="Shell")])

    path = export_to_json(document, "fuel-backup", tmp_path / "exports")

    assert path == tmp_path / "exports" / "fuel-backup.json"
    text = path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "exported_at"')
    loaded = json.loads(text)
    assert loaded["entries"][0]["station"] == "Shell"
    assert loaded["entries"][0]["fuel_price"] == "1.5"
