"""
Tests for snapshot CRUD operations.
"""

import pytest
from datetime import datetime, timedelta, timezone

from floodwatch.crud.snapshot import snapshot as snapshot_crud
from floodwatch.schemas.snapshot import HistoryEntry, SnapshotRow

T0 = datetime(2026, 3, 15, 18, 0, tzinfo=timezone.utc)


def entry(minute=0, severity=0, alerts=0):
    return HistoryEntry(
        timestamp=T0 + timedelta(minutes=minute),
        waze_flood_count=alerts,
        affected_area_count=2,
        alerts_in_areas_count=1,
        avg_rain=1.25,
        max_rain=8.4,
        active_stations=3,
        severity=severity,
    )


@pytest.mark.asyncio
async def test_create_from_entry(db):
    """Test appending a snapshot row from a history entry."""
    row = await snapshot_crud.create_from_entry(
        db, entry=entry(severity=2, alerts=7), raw={"rain": [], "polygons": [], "waze": []}
    )

    assert row.id is not None
    assert row.waze_count == 7
    assert row.affected_areas == 2
    assert row.alerts_in_areas == 1
    assert row.avg_rain == 1.25
    assert row.max_rain == 8.4
    assert row.active_stations == 3
    assert row.severity == 2
    assert row.raw == {"rain": [], "polygons": [], "waze": []}
    assert row.created_at is not None


@pytest.mark.asyncio
async def test_create_without_raw_payload(db):
    """Test that raw payloads are optional."""
    row = await snapshot_crud.create_from_entry(db, entry=entry())
    fetched = await snapshot_crud.get(db, row.id)
    assert fetched is not None
    assert fetched.raw is None


@pytest.mark.asyncio
async def test_get_history_oldest_first(db):
    """Test that history is ordered by capture time regardless of insert order."""
    for minute in (20, 0, 10):
        await snapshot_crud.create_from_entry(db, entry=entry(minute=minute))

    rows = await snapshot_crud.get_history(db)

    assert len(rows) == 3
    captured = [r.captured_at.replace(tzinfo=None) for r in rows]
    assert captured == sorted(captured)
    assert captured[0] == T0.replace(tzinfo=None)


@pytest.mark.asyncio
async def test_get_history_limit(db):
    """Test that the limit keeps the oldest rows."""
    for minute in range(5):
        await snapshot_crud.create_from_entry(db, entry=entry(minute=minute))

    rows = await snapshot_crud.get_history(db, limit=2)

    assert len(rows) == 2
    assert rows[0].captured_at.replace(tzinfo=None) == T0.replace(tzinfo=None)
    assert rows[1].captured_at.replace(tzinfo=None) == (T0 + timedelta(minutes=1)).replace(tzinfo=None)


@pytest.mark.asyncio
async def test_get_history_empty(db):
    """Test reading history from an empty table."""
    assert await snapshot_crud.get_history(db) == []


@pytest.mark.asyncio
async def test_rows_serialize_as_snapshot_rows(db):
    """Test the response schema reads ORM rows."""
    row = await snapshot_crud.create_from_entry(db, entry=entry(severity=1, alerts=4))
    out = SnapshotRow.model_validate(row)
    assert out.waze_count == 4
    assert out.severity == 1
    assert out.avg_rain == 1.25
