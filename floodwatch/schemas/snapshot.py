"""
Snapshot schemas.

This module contains Pydantic schemas for the values derived on every refresh
cycle (metrics, severity, history entries, notable events) and for the
persisted snapshot rows served by the history endpoint.
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

from floodwatch.schemas.base import BaseSchema

EventSeverity = Literal["normal", "attention", "alert", "critical"]


class FloodMetrics(BaseModel):
    """Per-snapshot flood metrics, recomputed from scratch each cycle."""

    model_config = ConfigDict(frozen=True)

    waze_flood_count: int = Field(0, ge=0, description="Flood alerts in the live feed")
    affected_area_count: int = Field(0, ge=0, description="Risk zones with status above normal")
    alerts_in_areas_count: int = Field(0, ge=0, description="Flood alerts inside an affected zone")


class Severity(BaseModel):
    """Overall city severity."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=0, le=3)
    label: str
    color: str


class HistoryEntry(BaseSchema):
    """One record per completed refresh cycle."""

    timestamp: datetime
    waze_flood_count: int
    affected_area_count: int
    alerts_in_areas_count: int
    avg_rain: float = Field(..., description="Mean 1h accumulation across stations (mm, 2 dp)")
    max_rain: float = Field(..., description="Largest 1h accumulation (mm)")
    active_stations: int = Field(..., description="Stations reporting rain in the last hour")
    severity: int = Field(..., ge=0, le=3)


class NotableEvent(BaseSchema):
    """A meaningful transition between two consecutive history entries."""

    timestamp: datetime
    message: str
    severity: EventSeverity


class Snapshot(BaseModel):
    """Output of one completed refresh cycle."""

    metrics: FloodMetrics
    severity: Severity
    history_entry: HistoryEntry
    notable_events: List[NotableEvent] = Field(
        default_factory=list,
        description="Events emitted by this cycle only"
    )


class CycleResult(BaseModel):
    """
    Outcome of a refresh cycle.

    A skipped cycle is a valid outcome, not an error: `skipped` is set along
    with the reason and no snapshot is produced.
    """

    skipped: bool = False
    reason: Optional[str] = None
    recent_flood_count: Optional[int] = None
    snapshot: Optional[Snapshot] = None
    persisted: bool = False
    persistence_error: Optional[str] = None


class SnapshotRow(BaseSchema):
    """Persisted snapshot row as returned by the history endpoint."""

    captured_at: datetime
    waze_count: int
    affected_areas: int
    alerts_in_areas: int
    avg_rain: float
    max_rain: float
    severity: int


class IntervalUpdate(BaseModel):
    """Request body for changing the polling cadence."""

    seconds: float = Field(..., gt=0, le=3600, description="Polling interval in seconds")


class IntervalResponse(BaseModel):
    seconds: float
    running: bool


class MonitorState(BaseModel):
    """Live state of the in-memory monitor."""

    snapshot: Optional[Snapshot] = None
    last_refresh: Optional[datetime] = None
    last_result: Optional[CycleResult] = None
    history_size: int = 0
    event_count: int = 0
    station_count: int = 0
    polygon_count: int = 0
    flood_alert_count: int = 0
    refresh_interval_seconds: Optional[float] = None
