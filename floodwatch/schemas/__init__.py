# Pydantic schemas package

from floodwatch.schemas.base import BaseSchema, FeedSchema
from floodwatch.schemas.feeds import (
    Station, StationData, Polygon, Alert, AlertLocation, FLOOD_SUBTYPE
)
from floodwatch.schemas.snapshot import (
    FloodMetrics, Severity, HistoryEntry, NotableEvent,
    Snapshot, CycleResult, SnapshotRow, MonitorState
)
from floodwatch.schemas.rain import CityTrend, RainBucket, StationRain, RainSummary

__all__ = [
    # Base schemas
    "BaseSchema", "FeedSchema",

    # Feed schemas
    "Station", "StationData", "Polygon", "Alert", "AlertLocation", "FLOOD_SUBTYPE",

    # Snapshot schemas
    "FloodMetrics", "Severity", "HistoryEntry", "NotableEvent",
    "Snapshot", "CycleResult", "SnapshotRow", "MonitorState",

    # Rain summary schemas
    "CityTrend", "RainBucket", "StationRain", "RainSummary",
]
