"""
Flood monitor: runs refresh cycles over the fusion engine.

A cycle fetches the three feeds concurrently, applies the rain guard,
computes metrics and severity, records a history entry (emitting notable
events) and hands the entry to the persistence sink.

The monitor is the only writer of its history. Cycles are serialized by an
asyncio lock, so a manual refresh issued while a scheduled one is running
waits for it to finish.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from floodwatch.config import settings
from floodwatch.crud.snapshot import snapshot as snapshot_crud
from floodwatch.schemas.feeds import Alert, Polygon, Station
from floodwatch.schemas.snapshot import CycleResult, HistoryEntry, Snapshot
from floodwatch.services.feeds import FeedClient, UpstreamFetchError
from floodwatch.utils.guard import RainGuard
from floodwatch.utils.history import EventThresholds, FloodHistory
from floodwatch.utils.logging_config import get_logger
from floodwatch.utils.metrics import active_station_count, average_rain, compute_metrics, max_rain
from floodwatch.utils.severity import SeverityThresholds, classify

logger = get_logger(__name__)

Sink = Callable[[HistoryEntry, Optional[Dict[str, Any]]], Awaitable[None]]


class PersistenceError(Exception):
    """The snapshot sink failed to store a history entry."""


class DatabaseSink:
    """Appends each recorded history entry to the flood_snapshots table."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def __call__(self, entry: HistoryEntry, raw: Optional[Dict[str, Any]] = None) -> None:
        try:
            async with self.session_factory() as db:
                await snapshot_crud.create_from_entry(db, entry=entry, raw=raw)
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e


class FloodMonitor:
    """
    Owns the live feed readings, the history window and the event log.
    """

    def __init__(
        self,
        feeds: FeedClient,
        sink: Optional[Sink] = None,
        thresholds: Optional[SeverityThresholds] = None,
        event_thresholds: Optional[EventThresholds] = None,
        guard: Optional[RainGuard] = None,
        store_raw: bool = False,
    ):
        self.feeds = feeds
        self.sink = sink
        self.thresholds = thresholds or SeverityThresholds()
        self.history = FloodHistory(event_thresholds or EventThresholds())
        self.guard = guard or RainGuard()
        self.store_raw = store_raw

        self.stations: List[Station] = []
        self.polygons: List[Polygon] = []
        self.flood_alerts: List[Alert] = []
        self.last_snapshot: Optional[Snapshot] = None
        self.last_result: Optional[CycleResult] = None
        self.last_refresh: Optional[datetime] = None

        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, feeds: FeedClient, sink: Optional[Sink] = None) -> "FloodMonitor":
        return cls(
            feeds,
            sink=sink,
            thresholds=SeverityThresholds.from_settings(),
            event_thresholds=EventThresholds.from_settings(),
            guard=RainGuard.from_settings(),
            store_raw=settings.STORE_RAW_PAYLOADS,
        )

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def refresh(self, now: Optional[datetime] = None) -> CycleResult:
        """
        Run one refresh cycle.

        Args:
            now: Cycle time, defaults to the current UTC time

        Returns:
            CycleResult; `skipped` is set when the rain guard holds the cycle back

        Raises:
            UpstreamFetchError: If the rain or risk-zone feed failed. Prior
                state is left untouched.
        """
        async with self._lock:
            result = await self._run_cycle(now or datetime.now(timezone.utc))
            self.last_result = result
            return result

    async def _fetch(self):
        stations, polygons, alerts = await asyncio.gather(
            self.feeds.fetch_stations(),
            self.feeds.fetch_polygons(),
            self.feeds.fetch_flood_alerts(),
            return_exceptions=True,
        )

        for feed, outcome in (("rain", stations), ("polygons", polygons)):
            if isinstance(outcome, BaseException):
                logger.error(f"Refresh aborted, {feed} feed unavailable: {outcome}")
                raise outcome

        if isinstance(alerts, UpstreamFetchError):
            logger.warning(f"Continuing without flood alerts: {alerts}")
            alerts = []
        elif isinstance(alerts, BaseException):
            raise alerts

        return stations, polygons, alerts

    async def _run_cycle(self, now: datetime) -> CycleResult:
        stations, polygons, flood_alerts = await self._fetch()

        self.stations, self.polygons, self.flood_alerts = stations, polygons, flood_alerts
        self.last_refresh = now

        passed, recent = self.guard.check(flood_alerts, now)
        if not passed:
            logger.info(
                f"Cycle skipped by rain guard: {recent} flood alert(s) in the last "
                f"{self.guard.window_hours:g}h, need {self.guard.min_alerts}"
            )
            return CycleResult(skipped=True, reason="rain_guard", recent_flood_count=recent)

        metrics = compute_metrics(stations, polygons, flood_alerts)
        severity = classify(polygons, metrics, self.thresholds)
        entry = HistoryEntry(
            timestamp=now,
            waze_flood_count=metrics.waze_flood_count,
            affected_area_count=metrics.affected_area_count,
            alerts_in_areas_count=metrics.alerts_in_areas_count,
            avg_rain=average_rain(stations, places=2),
            max_rain=max_rain(stations),
            active_stations=active_station_count(stations),
            severity=severity.level,
        )
        events = self.history.record(entry)

        snapshot = Snapshot(
            metrics=metrics,
            severity=severity,
            history_entry=entry,
            notable_events=events,
        )
        self.last_snapshot = snapshot

        logger.info(
            f"Snapshot recorded: severity={severity.label} alerts={metrics.waze_flood_count} "
            f"areas={metrics.affected_area_count} in_areas={metrics.alerts_in_areas_count} "
            f"avg_rain={entry.avg_rain} max_rain={entry.max_rain}"
        )
        for event in events:
            logger.info(f"Notable event [{event.severity}]: {event.message}")

        result = CycleResult(recent_flood_count=recent, snapshot=snapshot)
        if self.sink is None:
            return result

        try:
            await self.sink(entry, self._raw_payload() if self.store_raw else None)
            result.persisted = True
        except PersistenceError as e:
            logger.error(f"Failed to persist snapshot: {e}")
            result.persistence_error = str(e)
        return result

    def _raw_payload(self) -> Dict[str, Any]:
        return {
            "rain": [s.model_dump(mode="json") for s in self.stations],
            "polygons": [p.model_dump(mode="json", by_alias=True) for p in self.polygons],
            "waze": [a.model_dump(mode="json") for a in self.flood_alerts],
        }
