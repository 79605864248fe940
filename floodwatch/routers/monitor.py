"""
Live monitor router.

Exposes the in-memory state of the flood monitor: the latest snapshot,
the rolling history window, notable events, the rain summary, and the
polling cadence.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from floodwatch.config import settings
from floodwatch.dependencies.monitor import get_monitor, get_scheduler
from floodwatch.schemas.rain import RainSummary
from floodwatch.schemas.snapshot import (
    CycleResult,
    HistoryEntry,
    IntervalResponse,
    IntervalUpdate,
    MonitorState,
    NotableEvent,
)
from floodwatch.services.monitor import FloodMonitor
from floodwatch.services.scheduler import RefreshScheduler
from floodwatch.utils import rain
from floodwatch.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/monitor",
    tags=["Live Monitor"],
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.get("/state", response_model=MonitorState)
@limiter.limit("120/minute")
async def get_state(
    request: Request,
    monitor: FloodMonitor = Depends(get_monitor),
    scheduler: RefreshScheduler = Depends(get_scheduler),
):
    """
    Latest snapshot and live reading counts.

    Rate limit: 120 requests per minute
    """
    return MonitorState(
        snapshot=monitor.last_snapshot,
        last_refresh=monitor.last_refresh,
        last_result=monitor.last_result,
        history_size=len(monitor.history),
        event_count=len(monitor.history.events),
        station_count=len(monitor.stations),
        polygon_count=len(monitor.polygons),
        flood_alert_count=len(monitor.flood_alerts),
        refresh_interval_seconds=scheduler.interval,
    )


@router.post("/refresh", response_model=CycleResult)
@limiter.limit("10/minute")
async def refresh(
    request: Request,
    monitor: FloodMonitor = Depends(get_monitor),
):
    """
    Run a refresh cycle now.

    Waits for any in-flight scheduled cycle to finish first. Fails with 502
    when the rain or risk-zone feed is unavailable.

    Rate limit: 10 requests per minute
    """
    return await monitor.refresh()


@router.get("/history", response_model=List[HistoryEntry])
@limiter.limit("120/minute")
async def get_window(
    request: Request,
    monitor: FloodMonitor = Depends(get_monitor),
):
    """
    In-memory history window, oldest first.

    Rate limit: 120 requests per minute
    """
    return monitor.history.entries


@router.get("/events", response_model=List[NotableEvent])
@limiter.limit("120/minute")
async def get_events(
    request: Request,
    limit: int = Query(10, ge=1, le=50),
    monitor: FloodMonitor = Depends(get_monitor),
):
    """
    Notable events, most recent first.

    Rate limit: 120 requests per minute
    """
    return monitor.history.recent_events(limit)


@router.get("/summary", response_model=RainSummary)
@limiter.limit("120/minute")
async def get_summary(
    request: Request,
    monitor: FloodMonitor = Depends(get_monitor),
):
    """
    Rain summary: city trend, intensity distribution and wettest stations.

    Rate limit: 120 requests per minute
    """
    return rain.summarize(monitor.history.entries, monitor.stations)


@router.get("/interval", response_model=IntervalResponse)
async def get_interval(scheduler: RefreshScheduler = Depends(get_scheduler)):
    return IntervalResponse(seconds=scheduler.interval, running=scheduler.running)


@router.put("/interval", response_model=IntervalResponse)
@limiter.limit("10/minute")
async def set_interval(
    request: Request,
    body: IntervalUpdate,
    scheduler: RefreshScheduler = Depends(get_scheduler),
):
    """
    Change the polling cadence.

    The periodic trigger is reinstalled; accumulated history is kept.

    Rate limit: 10 requests per minute
    """
    await scheduler.set_interval(body.seconds)
    logger.info(f"Refresh interval set to {body.seconds:g}s")
    return IntervalResponse(seconds=scheduler.interval, running=scheduler.running)
