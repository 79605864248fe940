"""
Cron router.

Entry point for an external scheduler to trigger one recorded snapshot.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from floodwatch.dependencies.auth import verify_cron_secret
from floodwatch.dependencies.monitor import get_monitor
from floodwatch.schemas.snapshot import CycleResult
from floodwatch.services.monitor import FloodMonitor

router = APIRouter(
    prefix="/cron",
    tags=["Cron"],
    responses={
        401: {"description": "Unauthorized"},
        502: {"description": "Rain or risk-zone feed unavailable"},
    },
)


@router.get(
    "/snapshot",
    response_model=CycleResult,
    dependencies=[Depends(verify_cron_secret)],
)
async def capture_snapshot(monitor: FloodMonitor = Depends(get_monitor)):
    """
    Run one refresh cycle and persist its snapshot.

    Requires `Authorization: Bearer <CRON_SECRET>`.

    - Guard not met: 200 with `skipped: true`
    - Rain or risk-zone feed failed: 502
    - Snapshot computed but not stored: 500, body still carries the snapshot
    """
    result = await monitor.refresh()
    if result.persistence_error:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=result.model_dump(mode="json"),
        )
    return result
