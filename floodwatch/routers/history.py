"""
Persisted history router.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from floodwatch.config import settings
from floodwatch.crud.snapshot import snapshot as snapshot_crud
from floodwatch.database import get_db
from floodwatch.schemas.snapshot import SnapshotRow

router = APIRouter(
    prefix="/history",
    tags=["History"],
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.get("", response_model=List[SnapshotRow])
@limiter.limit("100/minute")
async def get_history(
    request: Request,
    limit: int = Query(100, ge=1, le=10000, description="Maximum rows to return"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get persisted snapshots, ordered by capture time (oldest first).

    Rate limit: 100 requests per minute
    """
    return await snapshot_crud.get_history(db, limit=limit)
