"""
Flood snapshot CRUD operations.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from floodwatch.crud.base import CRUDBase
from floodwatch.models.snapshot import FloodSnapshot
from floodwatch.schemas.snapshot import HistoryEntry


class CRUDSnapshot(CRUDBase[FloodSnapshot]):
    """
    CRUD operations for FloodSnapshot model.
    """

    async def create_from_entry(
        self,
        db: AsyncSession,
        *,
        entry: HistoryEntry,
        raw: Optional[Dict[str, Any]] = None
    ) -> FloodSnapshot:
        """
        Append a snapshot row for a recorded history entry.

        Args:
            db: Database session
            entry: History entry of the completed cycle
            raw: Raw upstream payloads, stored as JSON

        Returns:
            Created FloodSnapshot instance
        """
        return await self.create(db, obj_in={
            "captured_at": entry.timestamp,
            "waze_count": entry.waze_flood_count,
            "affected_areas": entry.affected_area_count,
            "alerts_in_areas": entry.alerts_in_areas_count,
            "avg_rain": entry.avg_rain,
            "max_rain": entry.max_rain,
            "active_stations": entry.active_stations,
            "severity": entry.severity,
            "raw": raw,
        })

    async def get_history(self, db: AsyncSession, *, limit: int = 100) -> List[FloodSnapshot]:
        """
        Get persisted snapshots ordered by capture time, oldest first.

        Args:
            db: Database session
            limit: Maximum number of rows to return

        Returns:
            List of FloodSnapshot instances
        """
        result = await db.execute(
            select(FloodSnapshot)
            .order_by(FloodSnapshot.captured_at.asc(), FloodSnapshot.id.asc())
            .limit(limit)
        )
        return result.scalars().all()


snapshot = CRUDSnapshot(FloodSnapshot)
