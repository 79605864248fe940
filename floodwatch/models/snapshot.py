"""
Flood snapshot database model.

One row is appended per recorded refresh cycle. Rows are never updated;
the table is the unbounded counterpart of the in-memory history window.
"""

from sqlalchemy import Column, Float, DateTime, Integer, JSON, Index, CheckConstraint

from floodwatch.models.base import BaseModel


class FloodSnapshot(BaseModel):
    """
    Persisted flood snapshot.

    Stores the fused metrics and severity of one refresh cycle, plus
    optionally the raw upstream payloads the cycle was computed from.
    """

    __tablename__ = "flood_snapshots"

    captured_at = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        comment="When the cycle completed"
    )

    waze_count = Column(Integer, nullable=False, comment="Flood alerts in the live feed")
    affected_areas = Column(Integer, nullable=False, comment="Risk zones with status above normal")
    alerts_in_areas = Column(Integer, nullable=False, comment="Flood alerts inside an affected zone")

    avg_rain = Column(Float, nullable=False, comment="Mean 1h rain across stations in mm")
    max_rain = Column(Float, nullable=False, comment="Largest 1h rain in mm")
    active_stations = Column(Integer, nullable=True, comment="Stations reporting rain in the last hour")

    severity = Column(Integer, nullable=False, comment="0 normal, 1 attention, 2 alert, 3 critical")

    raw = Column(JSON, nullable=True, comment="Raw upstream payloads")

    __table_args__ = (
        CheckConstraint('severity >= 0 AND severity <= 3', name='ck_snapshot_severity_range'),
        CheckConstraint('waze_count >= 0', name='ck_snapshot_waze_count_positive'),
        CheckConstraint('affected_areas >= 0', name='ck_snapshot_affected_areas_positive'),
        CheckConstraint('alerts_in_areas >= 0', name='ck_snapshot_alerts_in_areas_positive'),
        Index('idx_snapshot_captured_severity', 'captured_at', 'severity'),
    )

    def __repr__(self):
        return f"<FloodSnapshot(id={self.id}, captured_at={self.captured_at}, severity={self.severity})>"
