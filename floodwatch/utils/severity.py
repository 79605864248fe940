"""
City-wide severity classification.

Maps risk-zone statuses and flood metrics to one of four ordinal levels.
Rules are evaluated top to bottom and the first match wins.
"""

from dataclasses import dataclass
from typing import Sequence

from floodwatch.config import settings
from floodwatch.schemas.feeds import Polygon
from floodwatch.schemas.snapshot import FloodMetrics, Severity


NORMAL = 0
ATTENTION = 1
ALERT = 2
CRITICAL = 3

STATUS_MAP = {
    NORMAL: {'name': 'Normal', 'color': '#22c55e'},
    ATTENTION: {'name': 'Attention', 'color': '#eab308'},
    ALERT: {'name': 'Alert', 'color': '#ea580c'},
    CRITICAL: {'name': 'Critical', 'color': '#dc2626'},
}


@dataclass(frozen=True)
class SeverityThresholds:
    """
    Classification thresholds.

    Attributes:
        critical_polygon_status: Zone status at or above which the city is critical
        alert_alerts_in_areas: Alerts-in-areas count above which the city is on alert
        alert_affected_areas: Affected-zone count above which the city is on alert
        attention_waze_alerts: Flood alert count above which the city needs attention
    """
    critical_polygon_status: int = 3
    alert_alerts_in_areas: int = 5
    alert_affected_areas: int = 10
    attention_waze_alerts: int = 10

    @classmethod
    def from_settings(cls) -> "SeverityThresholds":
        return cls(
            critical_polygon_status=settings.SEVERITY_CRITICAL_POLYGON_STATUS,
            alert_alerts_in_areas=settings.SEVERITY_ALERT_ALERTS_IN_AREAS,
            alert_affected_areas=settings.SEVERITY_ALERT_AFFECTED_AREAS,
            attention_waze_alerts=settings.SEVERITY_ATTENTION_WAZE_ALERTS,
        )


DEFAULT_THRESHOLDS = SeverityThresholds()


def severity_for_level(level: int) -> Severity:
    status = STATUS_MAP[level]
    return Severity(level=level, label=status['name'], color=status['color'])


def classify(
    polygons: Sequence[Polygon],
    metrics: FloodMetrics,
    thresholds: SeverityThresholds = DEFAULT_THRESHOLDS,
) -> Severity:
    """
    Classify overall city severity.

    1. Any zone at or above the critical status -> Critical
    2. Many alerts inside affected zones, or many affected zones -> Alert
    3. Any affected zone, or many flood alerts -> Attention
    4. Otherwise -> Normal

    Args:
        polygons: Risk zones of the current snapshot
        metrics: Flood metrics of the current snapshot
        thresholds: Classification thresholds

    Returns:
        Severity with level, label and display color
    """
    max_status = max((p.status_code for p in polygons), default=NORMAL)

    if max_status >= thresholds.critical_polygon_status:
        return severity_for_level(CRITICAL)
    if (metrics.alerts_in_areas_count > thresholds.alert_alerts_in_areas
            or metrics.affected_area_count > thresholds.alert_affected_areas):
        return severity_for_level(ALERT)
    if (metrics.affected_area_count > 0
            or metrics.waze_flood_count > thresholds.attention_waze_alerts):
        return severity_for_level(ATTENTION)
    return severity_for_level(NORMAL)
