"""
Flood metrics computed from one set of feed readings.

All functions here are pure: they take the station, risk-zone and alert
collections of a single refresh cycle and derive numbers from scratch.
Alerts must already be filtered to the flood subtype.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence

from floodwatch.schemas.feeds import Alert, Polygon, Station
from floodwatch.schemas.snapshot import FloodMetrics
from floodwatch.utils.geometry import point_in_ring


def round_half_up(value: float, places: int) -> float:
    """
    Round to a number of decimal places, halves going away from zero.

    Python's round() uses banker's rounding on the binary value, which
    gives surprising results for rain figures like 2.675.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def affected_polygons(polygons: Iterable[Polygon]) -> List[Polygon]:
    """Return zones whose status is above normal."""
    return [p for p in polygons if p.is_affected]


def count_alerts_in_affected_areas(alerts: Sequence[Alert], polygons: Sequence[Polygon]) -> int:
    """
    Count alerts that fall inside at least one affected zone.

    Each alert is counted once even if zones overlap. Alerts without a
    location are ignored, as are affected zones without geometry.
    """
    affected = [p for p in polygons if p.is_affected and p.outer_ring]
    if not affected:
        return 0

    count = 0
    for alert in alerts:
        if alert.location is None:
            continue
        lat, lng = alert.location.y, alert.location.x
        for polygon in affected:
            if point_in_ring(lat, lng, polygon.outer_ring):
                count += 1
                break
    return count


def compute_metrics(
    stations: Sequence[Station],
    polygons: Sequence[Polygon],
    flood_alerts: Sequence[Alert],
) -> FloodMetrics:
    """
    Compute the flood metrics for one snapshot.

    Args:
        stations: Rain gauge readings; not used by the counts
        polygons: Risk zones
        flood_alerts: Alerts already filtered to the flood subtype

    Returns:
        FloodMetrics for the snapshot
    """
    return FloodMetrics(
        waze_flood_count=len(flood_alerts),
        affected_area_count=len(affected_polygons(polygons)),
        alerts_in_areas_count=count_alerts_in_affected_areas(flood_alerts, polygons),
    )


def average_rain(stations: Sequence[Station], places: int = 2) -> float:
    """
    Mean 1-hour accumulation across all stations.

    Stations without a reading count as 0 mm. Use `places=2` for persisted
    values and `places=1` for display.
    """
    if not stations:
        return 0.0
    total = sum(s.h01 for s in stations)
    return round_half_up(total / len(stations), places)


def max_rain(stations: Sequence[Station]) -> float:
    """Largest 1-hour accumulation, 0 when there are no stations."""
    return max((s.h01 for s in stations), default=0.0)


def active_station_count(stations: Sequence[Station]) -> int:
    """Number of stations that recorded rain in the last hour."""
    return sum(1 for s in stations if s.h01 > 0)
