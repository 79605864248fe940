"""
Tests for city severity classification.
"""

import pytest

from conftest import make_polygon
from floodwatch.schemas.snapshot import FloodMetrics
from floodwatch.utils.severity import DEFAULT_THRESHOLDS, SeverityThresholds, classify


def metrics(alerts=0, areas=0, overlap=0):
    return FloodMetrics(
        waze_flood_count=alerts,
        affected_area_count=areas,
        alerts_in_areas_count=overlap,
    )


class TestClassify:
    """Rule precedence and thresholds."""

    def test_critical_polygon_wins_regardless_of_metrics(self):
        severity = classify([make_polygon(3)], metrics(0, 0, 0))
        assert severity.level == 3
        assert severity.label == "Critical"

    def test_more_than_ten_affected_areas_is_alert(self):
        """11 attention zones -> Alert, before the Attention rule is checked."""
        polygons = [make_polygon(1, id=str(i)) for i in range(11)]
        severity = classify(polygons, metrics(areas=11))
        assert severity.level == 2
        assert severity.label == "Alert"

    def test_exactly_ten_affected_areas_is_attention(self):
        polygons = [make_polygon(1, id=str(i)) for i in range(10)]
        assert classify(polygons, metrics(areas=10)).level == 1

    def test_alerts_in_areas_above_five_is_alert(self):
        assert classify([make_polygon(1)], metrics(alerts=6, areas=1, overlap=6)).level == 2
        assert classify([make_polygon(1)], metrics(alerts=5, areas=1, overlap=5)).level == 1

    def test_any_affected_area_is_attention(self):
        severity = classify([make_polygon(2)], metrics(areas=1))
        assert severity.level == 1
        assert severity.label == "Attention"

    def test_many_flood_alerts_is_attention(self):
        assert classify([], metrics(alerts=11)).level == 1
        assert classify([], metrics(alerts=10)).level == 0

    def test_no_polygons_is_normal(self):
        """With no zones the critical rule simply doesn't match."""
        severity = classify([], metrics())
        assert severity.level == 0
        assert severity.label == "Normal"
        assert severity.color == "#22c55e"

    @pytest.mark.parametrize("areas, alerts", [(0, 0), (1, 0), (0, 11), (3, 4), (11, 0)])
    def test_monotonic_in_alerts_in_areas(self, areas, alerts):
        """Raising the overlap count never lowers the level."""
        polygons = [make_polygon(1, id=str(i)) for i in range(areas)]
        levels = [
            classify(polygons, metrics(alerts=alerts, areas=areas, overlap=overlap)).level
            for overlap in range(0, 12)
        ]
        assert levels == sorted(levels)


class TestThresholds:

    def test_defaults(self):
        assert DEFAULT_THRESHOLDS.critical_polygon_status == 3
        assert DEFAULT_THRESHOLDS.alert_alerts_in_areas == 5
        assert DEFAULT_THRESHOLDS.alert_affected_areas == 10
        assert DEFAULT_THRESHOLDS.attention_waze_alerts == 10

    def test_overridden_thresholds(self):
        strict = SeverityThresholds(
            critical_polygon_status=2,
            alert_alerts_in_areas=1,
            alert_affected_areas=2,
            attention_waze_alerts=2,
        )
        assert classify([make_polygon(2)], metrics(areas=1), strict).level == 3
        assert classify([make_polygon(1)], metrics(areas=1, overlap=2), strict).level == 2
        assert classify([], metrics(alerts=3), strict).level == 1

    def test_from_settings_matches_defaults(self):
        assert SeverityThresholds.from_settings() == DEFAULT_THRESHOLDS
