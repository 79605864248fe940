"""
Tests for the rain guard.
"""

from datetime import timedelta

from conftest import NOW, NOW_MS, make_alert, make_alerts
from floodwatch.utils.guard import MS_PER_HOUR, RainGuard


class TestRainGuard:
    """Recent flood alert gating."""

    def test_two_recent_alerts_skip(self, now):
        passed, recent = RainGuard().check(make_alerts(2), now)
        assert passed is False
        assert recent == 2

    def test_three_recent_alerts_pass(self, now):
        passed, recent = RainGuard().check(make_alerts(3), now)
        assert passed is True
        assert recent == 3

    def test_alerts_outside_window_do_not_count(self, now):
        old = NOW_MS - 7 * MS_PER_HOUR
        alerts = make_alerts(10, pub_millis=old) + make_alerts(2)
        passed, recent = RainGuard().check(alerts, now)
        assert passed is False
        assert recent == 2

    def test_window_boundary_is_exclusive(self, now):
        """An alert published exactly at the cutoff is not recent."""
        edge = NOW_MS - 6 * MS_PER_HOUR
        guard = RainGuard()
        assert guard.recent_count([make_alert("edge", pub_millis=edge)], now) == 0
        assert guard.recent_count([make_alert("in", pub_millis=edge + 1)], now) == 1

    def test_disabled_guard_always_passes(self, now):
        passed, recent = RainGuard(enabled=False).check([], now)
        assert passed is True
        assert recent == 0

    def test_custom_window(self):
        guard = RainGuard(window_hours=1, min_alerts=1)
        alerts = [make_alert("a", pub_millis=NOW_MS - 2 * MS_PER_HOUR)]
        assert guard.check(alerts, NOW)[0] is False
        assert guard.check(alerts, NOW - timedelta(hours=1, minutes=30))[0] is True

    def test_from_settings(self):
        guard = RainGuard.from_settings()
        assert guard.enabled is True
        assert guard.window_hours == 6
        assert guard.min_alerts == 3
