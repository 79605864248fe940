"""
Rain guard: gate recording on a credible flood signal.

A refresh cycle is only recorded when enough flood alerts were published
recently. Without the guard, quiet periods would fill the history with
noise-level snapshots.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from floodwatch.config import settings
from floodwatch.schemas.feeds import Alert

MS_PER_HOUR = 60 * 60 * 1000


@dataclass(frozen=True)
class RainGuard:
    """
    Attributes:
        enabled: When False every cycle passes
        window_hours: Trailing window for counting recent alerts
        min_alerts: Minimum recent alerts for a cycle to be recorded
    """
    enabled: bool = True
    window_hours: float = 6.0
    min_alerts: int = 3

    @classmethod
    def from_settings(cls) -> "RainGuard":
        return cls(
            enabled=settings.RAIN_GUARD_ENABLED,
            window_hours=settings.RAIN_GUARD_WINDOW_HOURS,
            min_alerts=settings.RAIN_GUARD_MIN_ALERTS,
        )

    def recent_count(self, flood_alerts: Sequence[Alert], now: Optional[datetime] = None) -> int:
        """Count alerts published strictly within the trailing window."""
        now = now or datetime.now(timezone.utc)
        cutoff = now.timestamp() * 1000 - self.window_hours * MS_PER_HOUR
        return sum(1 for a in flood_alerts if a.pubMillis > cutoff)

    def check(self, flood_alerts: Sequence[Alert], now: Optional[datetime] = None) -> Tuple[bool, int]:
        """
        Returns:
            (passed, recent_count)
        """
        recent = self.recent_count(flood_alerts, now)
        if not self.enabled:
            return True, recent
        return recent >= self.min_alerts, recent
