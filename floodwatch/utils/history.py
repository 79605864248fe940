"""
Rolling snapshot history and notable event detection.

`FloodHistory` owns the in-memory window of history entries and the notable
event log. Each completed refresh cycle records exactly one entry; the two
most recent entries are then diffed to surface meaningful transitions.

Detection rules, applied to the deltas (current - previous) of flood alerts,
affected areas and alerts inside affected areas:

- Convergence: all three deltas rising emits a single critical event and
  nothing else for that cycle.
- Otherwise, independently: an alert spike emits an alert event; areas
  becoming affected emit an attention event, or areas clearing emit a
  normal event.
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional

from floodwatch.config import settings
from floodwatch.schemas.snapshot import HistoryEntry, NotableEvent


@dataclass(frozen=True)
class EventThresholds:
    """
    Attributes:
        alert_spike: Minimum rise in flood alerts between two snapshots to report
        max_events: Size of the notable event log
        window_size: Size of the rolling history window
    """
    alert_spike: int = 5
    max_events: int = 50
    window_size: int = 100

    @classmethod
    def from_settings(cls) -> "EventThresholds":
        return cls(
            alert_spike=settings.NOTABLE_ALERT_SPIKE,
            max_events=settings.NOTABLE_MAX_EVENTS,
            window_size=settings.HISTORY_WINDOW_SIZE,
        )


DEFAULT_EVENT_THRESHOLDS = EventThresholds()


def detect_events(
    previous: HistoryEntry,
    current: HistoryEntry,
    alert_spike: int = DEFAULT_EVENT_THRESHOLDS.alert_spike,
) -> List[NotableEvent]:
    """
    Diff two consecutive history entries into notable events.

    Args:
        previous: Older entry
        current: Newer entry
        alert_spike: Minimum alert rise reported as a spike

    Returns:
        Events in emission order, stamped with the current entry's time
    """
    time = current.timestamp
    alert_delta = current.waze_flood_count - previous.waze_flood_count
    area_delta = current.affected_area_count - previous.affected_area_count
    overlap_delta = current.alerts_in_areas_count - previous.alerts_in_areas_count

    if alert_delta > 0 and area_delta > 0 and overlap_delta > 0:
        return [NotableEvent(
            timestamp=time,
            message="Flood convergence: alerts, areas, and overlap all rising",
            severity="critical",
        )]

    events = []
    if alert_delta >= alert_spike:
        events.append(NotableEvent(
            timestamp=time,
            message=f"+{alert_delta} new flood alerts reported",
            severity="alert",
        ))
    if area_delta > 0:
        events.append(NotableEvent(
            timestamp=time,
            message=f"{area_delta} new area(s) entered affected status",
            severity="attention",
        ))
    elif area_delta < 0:
        events.append(NotableEvent(
            timestamp=time,
            message=f"{abs(area_delta)} area(s) returned to normal",
            severity="normal",
        ))
    return events


class FloodHistory:
    """
    Bounded history window plus notable event log.

    Not safe for concurrent writers; the owning monitor serializes cycles.
    """

    def __init__(self, thresholds: EventThresholds = DEFAULT_EVENT_THRESHOLDS):
        self.thresholds = thresholds
        self._entries: Deque[HistoryEntry] = deque(maxlen=thresholds.window_size)
        self._events: List[NotableEvent] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[HistoryEntry]:
        """Window contents, oldest first."""
        return list(self._entries)

    @property
    def events(self) -> List[NotableEvent]:
        """Event log, oldest first."""
        return list(self._events)

    @property
    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[-1] if self._entries else None

    def recent_events(self, limit: int = 10) -> List[NotableEvent]:
        """Most recent events first."""
        return list(reversed(self._events))[:limit]

    def record(self, entry: HistoryEntry) -> List[NotableEvent]:
        """
        Append an entry and run event detection against its predecessor.

        Returns:
            Events emitted by this entry (possibly empty)
        """
        self._entries.append(entry)
        if len(self._entries) < 2:
            return []

        new_events = detect_events(
            self._entries[-2], self._entries[-1], alert_spike=self.thresholds.alert_spike
        )
        if new_events:
            self._events.extend(new_events)
            if len(self._events) > self.thresholds.max_events:
                del self._events[:-self.thresholds.max_events]
        return new_events
