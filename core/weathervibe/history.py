"""
Push History Tracking

Simple in-memory log of recent pushes, for inspection through the API.
"""

import threading
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone

from .models import Condition


@dataclass
class PushEvent:
    """A single push to a zone."""

    timestamp: str  # ISO format
    zone_id: int
    condition: str
    condition_id: int
    intensity: float
    source: str  # "scheduler" or "manual"
    delivered: bool  # at least one observer received it


class PushHistory:
    """Bounded history of pushes."""

    def __init__(self, max_events: int = 5000, max_hours: int = 24):
        """Initialize push history.

        Args:
            max_events: How many events to keep
            max_hours: How many hours of events to keep
        """
        self.max_age = timedelta(hours=max_hours)
        self.events: deque[PushEvent] = deque(maxlen=max_events)
        self.lock = threading.Lock()

    def add_push(
        self,
        zone_id: int,
        condition: Condition,
        intensity: float,
        source: str,
        delivered: bool,
        timestamp: datetime | None = None
    ):
        ts = timestamp or datetime.now(timezone.utc)
        event = PushEvent(
            timestamp=ts.isoformat(),
            zone_id=zone_id,
            condition=condition.display_name,
            condition_id=int(condition),
            intensity=round(intensity, 4),
            source=source,
            delivered=delivered,
        )

        with self.lock:
            self.events.append(event)
            self._cleanup_old_events()

    def get_push_history(
        self,
        zone_id: int | None = None,
        hours: int | None = None
    ) -> list[dict]:
        """Get push events.

        Args:
            zone_id: Filter by zone (None = all zones)
            hours: How many hours back (None = all available)

        Returns:
            List of push events as dicts, oldest first
        """
        with self.lock:
            events = list(self.events)

        if zone_id is not None:
            events = [e for e in events if e.zone_id == zone_id]

        if hours:
            cutoff = datetime.now(timezone.utc) - timedelta(hours=hours)
            events = [e for e in events if datetime.fromisoformat(e.timestamp) > cutoff]

        return [asdict(e) for e in events]

    def _cleanup_old_events(self):
        """Drop events older than max_age. Caller holds the lock."""
        cutoff = datetime.now(timezone.utc) - self.max_age
        while self.events and datetime.fromisoformat(self.events[0].timestamp) < cutoff:
            self.events.popleft()
