"""
Last-Applied Cache

Remembers the last value pushed to each zone so observers arriving later can
be brought up to date without touching the scheduler.
"""

from .models import Condition, LastApplied


class LastAppliedCache:
    """Per-zone record of the most recent push."""

    def __init__(self):
        self.entries: dict[int, LastApplied] = {}

    def record_push(self, zone_id: int, condition: Condition, intensity: float) -> None:
        entry = self.entries.setdefault(zone_id, LastApplied())
        entry.condition = condition
        entry.intensity = intensity
        entry.has_value = True

    def get(self, zone_id: int) -> LastApplied | None:
        """Recorded value for the zone, or None if nothing was pushed."""
        entry = self.entries.get(zone_id)
        if entry is None or not entry.has_value:
            return None
        return entry

    def items(self):
        return sorted(self.entries.items())

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)
