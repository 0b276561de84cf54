"""
WeatherVibe Engine

One object holding everything the weather scheduler needs: settings, range
and weight tables, zone runtimes, the last-applied cache, and the push path
shared by the scheduler and manual commands. Every entry point is expected
to run on the same thread (the service's event loop).
"""

import logging
import random

from .clock import SystemClock, current_day_part, current_season
from .fade import clamp_to_core_bounds
from .history import PushHistory
from .last_applied import LastAppliedCache
from .models import Condition, DayPart, Season
from .scheduler import ZoneScheduler
from .settings import ConfigSource, EngineSettings
from .tables import RangeWeightTables
from .transport import NullTransport, Transport

logger = logging.getLogger(__name__)


class WeatherVibeEngine:
    """Scheduler context: owns tables, runtimes and the last-applied cache."""

    def __init__(
        self,
        source: ConfigSource,
        transport: Transport | None = None,
        clock=None,
        rng: random.Random | None = None,
    ):
        self.source = source
        self.transport = transport or NullTransport()
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()

        self.settings = EngineSettings.from_source(source)
        self.enabled = self.settings.enabled
        self.tables = RangeWeightTables()
        self.cache = LastAppliedCache()
        self.history = PushHistory()
        self.scheduler = ZoneScheduler(self.tables, self.settings, self._scheduler_push, self.rng)
        self._accumulator = 0.0

        if self.enabled:
            self.tables.reload(source, self.settings.zone_ids)
            logger.info(f"WeatherVibe started for {len(self.settings.zone_ids)} zone(s)")
        else:
            logger.info("WeatherVibe disabled by config")

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def day_part(self) -> DayPart:
        return current_day_part(self.clock, self.settings.day_part_starts, self.settings.day_part_mode)

    def season(self) -> Season:
        return current_season(self.clock, self.settings.season_mode)

    def tick(self, elapsed: float) -> int:
        """Consume ``elapsed`` seconds in fixed quanta.

        Returns:
            Number of quanta processed
        """
        if not self.enabled or elapsed <= 0:
            return 0

        quantum = self.settings.tick_seconds
        self._accumulator += elapsed
        processed = 0
        while self._accumulator >= quantum:
            self._accumulator -= quantum
            self.scheduler.advance(quantum, self.day_part())
            processed += 1
        return processed

    # ------------------------------------------------------------------
    # Push path
    # ------------------------------------------------------------------

    def push(self, zone_id: int, condition: Condition, intensity: float, source: str = "manual") -> bool:
        """Broadcast to a zone and record it as the zone's last-applied value.

        Always returns True: reaching zero observers still counts as applied.
        """
        value = clamp_to_core_bounds(intensity)
        delivered = self.transport.broadcast_to_zone(zone_id, condition, value)
        self.cache.record_push(zone_id, condition, value)
        self.history.add_push(zone_id, condition, value, source=source, delivered=delivered)

        if self.settings.debug:
            logger.info(
                f"[DEBUG] zone={zone_id} | season={self.season().display_name} | "
                f"day={self.day_part().display_name} | state={condition.display_name} | "
                f"grade={value:.2f} | pushed={str(delivered).lower()}"
            )
        return True

    def _scheduler_push(self, zone_id: int, condition: Condition, intensity: float) -> bool:
        return self.push(zone_id, condition, intensity, source="scheduler")

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def resync(self, zone_id: int, observer_id: str) -> tuple[Condition, float] | None:
        """Send the zone's current weather to one observer.

        Uses the last-applied cache, falling back to the scheduler's live value.
        Does nothing when neither is known.

        Returns:
            The (condition, intensity) sent, or None
        """
        last = self.cache.get(zone_id)
        if last is not None:
            condition, intensity = last.condition, last.intensity
        else:
            runtime = self.scheduler.runtime(zone_id)
            if runtime is None or not runtime.initialized:
                return None
            condition = runtime.current_condition
            intensity = clamp_to_core_bounds(runtime.current_intensity)

        self.transport.send_to_observer(observer_id, condition, intensity)
        return condition, intensity

    def on_observer_login(self, observer_id: str, zone_id: int):
        if not self.enabled:
            return None
        return self.resync(zone_id, observer_id)

    def on_observer_zone_change(self, observer_id: str, new_zone_id: int):
        if not self.enabled:
            return None
        return self.resync(new_zone_id, observer_id)

    # ------------------------------------------------------------------
    # Reload / inspection
    # ------------------------------------------------------------------

    def reload(self) -> None:
        """Re-read the options and rebuild tables; in-flight fades are dropped.

        The enable flag keeps its startup value.
        """
        self.source.reload()
        settings = EngineSettings.from_source(self.source)
        settings.enabled = self.enabled

        self.settings = settings
        self.scheduler.settings = settings
        self.tables.reload(self.source, settings.zone_ids)
        self.scheduler.reset()
        self._accumulator = 0.0
        logger.info("WeatherVibe reloaded (ranges, catalogues, day parts)")

    def snapshot(self) -> dict:
        """Last-applied values and scheduler state per zone."""
        zones = {}
        for zone_id, last in self.cache.items():
            zones[zone_id] = {
                "zone_id": zone_id,
                "last_condition": last.condition.display_name,
                "last_condition_id": int(last.condition),
                "last_intensity": round(last.intensity, 4),
                "has_value": last.has_value,
            }
        for zone_id, runtime in self.scheduler.runtimes.items():
            zones.setdefault(zone_id, {"zone_id": zone_id})["scheduler"] = runtime.to_dict()

        return {
            "enabled": self.enabled,
            "season": self.season().display_name,
            "day_part": self.day_part().display_name,
            "zones": [zones[zone_id] for zone_id in sorted(zones)],
        }
