"""
Administrative Commands

``set``, ``setRaw``, ``reload`` and ``show``. Each returns a CommandResult or
raises CommandError; rejected commands leave all state untouched.
"""

import logging
import math
from dataclasses import dataclass, field

from .engine import WeatherVibeEngine
from .exceptions import CommandError
from .fade import map_percent_to_intensity
from .models import Condition

logger = logging.getLogger(__name__)

VALID_CONDITIONS = ", ".join(f"{int(c)}={c.token}" for c in Condition)
DISABLED_MESSAGE = "WeatherVibe is disabled (WeatherVibe.Enable = 0)."

USAGE = {
    "set": "set <zoneId> <state> <percentage:0..100>",
    "setraw": "setRaw <zoneId> <state> <raw:0..1>",
    "reload": "reload",
    "show": "show",
}


@dataclass
class CommandResult:
    """Outcome of an administrative command."""

    success: bool
    message: str
    data: dict = field(default_factory=dict)


class CommandHandler:
    """Thin command surface over a WeatherVibeEngine."""

    def __init__(self, engine: WeatherVibeEngine):
        self.engine = engine

    def execute(self, line: str) -> CommandResult:
        """Run a console command line such as ``set 1519 3 50``."""
        parts = line.split()
        if not parts:
            return CommandResult(False, f"Commands: {', '.join(USAGE.values())}")

        name, args = parts[0].lower(), parts[1:]
        handlers = {
            "set": self.set_percent,
            "setraw": self.set_raw,
            "reload": self.reload,
            "show": self.show,
        }
        handler = handlers.get(name)
        if handler is None:
            return CommandResult(False, f"Unknown command: {parts[0]}. Commands: {', '.join(USAGE.values())}")
        if len(args) != USAGE[name].count("<"):
            return CommandResult(False, f"Usage: {USAGE[name]}")

        try:
            return handler(*args)
        except CommandError as e:
            logger.info(f"Command {parts[0]} rejected: {e}")
            return CommandResult(False, str(e))

    def _require_enabled(self) -> None:
        if not self.engine.enabled:
            raise CommandError(DISABLED_MESSAGE)

    @staticmethod
    def _parse_zone(zone_id) -> int:
        try:
            zone = int(zone_id)
        except (TypeError, ValueError) as e:
            raise CommandError(f"Invalid zone id: {zone_id!r}") from e
        if zone < 0:
            raise CommandError(f"Invalid zone id: {zone_id!r}")
        return zone

    @staticmethod
    def _parse_condition(value, usage: str) -> Condition:
        try:
            return Condition.parse(value)
        except ValueError as e:
            raise CommandError(f"Invalid state {value!r}. Valid: {VALID_CONDITIONS}. Usage: {usage}") from e

    @staticmethod
    def _parse_number(value, label: str) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise CommandError(f"Invalid {label}: {value!r}") from e
        if not math.isfinite(number):
            raise CommandError(f"Invalid {label}: {value!r}")
        return number

    def set_percent(self, zone_id, condition, percent) -> CommandResult:
        """``set <zone> <condition> <percent 0..100>``"""
        self._require_enabled()
        zone = self._parse_zone(zone_id)
        state = self._parse_condition(condition, USAGE["set"])
        pct = min(max(self._parse_number(percent, "percentage"), 0.0), 100.0)

        band = self.engine.tables.lookup_band(self.engine.day_part(), state)
        raw = map_percent_to_intensity(band, pct / 100.0)
        self.engine.push(zone, state, raw)

        last = self.engine.cache.get(zone)
        return CommandResult(
            True,
            f"Zone {zone} set to {state.display_name} at {pct:.0f}% (grade {last.intensity:.2f}).",
            {"zone_id": zone, "condition": state.display_name, "intensity": last.intensity},
        )

    def set_raw(self, zone_id, condition, intensity) -> CommandResult:
        """``setRaw <zone> <condition> <intensity 0..1>``"""
        self._require_enabled()
        zone = self._parse_zone(zone_id)
        state = self._parse_condition(condition, USAGE["setraw"])
        raw = min(max(self._parse_number(intensity, "intensity"), 0.0), 1.0)

        self.engine.push(zone, state, raw)

        last = self.engine.cache.get(zone)
        return CommandResult(
            True,
            f"Zone {zone} set to {state.display_name} (grade {last.intensity:.4f}).",
            {"zone_id": zone, "condition": state.display_name, "intensity": last.intensity},
        )

    def reload(self) -> CommandResult:
        self._require_enabled()
        self.engine.reload()
        return CommandResult(True, "Reloaded (per-state ranges, catalogues, day parts).")

    def show(self) -> CommandResult:
        self._require_enabled()
        snapshot = self.engine.snapshot()
        if not snapshot["zones"]:
            return CommandResult(
                True,
                "No last-applied weather recorded yet. Use set or setRaw to push weather.",
                snapshot,
            )

        lines = [f"show | season={snapshot['season']} | daypart={snapshot['day_part']}"]
        for zone in snapshot["zones"]:
            line = f"zone {zone['zone_id']}"
            if "last_condition" in zone:
                line += f" -> last state={zone['last_condition']} raw={zone['last_intensity']:.2f}"
            else:
                line += " -> (unset)"
            scheduler = zone.get("scheduler")
            if scheduler:
                line += (
                    f" | phase={scheduler['phase']} target={scheduler['target_condition']}"
                    f"@{scheduler['target_intensity']:.2f}"
                    f" steps={scheduler['fade_out_steps']}/{scheduler['fade_in_steps']}"
                    f" step_timer={scheduler['step_timer']:.0f}s"
                    f" dwell={scheduler['dwell_remaining']:.0f}s"
                    f" offset={scheduler['start_offset_remaining']:.0f}s"
                )
            lines.append(line)
        return CommandResult(True, "\n".join(lines), snapshot)
