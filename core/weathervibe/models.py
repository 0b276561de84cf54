"""
WeatherVibe Data Models

Conditions, day parts and the per-zone records owned by the engine.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class Condition(IntEnum):
    """Weather condition; the value is the id sent over the wire."""

    FINE = 0
    FOG = 1
    LIGHT_RAIN = 3
    MEDIUM_RAIN = 4
    HEAVY_RAIN = 5
    LIGHT_SNOW = 6
    MEDIUM_SNOW = 7
    HEAVY_SNOW = 8
    LIGHT_SANDSTORM = 22
    MEDIUM_SANDSTORM = 41
    HEAVY_SANDSTORM = 42
    THUNDERS = 86

    @property
    def token(self) -> str:
        """Config key token, e.g. ``LightRain``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def display_name(self) -> str:
        """Lowercase name used in logs and ``show`` output."""
        return self.name.lower()

    @classmethod
    def parse(cls, value) -> "Condition":
        """Resolve a wire id or config token to a condition.

        Raises:
            ValueError: If the value names no known condition
        """
        if isinstance(value, Condition):
            return value
        text = str(value).strip()
        if text.isdigit():
            return cls(int(text))
        for condition in cls:
            if text.lower() in (condition.token.lower(), condition.display_name):
                return condition
        raise ValueError(f"Unknown condition: {value!r}")


class DayPart(IntEnum):
    """Time-of-day bucket."""

    MORNING = 0
    AFTERNOON = 1
    EVENING = 2
    NIGHT = 3

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class Season(IntEnum):
    """Calendar season."""

    SPRING = 0
    SUMMER = 1
    AUTUMN = 2
    WINTER = 3

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class Phase(str, Enum):
    """Zone scheduler phase."""

    IDLE = "idle"
    FADE_OUT = "fade_out"
    FADE_IN = "fade_in"
    DWELL = "dwell"


@dataclass(frozen=True)
class IntensityBand:
    """Absolute intensity range for one (day part, condition) pair."""

    min: float = 0.30
    max: float = 1.00

    def map_percent(self, percent: float) -> float:
        """Map a 0-1 percent into the band."""
        percent = min(max(percent, 0.0), 1.0)
        return self.min + percent * (self.max - self.min)


DEFAULT_BAND = IntensityBand(0.30, 1.00)


@dataclass(frozen=True)
class CatalogEntry:
    """One weighted row of a zone's per-day-part catalogue."""

    condition: Condition
    weight: float
    percent_min: float  # 0-100
    percent_max: float  # 0-100
    dwell_min: int  # seconds
    dwell_max: int  # seconds

    @property
    def enabled(self) -> bool:
        return self.weight > 0


@dataclass
class RepeatHistory:
    """Last picked condition and how many times in a row it was picked."""

    last_picked: Condition | None = None
    count: int = 0

    def record(self, condition: Condition) -> None:
        if condition is self.last_picked:
            self.count += 1
        else:
            self.last_picked = condition
            self.count = 1


@dataclass
class ZoneRuntime:
    """Mutable scheduling state for one managed zone."""

    zone_id: int
    start_offset_remaining: float = 0.0
    phase: Phase = Phase.IDLE
    initialized: bool = False  # something has been pushed for this zone

    current_condition: Condition | None = None
    current_intensity: float = 0.0
    target_condition: Condition | None = None
    target_intensity: float = 0.0
    entry: CatalogEntry | None = None

    # Fade bookkeeping
    fade_out_to: float = 0.0
    fade_out_steps: int = 0
    fade_in_from: float = 0.0
    fade_in_steps: int = 0
    step_interval: float = 0.0
    step_timer: float = 0.0

    dwell_remaining: float = 0.0
    day_part: DayPart | None = None
    repeat: RepeatHistory = field(default_factory=RepeatHistory)

    def to_dict(self) -> dict:
        """Snapshot for ``show`` and the API."""
        return {
            "zone_id": self.zone_id,
            "phase": self.phase.value,
            "condition": self.current_condition.display_name if self.current_condition is not None else None,
            "intensity": round(self.current_intensity, 4),
            "target_condition": self.target_condition.display_name if self.target_condition is not None else None,
            "target_intensity": round(self.target_intensity, 4),
            "fade_out_steps": self.fade_out_steps,
            "fade_in_steps": self.fade_in_steps,
            "step_timer": round(self.step_timer, 2),
            "dwell_remaining": round(self.dwell_remaining, 2),
            "start_offset_remaining": round(self.start_offset_remaining, 2),
            "repeat_count": self.repeat.count,
        }


@dataclass
class LastApplied:
    """Most recent value pushed to a zone."""

    condition: Condition = Condition.FINE
    intensity: float = 0.0
    has_value: bool = False


@dataclass(frozen=True)
class LocalTime:
    """Wall-clock reading used to derive day part and season."""

    hour: int
    minute: int
    day_of_year: int  # 1-366

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute
