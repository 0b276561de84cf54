"""
WeatherVibe Configuration Settings

Options are flat ``WeatherVibe.*`` keys. In production they come from the
add-on's options.json, in development from the ``options:`` section of
config.yaml.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

from .config_parser import clamp_minutes, parse_hhmm, parse_zone_list
from .exceptions import ConfigurationError
from .models import DayPart

logger = logging.getLogger(__name__)

OPTIONS_PATH = "/data/options.json"
KEY_PREFIX = "WeatherVibe"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigSource:
    """Read-only key/value view over the loaded options."""

    def __init__(self, values: dict[str, Any] | None = None, path: str | None = None):
        self.path = path
        self.values: dict[str, Any] = dict(values or {})

    @classmethod
    def from_file(cls, path: str) -> "ConfigSource":
        """Load options from a JSON or YAML file.

        YAML files may either hold the keys at top level or under ``options``.
        """
        source = cls(path=path)
        source.reload()
        return source

    def reload(self) -> None:
        """Re-read the backing file, if there is one."""
        if not self.path:
            return
        with open(self.path) as f:
            if self.path.endswith(".json"):
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}
        if isinstance(data.get("options"), dict):
            data = data["options"]
        self.values = {str(k): v for k, v in data.items()}
        logger.info(f"Loaded {len(self.values)} option(s) from {self.path}")

    def get_string(self, key: str, default: str = "") -> str:
        value = self.values.get(key)
        if value is None:
            return default
        return str(value)

    def get_uint(self, key: str, default: int = 0) -> int:
        value = self.values.get(key)
        if value is None:
            return default
        try:
            number = int(float(value))
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Option {key}={value!r} is not a number, using {default}")
            return default
        return max(number, 0)

    def get_float(self, key: str, default: float = 0.0) -> float:
        value = self.values.get(key)
        if value is None:
            return default
        try:
            number = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Option {key}={value!r} is not a number, using {default}")
            return default
        if not math.isfinite(number):
            logger.warning(f"Option {key}={value!r} is not finite, using {default}")
            return default
        return number

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.values.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        logger.warning(f"Option {key}={value!r} is not a boolean, using {default}")
        return default


def load_config_source(config_path: str | None = None) -> ConfigSource:
    """Load options from options.json (production) or config.yaml (development)."""
    if os.path.exists(OPTIONS_PATH):
        return ConfigSource.from_file(OPTIONS_PATH)

    if config_path is None:
        config_path = os.path.join(os.path.dirname(__file__), "..", "..", "config.yaml")
    if os.path.exists(config_path):
        return ConfigSource.from_file(config_path)

    logger.warning("No configuration file found, using defaults")
    return ConfigSource()


@dataclass
class DayPartStarts:
    """Start minute of each day part."""

    morning: int = 6 * 60
    afternoon: int = 12 * 60
    evening: int = 18 * 60
    night: int = 22 * 60

    def validated(self) -> "DayPartStarts":
        """Clamp to the day and keep morning < afternoon < evening.

        Night is only clamped since it wraps past midnight.
        """
        morning = clamp_minutes(self.morning)
        afternoon = max(clamp_minutes(self.afternoon), morning + 1)
        evening = max(clamp_minutes(self.evening), afternoon + 1)
        return DayPartStarts(morning, afternoon, evening, clamp_minutes(self.night))

    def get(self, day_part: DayPart) -> int:
        return getattr(self, day_part.name.lower())


@dataclass
class EngineSettings:
    """Global tuning knobs."""

    enabled: bool = True
    debug: bool = False
    zone_ids: list[int] = field(default_factory=list)
    tick_seconds: float = 1.0
    repeat_max: int = 2
    fade_step: float = 0.05
    fade_step_seconds_min: int = 2
    fade_step_seconds_max: int = 4
    start_offset_max: int = 30
    day_part_mode: str = "auto"
    season_mode: str = "auto"
    day_part_starts: DayPartStarts = field(default_factory=DayPartStarts)

    @classmethod
    def from_source(cls, source: ConfigSource) -> "EngineSettings":
        """Read every knob, clamping out-of-range values."""
        defaults = DayPartStarts()
        starts = DayPartStarts(
            **{
                part.name.lower(): _read_start(source, part, defaults.get(part))
                for part in DayPart
            }
        ).validated()

        fade_step = min(max(source.get_float(f"{KEY_PREFIX}.Fade.Step", 0.05), 0.001), 1.0)
        step_min = source.get_uint(f"{KEY_PREFIX}.Fade.StepSeconds.Min", 2)
        step_max = source.get_uint(f"{KEY_PREFIX}.Fade.StepSeconds.Max", 4)
        if step_max < step_min:
            step_min, step_max = step_max, step_min

        return cls(
            enabled=source.get_bool(f"{KEY_PREFIX}.Enable", True),
            debug=source.get_uint(f"{KEY_PREFIX}.Debug", 0) != 0,
            zone_ids=parse_zone_list(source.get_string(f"{KEY_PREFIX}.Zones", "")),
            tick_seconds=float(max(source.get_uint(f"{KEY_PREFIX}.Tick.Seconds", 1), 1)),
            repeat_max=max(source.get_uint(f"{KEY_PREFIX}.RepeatMax", 2), 1),
            fade_step=fade_step,
            fade_step_seconds_min=max(step_min, 1),
            fade_step_seconds_max=max(step_max, 1),
            start_offset_max=source.get_uint(f"{KEY_PREFIX}.StartOffset.MaxSeconds", 30),
            day_part_mode=source.get_string(f"{KEY_PREFIX}.DayPart.Mode", "auto").strip().lower(),
            season_mode=source.get_string(f"{KEY_PREFIX}.Season", "auto").strip().lower(),
            day_part_starts=starts,
        )


def _read_start(source: ConfigSource, part: DayPart, default: int) -> int:
    key = f"{KEY_PREFIX}.DayPart.{part.name}.Start"
    text = source.get_string(key, "")
    if not text:
        return default
    try:
        return parse_hhmm(text)
    except ConfigurationError as e:
        logger.warning(f"{key}: {e}, using default")
        return default
