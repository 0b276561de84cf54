"""
Config Value Parsers

Small typed parsers for the positional text values found in the options.
Each parser either returns a clamped, well-ordered value or raises
ConfigurationError; callers decide the fallback.
"""

import math
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .models import IntensityBand

LAST_MINUTE_OF_DAY = 23 * 60 + 59


@dataclass(frozen=True)
class CatalogRow:
    """Parsed ``"weight minPercent maxPercent minDwellSec maxDwellSec"`` value."""

    weight: float
    percent_min: float
    percent_max: float
    dwell_min: int
    dwell_max: int


def _clamp(value, low, high):
    return min(max(value, low), high)


def parse_hhmm(text: str) -> int:
    """Parse ``HH:MM`` or ``HH`` into minutes since midnight.

    Raises:
        ConfigurationError: If the text is not a valid time of day
    """
    cleaned = "".join(str(text).split())
    try:
        if ":" in cleaned:
            hour_text, minute_text = cleaned.split(":", 1)
            hour, minute = int(hour_text), int(minute_text)
        else:
            hour, minute = int(cleaned), 0
    except ValueError as e:
        raise ConfigurationError(f"Invalid time of day: {text!r}") from e

    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ConfigurationError(f"Time of day out of range: {text!r}")
    return hour * 60 + minute


def clamp_minutes(minutes: int) -> int:
    return _clamp(minutes, 0, LAST_MINUTE_OF_DAY)


def parse_band(text: str) -> IntensityBand:
    """Parse ``"min, max"`` into an intensity band inside [0, 1].

    Reversed bounds are swapped.

    Raises:
        ConfigurationError: If the value does not hold two numbers
    """
    parts = [p.strip() for p in str(text).split(",")]
    if len(parts) != 2:
        raise ConfigurationError(f"Expected 'min, max', got {text!r}")
    try:
        low, high = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise ConfigurationError(f"Non-numeric band: {text!r}") from e
    if not (math.isfinite(low) and math.isfinite(high)):
        raise ConfigurationError(f"Non-finite band: {text!r}")

    if high < low:
        low, high = high, low
    return IntensityBand(_clamp(low, 0.0, 1.0), _clamp(high, 0.0, 1.0))


def parse_catalog_row(text: str) -> CatalogRow:
    """Parse a zone catalogue row.

    Weight is floored at 0, percents are clamped to [0, 100], dwell seconds
    are floored at 0, and reversed bounds are swapped.

    Raises:
        ConfigurationError: If the value does not hold five numbers
    """
    tokens = str(text).replace(",", " ").split()
    if len(tokens) != 5:
        raise ConfigurationError(
            f"Expected 'weight minPercent maxPercent minDwellSec maxDwellSec', got {text!r}"
        )
    try:
        weight = float(tokens[0])
        pct_a, pct_b = float(tokens[1]), float(tokens[2])
        dwell_a, dwell_b = int(float(tokens[3])), int(float(tokens[4]))
    except (ValueError, OverflowError) as e:
        raise ConfigurationError(f"Non-numeric catalogue row: {text!r}") from e
    if not (math.isfinite(weight) and math.isfinite(pct_a) and math.isfinite(pct_b)):
        raise ConfigurationError(f"Non-finite catalogue row: {text!r}")

    if pct_b < pct_a:
        pct_a, pct_b = pct_b, pct_a
    if dwell_b < dwell_a:
        dwell_a, dwell_b = dwell_b, dwell_a

    return CatalogRow(
        weight=max(weight, 0.0),
        percent_min=_clamp(pct_a, 0.0, 100.0),
        percent_max=_clamp(pct_b, 0.0, 100.0),
        dwell_min=max(dwell_a, 0),
        dwell_max=max(dwell_b, 0),
    )


def parse_zone_list(text: str) -> list[int]:
    """Parse a comma separated zone id list, skipping invalid ids.

    Duplicates are dropped, first occurrence wins.
    """
    zone_ids: list[int] = []
    for token in str(text).split(","):
        token = token.strip()
        if not token:
            continue
        try:
            zone_id = int(token)
        except ValueError:
            continue
        if zone_id >= 0 and zone_id not in zone_ids:
            zone_ids.append(zone_id)
    return zone_ids
