"""
Day Part and Season Derivation

Maps a wall-clock reading onto the day-part buckets used by the catalogues,
honoring forced modes from the options.
"""

import time

from .models import DayPart, LocalTime, Season
from .settings import DayPartStarts

# Spring starts around March 20 (zero-based day 78)
SPRING_ANCHOR_YDAY = 78
SEASON_LENGTH_DAYS = 91


class SystemClock:
    """Local wall clock."""

    def now_local(self) -> LocalTime:
        now = time.localtime()
        return LocalTime(hour=now.tm_hour, minute=now.tm_min, day_of_year=now.tm_yday)


def day_part_for_minute(minute_of_day: int, starts: DayPartStarts) -> DayPart:
    """Bucket a minute of the day; night wraps past midnight."""
    if minute_of_day >= starts.night or minute_of_day < starts.morning:
        return DayPart.NIGHT
    if minute_of_day >= starts.evening:
        return DayPart.EVENING
    if minute_of_day >= starts.afternoon:
        return DayPart.AFTERNOON
    return DayPart.MORNING


def current_day_part(clock, starts: DayPartStarts, mode: str = "auto") -> DayPart:
    """Forced day part if ``mode`` names one, otherwise derived from the clock."""
    forced = mode.strip().upper()
    if forced in DayPart.__members__:
        return DayPart[forced]
    return day_part_for_minute(clock.now_local().minute_of_day, starts)


def season_for_day(day_of_year: int) -> Season:
    yday = day_of_year - 1
    index = ((yday - SPRING_ANCHOR_YDAY + 365) // SEASON_LENGTH_DAYS) % 4
    return Season(index)


def current_season(clock, mode: str = "auto") -> Season:
    """Forced season if ``mode`` names one, otherwise derived from the clock."""
    forced = mode.strip().upper()
    if forced in Season.__members__:
        return Season[forced]
    return season_for_day(clock.now_local().day_of_year)
