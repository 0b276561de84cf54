"""
Range and Weight Tables

Static lookups derived from the options: the absolute intensity band of every
(day part, condition) pair and each managed zone's weighted catalogue per day
part. Rebuilt wholesale by ``reload``.
"""

import logging

from .config_parser import parse_band, parse_catalog_row
from .exceptions import ConfigurationError
from .models import DEFAULT_BAND, CatalogEntry, Condition, DayPart, IntensityBand
from .settings import KEY_PREFIX, ConfigSource

logger = logging.getLogger(__name__)


def band_key(day_part: DayPart, condition: Condition) -> str:
    return f"{KEY_PREFIX}.Intensity.InternalRange.{day_part.name}.{condition.token}"


def catalog_key(zone_id: int, day_part: DayPart, condition: Condition) -> str:
    return f"{KEY_PREFIX}.Zone.{zone_id}.{day_part.name}.{condition.token}"


class RangeWeightTables:
    """Intensity bands and zone catalogues."""

    def __init__(self):
        self.bands: dict[DayPart, dict[Condition, IntensityBand]] = {part: {} for part in DayPart}
        self.catalogs: dict[int, dict[DayPart, list[CatalogEntry]]] = {}

    def reload(self, source: ConfigSource, zone_ids: list[int]) -> None:
        """Replace all bands and catalogues from ``source``."""
        bands: dict[DayPart, dict[Condition, IntensityBand]] = {part: {} for part in DayPart}
        for part in DayPart:
            for condition in Condition:
                bands[part][condition] = self._read_band(source, part, condition)

        catalogs: dict[int, dict[DayPart, list[CatalogEntry]]] = {}
        for zone_id in zone_ids:
            per_part = {part: self._read_catalog(source, zone_id, part) for part in DayPart}
            if any(per_part.values()):
                catalogs[zone_id] = per_part

        self.bands = bands
        self.catalogs = catalogs

        rows = sum(len(entries) for per_part in catalogs.values() for entries in per_part.values())
        logger.info(f"Loaded {rows} catalogue row(s) for {len(catalogs)} of {len(zone_ids)} zone(s)")

    def lookup_band(self, day_part: DayPart, condition: Condition) -> IntensityBand:
        return self.bands.get(day_part, {}).get(condition, DEFAULT_BAND)

    def lookup_catalog(self, zone_id: int, day_part: DayPart) -> list[CatalogEntry]:
        return self.catalogs.get(zone_id, {}).get(day_part, [])

    def has_catalog(self, zone_id: int) -> bool:
        """Whether the zone has at least one row in any day part."""
        return any(self.catalogs.get(zone_id, {}).values())

    @staticmethod
    def _read_band(source: ConfigSource, part: DayPart, condition: Condition) -> IntensityBand:
        key = band_key(part, condition)
        text = source.get_string(key, "")
        if not text:
            return DEFAULT_BAND
        try:
            return parse_band(text)
        except ConfigurationError as e:
            logger.warning(f"{key}: {e}, using default band")
            return DEFAULT_BAND

    @staticmethod
    def _read_catalog(source: ConfigSource, zone_id: int, part: DayPart) -> list[CatalogEntry]:
        entries = []
        for condition in Condition:
            key = catalog_key(zone_id, part, condition)
            text = source.get_string(key, "")
            if not text:
                continue
            try:
                row = parse_catalog_row(text)
            except ConfigurationError as e:
                logger.warning(f"{key}: {e}, row skipped")
                continue
            entries.append(
                CatalogEntry(
                    condition=condition,
                    weight=row.weight,
                    percent_min=row.percent_min,
                    percent_max=row.percent_max,
                    dwell_min=row.dwell_min,
                    dwell_max=row.dwell_max,
                )
            )
        return entries
