"""Tests for the positional config value parsers."""

import pytest

from core.weathervibe.config_parser import (
    clamp_minutes,
    parse_band,
    parse_catalog_row,
    parse_hhmm,
    parse_zone_list,
)
from core.weathervibe.exceptions import ConfigurationError
from core.weathervibe.models import IntensityBand


class TestParseHHMM:
    """Tests for time-of-day parsing."""

    def test_hours_and_minutes(self):
        assert parse_hhmm("06:30") == 6 * 60 + 30

    def test_hour_only(self):
        assert parse_hhmm("22") == 22 * 60

    def test_whitespace_is_ignored(self):
        assert parse_hhmm(" 12 : 05 ") == 12 * 60 + 5

    @pytest.mark.parametrize("text", ["24:00", "12:60", "-1", "noon", "", "7:xx"])
    def test_invalid_times_raise(self, text):
        with pytest.raises(ConfigurationError):
            parse_hhmm(text)

    def test_clamp_minutes(self):
        assert clamp_minutes(-5) == 0
        assert clamp_minutes(5000) == 23 * 60 + 59
        assert clamp_minutes(600) == 600


class TestParseBand:
    """Tests for "min, max" intensity bands."""

    def test_plain_band(self):
        assert parse_band("0.20, 0.60") == IntensityBand(0.20, 0.60)

    def test_reversed_bounds_are_swapped(self):
        assert parse_band("0.9,0.4") == IntensityBand(0.4, 0.9)

    def test_bounds_are_clamped_to_unit_interval(self):
        assert parse_band("-0.5, 1.7") == IntensityBand(0.0, 1.0)

    @pytest.mark.parametrize("text", ["0.5", "a, b", "0.1, 0.2, 0.3", "", "nan, 0.5", "0.2, inf"])
    def test_malformed_band_raises(self, text):
        with pytest.raises(ConfigurationError):
            parse_band(text)


class TestParseCatalogRow:
    """Tests for "weight minPct maxPct minDwell maxDwell" rows."""

    def test_plain_row(self):
        row = parse_catalog_row("60 0 100 300 900")
        assert row.weight == 60
        assert (row.percent_min, row.percent_max) == (0, 100)
        assert (row.dwell_min, row.dwell_max) == (300, 900)

    def test_reversed_bands_are_swapped(self):
        row = parse_catalog_row("5 80 20 600 120")
        assert (row.percent_min, row.percent_max) == (20, 80)
        assert (row.dwell_min, row.dwell_max) == (120, 600)

    def test_values_are_clamped(self):
        row = parse_catalog_row("-3 -10 150 -5 10")
        assert row.weight == 0
        assert (row.percent_min, row.percent_max) == (0, 100)
        assert (row.dwell_min, row.dwell_max) == (0, 10)

    def test_fractional_dwell_is_truncated(self):
        row = parse_catalog_row("1 0 100 10.7 20.2")
        assert (row.dwell_min, row.dwell_max) == (10, 20)

    @pytest.mark.parametrize("text", [
        "1 0 100 10", "1 0 100 10 20 30", "x 0 100 10 20", "",
        "nan 0 100 10 20", "1 0 inf 10 20", "1 0 100 10 inf",
    ])
    def test_malformed_row_raises(self, text):
        with pytest.raises(ConfigurationError):
            parse_catalog_row(text)


class TestParseZoneList:
    """Tests for the comma separated zone list."""

    def test_ids_in_order(self):
        assert parse_zone_list("12, 1, 1519") == [12, 1, 1519]

    def test_invalid_and_duplicate_ids_are_dropped(self):
        assert parse_zone_list("12,abc,,-4,12,3") == [12, 3]

    def test_empty(self):
        assert parse_zone_list("") == []
