"""Tests for the administrative command surface."""

import pytest

from core.weathervibe.commands import CommandHandler
from core.weathervibe.exceptions import CommandError
from core.weathervibe.fade import MAX_GRADE
from core.weathervibe.models import Condition

FOG_BAND = {"WeatherVibe.Intensity.InternalRange.MORNING.Fog": "0.20, 0.60"}


@pytest.fixture
def handler(make_engine):
    return CommandHandler(make_engine(FOG_BAND))


class TestSet:
    """Tests for ``set`` and ``setRaw``."""

    def test_set_maps_percent_through_day_part_band(self, handler, transport):
        result = handler.set_percent(1519, "1", 50)
        assert result.success
        zone, condition, value = transport.broadcasts[-1]
        assert (zone, condition) == (1519, Condition.FOG)
        assert value == pytest.approx(0.40)

    def test_set_accepts_condition_tokens(self, handler, transport):
        handler.set_percent(1519, "LightRain", 0)
        assert transport.broadcasts[-1][1] is Condition.LIGHT_RAIN

    def test_set_clamps_percent(self, handler, transport):
        handler.set_percent(1519, "fog", 250)
        assert transport.broadcasts[-1][2] == pytest.approx(0.60)

    def test_set_raw_clamps_to_core_bounds(self, handler, transport):
        result = handler.set_raw(1519, "86", 1.5)
        assert result.success
        assert transport.broadcasts[-1] == (1519, Condition.THUNDERS, MAX_GRADE)
        assert handler.engine.cache.get(1519).intensity == MAX_GRADE

    def test_unknown_condition_is_rejected_without_side_effects(self, handler, transport):
        with pytest.raises(CommandError, match="Invalid state"):
            handler.set_percent(1519, "2", 50)
        with pytest.raises(CommandError):
            handler.set_raw(1519, "drizzle", 0.5)
        assert transport.broadcasts == []
        assert handler.engine.cache.get(1519) is None

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
    def test_non_finite_numbers_are_rejected(self, handler, transport, value):
        with pytest.raises(CommandError, match="Invalid"):
            handler.set_raw(1519, "3", value)
        with pytest.raises(CommandError, match="Invalid"):
            handler.set_percent(1519, "3", value)
        assert not handler.execute(f"setRaw 1519 3 {value}").success
        assert transport.broadcasts == []
        assert handler.engine.cache.get(1519) is None

    def test_disabled_module_rejects_commands(self, make_engine, transport):
        handler = CommandHandler(make_engine({"WeatherVibe.Enable": "0"}))
        for action, args in (
            (handler.set_percent, (1, "1", 50)),
            (handler.set_raw, (1, "1", 0.5)),
            (handler.reload, ()),
            (handler.show, ()),
        ):
            with pytest.raises(CommandError, match="disabled"):
                action(*args)
        assert transport.broadcasts == []


class TestExecute:
    """Tests for console command lines."""

    def test_set_line(self, handler, transport):
        result = handler.execute("set 1519 1 100")
        assert result.success
        assert transport.broadcasts[-1][2] == pytest.approx(0.60)

    def test_set_raw_is_case_insensitive(self, handler, transport):
        assert handler.execute("SETRAW 1519 fog 0.5").success
        assert transport.broadcasts[-1] == (1519, Condition.FOG, 0.5)

    def test_wrong_argument_count_shows_usage(self, handler):
        result = handler.execute("set 1519 1")
        assert not result.success
        assert "Usage: set <zoneId> <state> <percentage:0..100>" in result.message

    def test_unknown_command(self, handler):
        result = handler.execute("explode")
        assert not result.success
        assert "Unknown command" in result.message

    def test_rejections_become_failed_results(self, handler):
        result = handler.execute("set 1519 2 50")
        assert not result.success
        assert "Invalid state" in result.message

    def test_invalid_numbers(self, handler):
        assert not handler.execute("set abc 1 50").success
        assert not handler.execute("set 1519 1 lots").success


class TestShowAndReload:
    """Tests for ``show`` and ``reload``."""

    def test_show_with_nothing_recorded(self, handler):
        result = handler.show()
        assert result.success
        assert "No last-applied weather recorded yet" in result.message

    def test_show_lists_zones(self, handler):
        handler.set_raw(1519, "fog", 0.5)
        result = handler.show()
        assert "season=Spring" in result.message
        assert "daypart=Morning" in result.message
        assert "zone 1519 -> last state=fog raw=0.50" in result.message

    def test_show_includes_scheduler_state(self, make_engine):
        handler = CommandHandler(make_engine({"WeatherVibe.Zone.12.MORNING.Fog": "1 0 100 10 10"}))
        handler.engine.tick(1.0)
        result = handler.show()
        assert "zone 12" in result.message
        assert "phase=" in result.message

    def test_reload(self, handler):
        handler.engine.tick(1.0)
        result = handler.reload()
        assert result.success
        assert handler.engine.scheduler.runtimes == {}
