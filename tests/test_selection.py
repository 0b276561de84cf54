"""Tests for weighted condition selection and the anti-repeat rule."""

import random

from core.weathervibe.models import CatalogEntry, Condition, RepeatHistory
from core.weathervibe.selection import build_pool, pick


def entry(condition, weight=1.0):
    return CatalogEntry(condition, weight, 0.0, 100.0, 10, 10)


class StubRandom:
    """Random stream returning a fixed draw."""

    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


class TestRouletteWheel:
    """Tests for the weighted draw."""

    def test_single_enabled_entry_always_wins(self):
        catalog = [entry(Condition.FOG, 3), entry(Condition.FINE, 0)]
        for seed in range(50):
            assert pick(catalog, RepeatHistory(), 2, random.Random(seed)) is Condition.FOG

    def test_draw_walks_cumulative_weights_in_catalogue_order(self):
        catalog = [entry(Condition.FINE, 1), entry(Condition.FOG, 1), entry(Condition.LIGHT_RAIN, 2)]
        assert pick(catalog, RepeatHistory(), 2, StubRandom(0.0)) is Condition.FINE
        assert pick(catalog, RepeatHistory(), 2, StubRandom(0.25)) is Condition.FOG  # draw 1.0
        assert pick(catalog, RepeatHistory(), 2, StubRandom(0.5)) is Condition.LIGHT_RAIN  # draw 2.0
        assert pick(catalog, RepeatHistory(), 2, StubRandom(0.999)) is Condition.LIGHT_RAIN

    def test_zero_weight_entries_are_never_picked(self):
        catalog = [entry(Condition.FINE, 0), entry(Condition.FOG, 1), entry(Condition.THUNDERS, 0)]
        rng = random.Random(3)
        picks = {pick(catalog, RepeatHistory(), 5, rng) for _ in range(200)}
        assert picks == {Condition.FOG}

    def test_weights_shape_the_distribution(self):
        catalog = [entry(Condition.FINE, 9), entry(Condition.FOG, 1)]
        rng = random.Random(11)
        picks = [pick(catalog, RepeatHistory(), 100, rng) for _ in range(2000)]
        share = picks.count(Condition.FINE) / len(picks)
        assert 0.85 < share < 0.95


class TestAntiRepeat:
    """Tests for excluding a condition picked too many times in a row."""

    def test_last_pick_excluded_at_limit(self):
        catalog = [entry(Condition.FINE), entry(Condition.FOG)]
        pool = build_pool(catalog, RepeatHistory(Condition.FINE, 2), repeat_max=2)
        assert [e.condition for e in pool] == [Condition.FOG]

    def test_last_pick_kept_below_limit(self):
        catalog = [entry(Condition.FINE), entry(Condition.FOG)]
        pool = build_pool(catalog, RepeatHistory(Condition.FINE, 1), repeat_max=2)
        assert len(pool) == 2

    def test_no_run_longer_than_repeat_max(self):
        catalog = [entry(Condition.FINE, 50), entry(Condition.FOG, 1), entry(Condition.LIGHT_SNOW, 1)]
        rng = random.Random(5)
        history = RepeatHistory()
        for repeat_max in (1, 2, 3):
            run, longest, previous = 0, 0, None
            for _ in range(500):
                picked = pick(catalog, history, repeat_max, rng)
                history.record(picked)
                run = run + 1 if picked is previous else 1
                previous = picked
                longest = max(longest, run)
            assert longest <= repeat_max

    def test_single_enabled_entry_repeats_forever(self):
        catalog = [entry(Condition.FOG), entry(Condition.FINE, 0)]
        rng = random.Random(1)
        history = RepeatHistory()
        for _ in range(20):
            picked = pick(catalog, history, 2, rng)
            assert picked is Condition.FOG
            history.record(picked)
        assert history.count == 20

    def test_empty_pool_falls_back_to_last_pick(self):
        catalog = [entry(Condition.FOG, 0)]
        assert pick(catalog, RepeatHistory(Condition.THUNDERS, 1), 2, random.Random(0)) is Condition.THUNDERS

    def test_empty_pool_without_history_picks_nothing(self):
        assert pick([entry(Condition.FOG, 0)], RepeatHistory(), 2, random.Random(0)) is None
        assert pick([], RepeatHistory(), 2, random.Random(0)) is None


class TestRepeatHistory:
    """Tests for consecutive pick counting."""

    def test_same_pick_increments(self):
        history = RepeatHistory()
        history.record(Condition.FOG)
        history.record(Condition.FOG)
        assert (history.last_picked, history.count) == (Condition.FOG, 2)

    def test_different_pick_resets_to_one(self):
        history = RepeatHistory(Condition.FOG, 4)
        history.record(Condition.FINE)
        assert (history.last_picked, history.count) == (Condition.FINE, 1)
