"""
Weighted Condition Selection

Roulette-wheel pick over a zone's catalogue with an anti-repeat rule: once a
condition has been picked ``repeat_max`` times in a row it sits out the next
draw, unless it is the only candidate left.
"""

import random

from .models import CatalogEntry, Condition, RepeatHistory


def build_pool(
    catalog: list[CatalogEntry],
    repeat: RepeatHistory,
    repeat_max: int
) -> list[CatalogEntry]:
    """Enabled entries, minus the last pick if it has hit the repeat limit."""
    pool = [entry for entry in catalog if entry.enabled]
    if repeat.last_picked is not None and repeat.count >= repeat_max:
        pool = [entry for entry in pool if entry.condition is not repeat.last_picked]
    return pool


def pick(
    catalog: list[CatalogEntry],
    repeat: RepeatHistory,
    repeat_max: int,
    rng: random.Random
) -> Condition | None:
    """Pick the next condition for a zone.

    Args:
        catalog: The zone's entries for the current day part, in config order
        repeat: The zone's repeat history
        repeat_max: Consecutive picks allowed before the condition is excluded
        rng: Random stream; one draw is taken when the pool is non-empty

    Returns:
        The picked condition. An empty pool returns the last picked condition,
        or None when there is no history either.
    """
    pool = build_pool(catalog, repeat, repeat_max)
    if not pool:
        return repeat.last_picked

    total = sum(entry.weight for entry in pool)
    draw = rng.random() * total
    cumulative = 0.0
    for entry in pool:
        cumulative += entry.weight
        if draw < cumulative:
            return entry.condition

    # Float rounding can leave the draw at the very top of the wheel
    return pool[-1].condition
