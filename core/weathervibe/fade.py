"""
Fade Planning

Works out how a zone gets from its current condition and intensity to a newly
picked one: an optional fade-out, an optional fade-in, and the step counts for
each.

Cases, in priority order:
1. First activation: no fade-out, start the picked condition at its band
   minimum and fade in to the target.
2. Same condition, target above current: fade in from max(current, band min).
3. Same condition, target at or below current: fade out to the target.
4. Different condition: fade out from the current condition's band maximum
   down to the new band minimum, then fade in to the target.
"""

import math
from dataclasses import dataclass

from .models import Condition, IntensityBand, Phase

MIN_GRADE = 0.0001
MAX_GRADE = 0.9999

# Absorbs float noise in delta / step so 0.1 / 0.05 stays 2 steps
_STEP_EPSILON = 1e-9


@dataclass(frozen=True)
class FadePlan:
    """Result of planning one transition."""

    condition: Condition
    target_intensity: float
    first_activation: bool
    fade_out_from: float
    fade_out_to: float
    fade_out_steps: int
    fade_in_from: float
    fade_in_steps: int

    @property
    def phases(self) -> tuple[Phase, ...]:
        """Non-empty fade phases followed by the dwell."""
        sequence = []
        if self.fade_out_steps:
            sequence.append(Phase.FADE_OUT)
        if self.fade_in_steps:
            sequence.append(Phase.FADE_IN)
        sequence.append(Phase.DWELL)
        return tuple(sequence)


def clamp_to_core_bounds(intensity: float) -> float:
    """Keep transmitted intensities strictly inside (0, 1).

    Non-finite values map to the lower bound.
    """
    if not math.isfinite(intensity) or intensity <= 0.0:
        return MIN_GRADE
    if intensity >= 1.0:
        return MAX_GRADE
    return intensity


def map_percent_to_intensity(band: IntensityBand, percent: float) -> float:
    """Map a 0-1 percent draw into ``band``."""
    return band.map_percent(percent)


def step_count(delta: float, fade_step: float) -> int:
    """Steps needed to cover ``delta`` in increments of ``fade_step``."""
    if fade_step <= 0:
        return 0
    return max(math.ceil(abs(delta) / fade_step - _STEP_EPSILON), 0)


def step_toward(value: float, target: float, fade_step: float) -> float:
    """Move ``value`` one step toward ``target`` without overshooting."""
    if value < target:
        return min(value + fade_step, target)
    return max(value - fade_step, target)


def plan_fade(
    current_condition: Condition | None,
    current_intensity: float,
    picked_condition: Condition,
    picked_band: IntensityBand,
    percent: float,
    fade_step: float,
    current_band: IntensityBand | None = None,
) -> FadePlan:
    """Plan the transition to ``picked_condition``.

    Args:
        current_condition: Condition on screen, None before first activation
        current_intensity: Intensity on screen
        picked_condition: Newly selected condition
        picked_band: Band of the picked condition for the current day part
        percent: Percent draw in [0, 1]
        fade_step: Intensity change per pushed step
        current_band: Band of the current condition, used when the condition
            changes

    Returns:
        The fade plan
    """
    target = map_percent_to_intensity(picked_band, percent)

    if current_condition is None:
        return FadePlan(
            condition=picked_condition,
            target_intensity=target,
            first_activation=True,
            fade_out_from=picked_band.min,
            fade_out_to=picked_band.min,
            fade_out_steps=0,
            fade_in_from=picked_band.min,
            fade_in_steps=step_count(target - picked_band.min, fade_step),
        )

    if current_condition is picked_condition:
        if target > current_intensity:
            start = max(current_intensity, picked_band.min)
            return FadePlan(
                condition=picked_condition,
                target_intensity=target,
                first_activation=False,
                fade_out_from=current_intensity,
                fade_out_to=current_intensity,
                fade_out_steps=0,
                fade_in_from=start,
                fade_in_steps=step_count(target - start, fade_step),
            )
        return FadePlan(
            condition=picked_condition,
            target_intensity=target,
            first_activation=False,
            fade_out_from=current_intensity,
            fade_out_to=target,
            fade_out_steps=step_count(current_intensity - target, fade_step),
            fade_in_from=target,
            fade_in_steps=0,
        )

    fade_out_from = (current_band or picked_band).max
    return FadePlan(
        condition=picked_condition,
        target_intensity=target,
        first_activation=False,
        fade_out_from=fade_out_from,
        fade_out_to=picked_band.min,
        fade_out_steps=step_count(fade_out_from - picked_band.min, fade_step),
        fade_in_from=picked_band.min,
        fade_in_steps=step_count(target - picked_band.min, fade_step),
    )
