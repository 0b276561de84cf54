"""
Zone Scheduler

Per-zone state machine that keeps every managed zone's weather moving:

    IDLE -> (select + plan) -> FADE_OUT -> FADE_IN -> DWELL -> (select + plan) ...

Time arrives in fixed quanta from the engine. Each zone first burns its
one-time start offset, then advances its current phase. Fade steps fire each
time the step timer runs out; a burst of elapsed time fires several steps in
one quantum. A zone without a usable catalogue entry simply stays idle.
"""

import logging
import random
from typing import Callable

from .fade import FadePlan, plan_fade, step_toward
from .models import CatalogEntry, Condition, DayPart, Phase, ZoneRuntime
from .selection import pick
from .settings import EngineSettings
from .tables import RangeWeightTables

logger = logging.getLogger(__name__)

PushFn = Callable[[int, Condition, float], bool]


class ZoneScheduler:
    """Owns and advances one ZoneRuntime per managed zone."""

    def __init__(
        self,
        tables: RangeWeightTables,
        settings: EngineSettings,
        push: PushFn,
        rng: random.Random
    ):
        self.tables = tables
        self.settings = settings
        self.push = push
        self.rng = rng
        self.runtimes: dict[int, ZoneRuntime] = {}

    def reset(self) -> None:
        """Drop every runtime, including in-flight fades."""
        self.runtimes.clear()

    def runtime(self, zone_id: int) -> ZoneRuntime | None:
        return self.runtimes.get(zone_id)

    def seed_zones(self) -> None:
        """Create runtimes for managed zones that now have a catalogue."""
        for zone_id in self.settings.zone_ids:
            if zone_id in self.runtimes or not self.tables.has_catalog(zone_id):
                continue
            offset = self.rng.randint(0, self.settings.start_offset_max) if self.settings.start_offset_max else 0
            self.runtimes[zone_id] = ZoneRuntime(zone_id=zone_id, start_offset_remaining=float(offset))
            logger.debug(f"Zone {zone_id}: managed, start offset {offset}s")

    def advance(self, quantum: float, day_part: DayPart) -> None:
        """Advance every managed zone by one quantum."""
        self.seed_zones()
        for runtime in list(self.runtimes.values()):
            try:
                self._advance_zone(runtime, quantum, day_part)
            except Exception as e:
                logger.error(f"Error advancing zone {runtime.zone_id}: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Phase handling
    # ------------------------------------------------------------------

    def _advance_zone(self, rt: ZoneRuntime, quantum: float, day_part: DayPart) -> None:
        if rt.start_offset_remaining > 0:
            rt.start_offset_remaining -= quantum
            if rt.start_offset_remaining > 0:
                return
            rt.start_offset_remaining = 0.0

        if rt.day_part is not day_part:
            if rt.day_part is not None:
                logger.debug(f"Zone {rt.zone_id}: day part {rt.day_part.display_name} -> {day_part.display_name}")
            rt.day_part = day_part
            rt.repeat.count = 0

        if rt.phase is Phase.IDLE:
            self._select_and_plan(rt, day_part)
            return

        if rt.phase is Phase.DWELL:
            rt.dwell_remaining -= quantum
            if rt.dwell_remaining <= 0:
                rt.dwell_remaining = 0.0
                self._select_and_plan(rt, day_part)
            return

        rt.step_timer -= quantum
        while rt.step_timer <= 0 and rt.phase in (Phase.FADE_OUT, Phase.FADE_IN):
            rt.step_timer += rt.step_interval
            if rt.phase is Phase.FADE_OUT:
                self._fade_out_step(rt)
            else:
                self._fade_in_step(rt)

    def _select_and_plan(self, rt: ZoneRuntime, day_part: DayPart) -> bool:
        """Pick the next condition and start its first phase.

        Returns False, leaving the zone idle, when nothing can be picked.
        """
        catalog = self.tables.lookup_catalog(rt.zone_id, day_part)
        picked = pick(catalog, rt.repeat, self.settings.repeat_max, self.rng)
        entry = _find_entry(catalog, picked)
        if entry is None:
            if rt.phase is not Phase.IDLE:
                logger.debug(f"Zone {rt.zone_id}: nothing to pick for {day_part.display_name}, holding")
            rt.phase = Phase.IDLE
            return False

        rt.repeat.record(entry.condition)

        picked_band = self.tables.lookup_band(day_part, entry.condition)
        current_band = None
        if rt.current_condition is not None:
            current_band = self.tables.lookup_band(day_part, rt.current_condition)
        percent = self.rng.uniform(entry.percent_min, entry.percent_max) / 100.0

        plan = plan_fade(
            current_condition=rt.current_condition if rt.initialized else None,
            current_intensity=rt.current_intensity,
            picked_condition=entry.condition,
            picked_band=picked_band,
            percent=percent,
            fade_step=self.settings.fade_step,
            current_band=current_band,
        )
        self._apply_plan(rt, entry, plan)
        return True

    def _apply_plan(self, rt: ZoneRuntime, entry: CatalogEntry, plan: FadePlan) -> None:
        rt.entry = entry
        rt.target_condition = plan.condition
        rt.target_intensity = plan.target_intensity
        rt.fade_out_to = plan.fade_out_to
        rt.fade_out_steps = plan.fade_out_steps
        rt.fade_in_from = plan.fade_in_from
        rt.fade_in_steps = plan.fade_in_steps

        logger.debug(
            f"Zone {rt.zone_id}: picked {plan.condition.display_name} "
            f"target={plan.target_intensity:.4f} phases={[p.value for p in plan.phases]} "
            f"repeat={rt.repeat.count}"
        )

        if plan.fade_out_steps or plan.fade_in_steps:
            rt.step_interval = float(
                self.rng.randint(self.settings.fade_step_seconds_min, self.settings.fade_step_seconds_max)
            )
            rt.step_timer = rt.step_interval

        if plan.fade_out_steps:
            rt.current_intensity = plan.fade_out_from
            rt.phase = Phase.FADE_OUT
        elif plan.fade_in_steps:
            self._begin_fade_in(rt)
        else:
            self._settle(rt)

    def _begin_fade_in(self, rt: ZoneRuntime) -> None:
        """Switch to the target condition at the fade-in start value."""
        unchanged = (
            rt.initialized
            and rt.current_condition is rt.target_condition
            and rt.current_intensity == rt.fade_in_from
        )
        rt.current_condition = rt.target_condition
        rt.current_intensity = rt.fade_in_from
        rt.phase = Phase.FADE_IN
        if not unchanged:
            self._emit(rt)

    def _settle(self, rt: ZoneRuntime) -> None:
        """Land on the target without fading, then dwell."""
        changed = (
            not rt.initialized
            or rt.current_condition is not rt.target_condition
            or rt.current_intensity != rt.target_intensity
        )
        rt.current_condition = rt.target_condition
        rt.current_intensity = rt.target_intensity
        if changed:
            self._emit(rt)
        self._enter_dwell(rt)

    def _fade_out_step(self, rt: ZoneRuntime) -> None:
        rt.fade_out_steps -= 1
        if rt.fade_out_steps <= 0:
            rt.fade_out_steps = 0
            rt.current_intensity = rt.fade_out_to
        else:
            rt.current_intensity = step_toward(rt.current_intensity, rt.fade_out_to, self.settings.fade_step)
        self._emit(rt)

        if rt.fade_out_steps:
            return
        if rt.fade_in_steps:
            self._begin_fade_in(rt)
        else:
            self._settle(rt)

    def _fade_in_step(self, rt: ZoneRuntime) -> None:
        rt.fade_in_steps -= 1
        if rt.fade_in_steps <= 0:
            rt.fade_in_steps = 0
            rt.current_intensity = rt.target_intensity
            self._emit(rt)
            self._enter_dwell(rt)
            return

        value = step_toward(rt.current_intensity, rt.target_intensity, self.settings.fade_step)
        rt.current_intensity = max(value, rt.fade_in_from)
        self._emit(rt)

    def _enter_dwell(self, rt: ZoneRuntime) -> None:
        rt.phase = Phase.DWELL
        rt.step_timer = 0.0
        rt.dwell_remaining = float(self.rng.randint(rt.entry.dwell_min, rt.entry.dwell_max))
        logger.debug(
            f"Zone {rt.zone_id}: dwelling on {rt.current_condition.display_name} "
            f"{rt.current_intensity:.4f} for {rt.dwell_remaining:.0f}s"
        )

    def _emit(self, rt: ZoneRuntime) -> None:
        self.push(rt.zone_id, rt.current_condition, rt.current_intensity)
        rt.initialized = True


def _find_entry(catalog: list[CatalogEntry], condition: Condition | None) -> CatalogEntry | None:
    if condition is None:
        return None
    return next((entry for entry in catalog if entry.condition is condition), None)
