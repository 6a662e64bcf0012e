import logging
from typing import Callable, Optional, Set

from .state import OutcomeReason, RunOutcome, RunState

# Per-tick damage and interval ranges (HP, milliseconds); upper bounds exclusive
DECREASE_RANGE = (50, 150)
DELAY_RANGE = (200, 600)
BIG_DAMAGE_RANGE = (200, 500)


def draw_uniform(rng, low: float, high: float) -> float:
    return low + rng.random() * (high - low)


class DecayScheduler:
    """Drains monster HP on a jittered, self-rescheduling timer.

    - First tick runs synchronously from ``start``
    - Ensures a single pending tick per run id
    - Stops once the run is inactive or a newer run has replaced it
    - Reports decay failures through ``on_outcome``
    """

    def __init__(self, timeline, rng, hooks, lock, on_outcome: Callable[[RunState, RunOutcome], None],
                 logger: Optional[logging.Logger] = None):
        self.timeline = timeline
        self.rng = rng
        self.hooks = hooks
        self.lock = lock
        self.on_outcome = on_outcome
        self.logger = logger or logging.getLogger(__name__)
        self.state: Optional[RunState] = None
        self._scheduled: Set[int] = set()

    def start(self, state: RunState) -> None:
        self.state = state
        self.tick(state.run_id)

    def _is_current(self, run_id: int) -> bool:
        return self.state is not None and self.state.run_id == run_id

    def _schedule(self, run_id: int, delay: float) -> None:
        if run_id in self._scheduled:
            self.logger.info(f"[timer-skip] run={run_id} decay tick already scheduled")
            return
        self._scheduled.add(run_id)
        self.timeline.call_later(delay, self._fire, run_id)

    def _fire(self, run_id: int) -> None:
        with self.lock:
            self._scheduled.discard(run_id)
            self.tick(run_id)

    def tick(self, run_id: int) -> None:
        if not self._is_current(run_id):
            self.logger.info(f"[timer-abort] run={run_id} superseded by a newer run")
            return
        state = self.state
        if not state.active:
            return

        profile = state.profile
        decrease = draw_uniform(self.rng, *DECREASE_RANGE)
        delay = draw_uniform(self.rng, *DELAY_RANGE)

        if profile.speed_increase_threshold > 0 and state.monster_hp < profile.speed_increase_threshold:
            delay = draw_uniform(self.rng, *profile.fast_delay_range)

        # The Bernoulli draw happens even when the HP floor suppresses the hit
        if profile.big_damage_chance > 0 and self.rng.random() < profile.big_damage_chance \
                and state.monster_hp > profile.big_damage_min_hp:
            decrease = draw_uniform(self.rng, *BIG_DAMAGE_RANGE)
            self.logger.info(f"[big-damage] run={run_id} amount={decrease:.1f} hp_before={state.monster_hp:.1f}")
            self.hooks.big_damage(state, decrease)

        state.apply_damage(decrease)
        self.hooks.hp_changed(state)
        self.logger.debug(
            f"[decay-tick] run={run_id} decrease={decrease:.1f} hp={state.monster_hp:.1f} next_in={delay:.0f}ms"
        )

        if profile.fail_threshold > 0 and state.monster_hp < profile.fail_threshold:
            self.on_outcome(state, RunOutcome.from_decay(OutcomeReason.BELOW_THRESHOLD, state.monster_hp, profile))
            return
        if state.monster_hp <= 0:
            self.on_outcome(state, RunOutcome.from_decay(OutcomeReason.DIED, 0, profile))
            return

        self._schedule(run_id, delay)
