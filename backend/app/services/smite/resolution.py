import logging
from typing import Callable, Optional

from .state import RunOutcome, RunState


class ResolutionEngine:
    """Turns a smite request into one delayed, HP-sampling evaluation.

    The HP is read when the evaluation fires, not when it is requested, so
    decay ticks landing inside the latency window change the result.
    """

    def __init__(self, timeline, hooks, lock, get_latency: Callable[[], float],
                 on_outcome: Callable[[RunState, RunOutcome], None],
                 logger: Optional[logging.Logger] = None):
        self.timeline = timeline
        self.hooks = hooks
        self.lock = lock
        self.get_latency = get_latency
        self.on_outcome = on_outcome
        self.logger = logger or logging.getLogger(__name__)
        self.state: Optional[RunState] = None

    def attach(self, state: RunState) -> None:
        self.state = state

    def request_smite(self) -> bool:
        """Schedule the evaluation; returns False when the request is ignored."""
        state = self.state
        if state is None or not state.active or not state.hovering or state.smite_pending:
            self.logger.debug(
                f"[smite-ignored] run={state.run_id if state else None} "
                f"active={state.active if state else False} hovering={state.hovering if state else False}"
            )
            return False
        latency = self.get_latency()
        state.smite_pending = True
        self.logger.info(f"[smite-request] run={state.run_id} hp={state.monster_hp:.1f} latency={latency}ms")
        self.timeline.call_later(latency, self._fire, state.run_id)
        return True

    def _fire(self, run_id: int) -> None:
        with self.lock:
            self.resolve(run_id)

    def resolve(self, run_id: int) -> Optional[RunOutcome]:
        state = self.state
        if state is None or state.run_id != run_id:
            self.logger.info(f"[timer-abort] run={run_id} smite superseded by a newer run")
            return None
        hp = state.monster_hp
        state.smite_pending = False
        self.hooks.smite_landed(state, hp)
        outcome = RunOutcome.from_smite(hp, state.profile)
        if state.outcome is not None:
            # Decay already ended this run; the landed smite is shown but not scored
            state.active = False
            self.logger.info(
                f"[smite-late] run={run_id} hp={hp:.1f} already_ended={state.outcome.reason.value}"
            )
            return outcome
        self.logger.info(f"[smite-resolve] run={run_id} hp={hp:.1f} success={outcome.success} score={outcome.score:.1f}")
        self.on_outcome(state, outcome)
        return outcome
