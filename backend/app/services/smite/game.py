import logging
import random
import threading
from typing import List, Optional

from .difficulty import get_profile
from .hooks import GameHooks
from .resolution import ResolutionEngine
from .scheduler import DecayScheduler
from .state import RunOutcome, RunState


class SmiteGame:
    """One player's session: owns the current run and drives its engines.

    ``preferences`` must provide ``get_latency()``, ``get_best_scores(tier)``
    and ``add_best_score(tier, hp)``. ``rng`` only needs ``random()``.
    """

    def __init__(self, preferences, timeline, rng=None, hooks: Optional[GameHooks] = None,
                 logger: Optional[logging.Logger] = None):
        self.preferences = preferences
        self.timeline = timeline
        self.rng = rng if rng is not None else random.Random()
        self.hooks = hooks or GameHooks()
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()
        self.state: Optional[RunState] = None
        self.hovering = False
        self._run_seq = 0

        self.decay = DecayScheduler(self.timeline, self.rng, self.hooks, self.lock,
                                    self._report_outcome, logger=self.logger)
        self.resolution = ResolutionEngine(self.timeline, self.hooks, self.lock,
                                           self.preferences.get_latency, self._report_outcome,
                                           logger=self.logger)

    @property
    def difficulty(self) -> Optional[str]:
        return self.state.difficulty if self.state else None

    def start_run(self, difficulty: str) -> RunState:
        profile = get_profile(difficulty)
        with self.lock:
            self._run_seq += 1
            state = RunState(run_id=self._run_seq, profile=profile, hovering=self.hovering)
            self.state = state
            self.resolution.attach(state)
            self.logger.info(f"[run-start] run={state.run_id} difficulty={profile.name} hp={state.monster_hp:.0f}")
            self.hooks.run_started(state, self.preferences.get_best_scores(profile.name))
            self.decay.start(state)
            return state

    def restart(self) -> RunState:
        if self.state is None:
            raise RuntimeError('No run to restart')
        return self.start_run(self.state.difficulty)

    def stop(self) -> None:
        """Abandon the current run without reporting an outcome."""
        with self.lock:
            if self.state is None:
                return
            self.logger.info(f"[run-stop] run={self.state.run_id} hp={self.state.monster_hp:.1f}")
            self.state.active = False
            # Pending callbacks of the old run find no current state and abort
            self.state = None
            self.decay.state = None
            self.resolution.attach(None)

    def set_hovering(self, hovering: bool) -> None:
        with self.lock:
            self.hovering = bool(hovering)
            if self.state is not None:
                self.state.hovering = self.hovering

    def request_smite(self) -> bool:
        with self.lock:
            return self.resolution.request_smite()

    def best_scores(self, difficulty: Optional[str] = None) -> List[float]:
        tier = difficulty or self.difficulty
        return self.preferences.get_best_scores(tier) if tier else []

    def snapshot(self) -> dict:
        with self.lock:
            return {
                'hovering': self.hovering,
                'run': self.state.to_dict() if self.state else None,
            }

    def _report_outcome(self, state: RunState, outcome: RunOutcome) -> None:
        if not state.finish(outcome):
            return
        self.logger.info(
            f"[run-end] run={state.run_id} reason={outcome.reason.value} hp={outcome.hp:.1f} score={outcome.score:.1f}"
        )
        if outcome.success:
            self.preferences.add_best_score(state.difficulty, outcome.hp)
        self.hooks.run_ended(state, outcome, self.preferences.get_best_scores(state.difficulty))
