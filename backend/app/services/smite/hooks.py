from typing import List


class GameHooks:
    """Notification sink for engine state changes. Every hook is a no-op."""

    def run_started(self, state, best_scores: List[float]) -> None:
        pass

    def hp_changed(self, state) -> None:
        pass

    def big_damage(self, state, amount: float) -> None:
        pass

    def smite_landed(self, state, hp: float) -> None:
        pass

    def run_ended(self, state, outcome, best_scores: List[float]) -> None:
        pass


class SocketIOHooks(GameHooks):
    """Pushes engine events to every client in the run's room on ``/ws``."""

    def __init__(self, socketio, run_code: str, namespace: str = '/ws'):
        self.socketio = socketio
        self.run_code = run_code
        self.namespace = namespace

    @property
    def room(self) -> str:
        return f"run:{self.run_code}"

    def _emit(self, event: str, payload: dict) -> None:
        payload = dict(payload, run_code=self.run_code)
        self.socketio.emit(event, payload, to=self.room, namespace=self.namespace)

    def run_started(self, state, best_scores):
        self._emit('run_started', {
            'run_id': state.run_id,
            'difficulty': state.difficulty,
            'max_hp': state.max_hp,
            'best_scores': best_scores,
        })

    def hp_changed(self, state):
        self._emit('hp_update', {
            'run_id': state.run_id,
            'hp': state.monster_hp,
            'max_hp': state.max_hp,
        })

    def big_damage(self, state, amount):
        self._emit('big_damage', {'run_id': state.run_id, 'amount': amount})

    def smite_landed(self, state, hp):
        self._emit('smite_effect', {'run_id': state.run_id, 'hp': hp})

    def run_ended(self, state, outcome, best_scores):
        payload = outcome.to_dict()
        payload.update(run_id=state.run_id, best_scores=best_scores)
        self._emit('run_ended', payload)
