import random
import string
import threading
from typing import Dict, Optional, Tuple

from .game import SmiteGame
from .hooks import SocketIOHooks
from .preferences import PreferencesStore
from .timeline import ManualTimeline, SocketIOTimeline

# Process-wide sessions keyed by run code (runtime-only, not persisted)
_runs: Dict[str, SmiteGame] = {}
_runs_lock = threading.Lock()


def generate_run_code(length=4) -> str:
    """Generate a unique, short run code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if code not in _runs:
            return code


def make_timeline(app, socketio):
    if app.config.get('SMITE_TIMELINE') == 'manual':
        return ManualTimeline()
    return SocketIOTimeline(socketio)


def create_session(app, socketio) -> Tuple[str, SmiteGame]:
    seed = app.config.get('SMITE_RNG_SEED')
    with _runs_lock:
        code = generate_run_code()
        game = SmiteGame(
            PreferencesStore(app),
            make_timeline(app, socketio),
            rng=random.Random(seed),
            hooks=SocketIOHooks(socketio, code),
            logger=app.logger,
        )
        _runs[code] = game
    app.logger.info(f"[session-create] run_code={code} sessions={len(_runs)}")
    return code, game


def get_session(code: str) -> Optional[SmiteGame]:
    return _runs.get((code or '').upper())


def discard_session(code: str) -> bool:
    with _runs_lock:
        game = _runs.pop((code or '').upper(), None)
    if game is None:
        return False
    game.stop()
    return True


def clear_sessions() -> None:
    with _runs_lock:
        games = list(_runs.values())
        _runs.clear()
    for game in games:
        game.stop()
