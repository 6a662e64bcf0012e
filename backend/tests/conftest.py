import os
import sys
import pytest

# Ensure the backend root (containing the `app` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from app import create_app, db, socketio
from app.services.smite import GameHooks, ManualTimeline, SmiteGame
from app.services.smite.registry import clear_sessions
from app.services.smite.scoring import rank_best_scores


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    DEFAULT_LATENCY_MS = 1
    MAX_LATENCY_MS = 1000
    DEFAULT_SMITE_KEY = 'F'
    BEST_SCORES_LIMIT = 5
    SMITE_TIMELINE = 'manual'
    SMITE_RNG_SEED = 1234


class ScriptedRandom:
    """Random source returning queued values; running dry fails the test."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        if not self.values:
            raise AssertionError('random source exhausted')
        return self.values.pop(0)


class FakePreferences:
    def __init__(self, latency=1):
        self.latency = latency
        self.scores = {}

    def get_latency(self):
        return self.latency

    def get_best_scores(self, difficulty):
        return list(self.scores.get(difficulty, []))

    def add_best_score(self, difficulty, hp):
        self.scores[difficulty] = rank_best_scores(self.scores.get(difficulty, []) + [hp])


class RecordingHooks(GameHooks):
    def __init__(self):
        self.events = []

    def run_started(self, state, best_scores):
        self.events.append(('started', state.run_id))

    def hp_changed(self, state):
        self.events.append(('hp', state.monster_hp))

    def big_damage(self, state, amount):
        self.events.append(('big', amount))

    def smite_landed(self, state, hp):
        self.events.append(('smite', hp))

    def run_ended(self, state, outcome, best_scores):
        self.events.append(('ended', outcome))

    def of(self, kind):
        return [value for name, value in self.events if name == kind]


@pytest.fixture()
def make_game():
    """Build a SmiteGame on a manual timeline with scripted randomness."""
    def _make(values=(), latency=1, rng=None):
        prefs = FakePreferences(latency=latency)
        timeline = ManualTimeline()
        hooks = RecordingHooks()
        game = SmiteGame(prefs, timeline, rng=rng or ScriptedRandom(values), hooks=hooks)
        return game, timeline, hooks, prefs
    return _make


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import app.models  # noqa: F401
        db.create_all()
        yield application
        clear_sessions()
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
