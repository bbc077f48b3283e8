import os
import sys
import pytest

# Ensure the backend root (containing the `wordchain` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordchain import create_app, socketio
from wordchain.services.game import GameSession, OracleResult, TurnTimer


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    TURN_DURATION_SEC = 30
    TIMER_TICK_SEC = 1.0
    MAX_TURNS = 10
    MAX_PLAYERS = 50
    CONNECTION_THRESHOLD = 57
    CONNECTION_POINTS = 2
    WINNER_BONUS = 5
    HOST_NAME = 'LIDER'
    OPENAI_API_KEY = None
    OPENAI_MODEL = 'gpt-3.5-turbo'
    ORACLE_TIMEOUT_SEC = 1.0


class RecordingBroadcaster:
    def __init__(self):
        self.events = []

    def emit(self, event, payload):
        self.events.append((event, payload))

    def named(self, event):
        return [payload for name, payload in self.events if name == event]

    def clear(self):
        self.events.clear()


class FakeOracle:
    def __init__(self, scores=None, error=None):
        self.scores = {k.lower(): v for k, v in (scores or {}).items()}
        self.error = error
        self.calls = []

    def score(self, target, candidates):
        self.calls.append((target, list(candidates)))
        if self.error:
            raise self.error
        return OracleResult(scores=dict(self.scores))


class TaskRunner:
    """Stands in for socketio.start_background_task: queues, runs on demand."""

    def __init__(self):
        self.tasks = []

    def __call__(self, fn, *args):
        self.tasks.append((fn, args))

    def run_next(self):
        fn, args = self.tasks.pop(0)
        fn(*args)


class FirstChoice:
    """Deterministic rng: always picks the first element."""

    def choice(self, seq):
        return seq[0]


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def oracle():
    return FakeOracle()


@pytest.fixture()
def tasks():
    return TaskRunner()


@pytest.fixture()
def make_session(broadcaster, oracle, tasks):
    def _make(rng=None, oracle_override=None, **kwargs):
        timer = TurnTimer(start_task=tasks, sleep=lambda _s: None)
        return GameSession(broadcaster, oracle_override or oracle, timer, rng=rng or FirstChoice(), **kwargs)
    return _make


@pytest.fixture()
def flask_app(oracle):
    application = create_app(TestConfig, oracle=oracle, rng=FirstChoice())
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    clients = []

    def _connect(name):
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws',
            auth={'name': name} if name is not None else None,
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass
