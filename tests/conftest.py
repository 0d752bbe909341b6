import os
import sys
import pytest

# Ensure the project root (containing config.py and the package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tictactoe_lobby import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'
    DEDUPE_MEMBERS = False
    PRUNE_EMPTY_ROOMS = False
    STRICT_MOVES = False
    RANDOM_SEED = 7


class StubRandom:
    """Deterministic stand-in for random.Random used by the session store.

    ``picks`` lists, in call order, the value each choice() should return.
    Values not present in the sequence passed to choice() fall back to its
    first element.
    """

    def __init__(self, *picks):
        self.picks = list(picks)

    def choice(self, seq):
        seq = list(seq)
        if self.picks:
            pick = self.picks.pop(0)
            if pick in seq:
                return pick
        return seq[0]


class FakeTransport:
    """Records channel operations and broadcasts instead of talking to sockets."""

    def __init__(self):
        self.channels = []
        self.calls = []
        self.room_broadcasts = []
        self.all_broadcasts = []

    def join_channel(self, room_code):
        self.calls.append(('join', room_code))
        if room_code not in self.channels:
            self.channels.append(room_code)

    def leave_channel(self, room_code):
        self.calls.append(('leave', room_code))

    def broadcast_room(self, event, payload, room_code):
        self.room_broadcasts.append((event, payload, room_code))

    def broadcast_all(self, event, payload):
        self.all_broadcasts.append((event, payload))

    def active_channels(self):
        return list(self.channels)


@pytest.fixture()
def stub_random():
    return StubRandom


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def make_app():
    """Build an app whose config overrides selected TestConfig settings."""
    def _make(**overrides):
        return create_app(type('OverrideConfig', (TestConfig,), overrides))
    return _make


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass
