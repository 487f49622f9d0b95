import os
import sys
import pytest

# Ensure the backend root (containing the `hroof` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from hroof import create_app, db, socketio
from hroof.client import ApiTransport
from hroof.services.game.grid import empty_board


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    POLL_INTERVAL_SEC = 0.01
    ROOM_CODE_LENGTH = 6
    MAX_TEAM_NAME_LENGTH = 64
    MAX_USERNAME_LENGTH = 64
    WRITE_RETRIES = 3


class FlaskTransport(ApiTransport):
    """Routes room-client requests through the Flask test client."""

    def __init__(self, test_client):
        self.test_client = test_client
        self.calls = []

    def _request(self, method, path, payload=None):
        self.calls.append((method, path))
        res = self.test_client.open(path, method=method, json=payload)
        return res.status_code, res.get_json(silent=True)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import hroof.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def transport(client):
    return FlaskTransport(client)


@pytest.fixture()
def room(client):
    res = client.post('/api/games', json={'green_team_name': 'Falcons', 'red_team_name': 'Lions'})
    assert res.status_code == 201
    return res.get_json()['id']


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


def board_with(cells, color):
    """Empty board with ``color`` at each (row, col) in ``cells``."""
    board = empty_board()
    for row, col in cells:
        board[row][col] = color
    return board
