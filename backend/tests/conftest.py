import os
import sys
from collections import defaultdict
from datetime import timedelta
import pytest

# Ensure the backend root (containing the `memory_match` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from memory_match import create_app, db, socketio
from memory_match.config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import memory_match.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def threaded_app(tmp_path):
    """App on a file-backed SQLite database so several threads share one store."""

    class ThreadedConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'memory_match.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {
            'connect_args': {'check_same_thread': False, 'timeout': 30}
        }

    application = create_app(ThreadedConfig)
    with application.app_context():
        import memory_match.models  # noqa: F401
        db.create_all()
        db.session.remove()
        yield application
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


@pytest.fixture()
def card_pairs(flask_app):
    """Return the (pos, pos) pairs of a session's grid, one per category."""
    from memory_match.models import GameSession

    def _pairs(session_key):
        game = GameSession.query.filter_by(session_key=session_key).order_by(GameSession.id.desc()).first()
        by_category = defaultdict(list)
        for card in game.cards:
            by_category[card.category].append(card.position)
        return [tuple(positions) for positions in by_category.values()]

    return _pairs


@pytest.fixture()
def completed_game(flask_app):
    """Insert a finished session with the given attempts and duration."""
    from memory_match.models import GameSession, utcnow

    def _create(session_key, attempts, seconds, finished_ago=0):
        end = utcnow() - timedelta(seconds=finished_ago)
        game = GameSession(
            session_key=session_key,
            attempts=attempts,
            start_time=end - timedelta(seconds=seconds),
            end_time=end,
            completion_time=seconds * 1000,
            is_completed=True,
        )
        db.session.add(game)
        db.session.commit()
        return game

    return _create
