import threading
import uuid
from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import IntegrityError

from memory_match import db
from memory_match.errors import InvalidInput, SessionNotFound
from memory_match.models import Card, GameSession, isoformat_utc, utcnow
from memory_match.services.pagination import page_metadata, validate_pagination
from .board import shuffled_layout


# Fixed stripe of locks so memory stays bounded however many keys are seen;
# unrelated keys that share a stripe just wait on each other briefly.
_LOCK_STRIPES = 64
_session_locks = [threading.Lock() for _ in range(_LOCK_STRIPES)]


@contextmanager
def session_lock(session_key: str):
    """Serialize starts and moves on one session key within this process.

    Across processes the row lock taken by ``find_session(for_update=True)``
    and the partial unique index on active sessions do the same job.
    """
    with _session_locks[hash(session_key) % _LOCK_STRIPES]:
        yield


def validate_session_key(session_key):
    if not isinstance(session_key, str) or not session_key.strip():
        raise InvalidInput('Session key is required')
    max_length = int(current_app.config.get('SESSION_KEY_MAX_LENGTH', 64))
    if len(session_key) > max_length:
        raise InvalidInput(f'Session key must be at most {max_length} characters')


def find_session(session_key, for_update=False):
    """Latest session for the key; raises SessionNotFound when there is none."""
    validate_session_key(session_key)
    query = GameSession.query.filter_by(session_key=session_key).order_by(GameSession.id.desc())
    if for_update:
        query = query.with_for_update()
    game = query.first()
    if not game:
        raise SessionNotFound('Game not found')
    return game


def start_session(session_key=None, rng=None):
    """Create a new session with a freshly shuffled grid.

    A key may be reused once its previous session is completed, but never
    while one is still active.
    """
    if session_key is not None:
        validate_session_key(session_key)
    else:
        session_key = str(uuid.uuid4())

    with session_lock(session_key):
        active = GameSession.query.filter_by(session_key=session_key, is_completed=False).first()
        if active:
            db.session.rollback()
            raise InvalidInput('Active game already exists for this session')

        game = GameSession(session_key=session_key, attempts=0, start_time=utcnow(), is_completed=False)
        for layout in shuffled_layout(rng):
            game.cards.append(Card(card_uid=layout['id'], category=layout['category'], position=layout['position']))
        db.session.add(game)
        try:
            db.session.commit()
        except IntegrityError:
            # another worker won the race for this key
            db.session.rollback()
            raise InvalidInput('Active game already exists for this session')
    current_app.logger.info(f"[session-start] session={session_key} id={game.id}")
    return game


def get_status(session_key):
    game = find_session(session_key)
    revealed_cards = [
        {'position': c.position, 'category': c.category}
        for c in game.cards if c.is_matched or c.is_revealed
    ]
    return {
        'sessionKey': game.session_key,
        'attempts': game.attempts,
        'matchedPairs': game.matched_pairs,
        'isCompleted': game.is_completed,
        'startTime': isoformat_utc(game.start_time),
        'endTime': isoformat_utc(game.end_time),
        'revealedCards': revealed_cards,
        'remainingCards': sum(1 for c in game.cards if not c.is_matched),
    }


def get_history(session_key, limit, page):
    validate_pagination(limit, page, int(current_app.config.get('HISTORY_MAX_LIMIT', 50)))
    game = find_session(session_key)
    pagination = page_metadata(len(game.moves), limit, page)
    start = (page - 1) * limit
    return {
        'sessionKey': game.session_key,
        'moves': [m.to_dict() for m in game.moves[start:start + limit]],
        'pagination': pagination,
    }
