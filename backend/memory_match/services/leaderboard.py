"""Leaderboard over completed sessions: ranking, filters and per-key stats."""

from flask import current_app
from sqlalchemy import and_, or_

from memory_match.errors import InvalidInput, SessionNotFound
from memory_match.models import GameSession, isoformat_utc
from memory_match.services.games.scoring import calculate_score
from memory_match.services.games.sessions import validate_session_key
from memory_match.services.pagination import page_metadata, validate_pagination


FILTER_FIELDS = ('minAttempts', 'maxAttempts', 'minCompletionTime', 'maxCompletionTime')


def _entry(game, rank=None):
    entry = {
        'sessionKey': game.session_key,
        'attempts': game.attempts,
        'completionTime': game.completion_time,
        'startTime': isoformat_utc(game.start_time),
        'endTime': isoformat_utc(game.end_time),
        'score': calculate_score(game.attempts, game.completion_time or 0),
    }
    if rank is not None:
        entry['rank'] = rank
    return entry


def _ranked_query():
    return GameSession.query.filter_by(is_completed=True).order_by(
        GameSession.attempts.asc(), GameSession.end_time.asc(), GameSession.id.asc()
    )


def validate_filters(filters):
    for name, value in filters.items():
        if name not in FILTER_FIELDS:
            raise InvalidInput(f'Unknown filter: {name}')
        if value is not None and value < 0:
            raise InvalidInput(f'{name} must not be negative')
    for low, high in (('minAttempts', 'maxAttempts'), ('minCompletionTime', 'maxCompletionTime')):
        if filters.get(low) is not None and filters.get(high) is not None and filters[low] > filters[high]:
            raise InvalidInput(f'{low} must not exceed {high}')


def get_leaderboard(limit, page, filters=None):
    filters = {k: v for k, v in (filters or {}).items() if v is not None}
    validate_pagination(limit, page, int(current_app.config.get('LEADERBOARD_MAX_LIMIT', 100)))
    validate_filters(filters)

    query = _ranked_query()
    if 'minAttempts' in filters:
        query = query.filter(GameSession.attempts >= filters['minAttempts'])
    if 'maxAttempts' in filters:
        query = query.filter(GameSession.attempts <= filters['maxAttempts'])
    if 'minCompletionTime' in filters:
        query = query.filter(GameSession.completion_time >= filters['minCompletionTime'])
    if 'maxCompletionTime' in filters:
        query = query.filter(GameSession.completion_time <= filters['maxCompletionTime'])

    pagination = page_metadata(query.count(), limit, page)
    offset = (page - 1) * limit
    games = query.offset(offset).limit(limit).all()
    return {
        'entries': [_entry(g, rank=offset + i + 1) for i, g in enumerate(games)],
        'pagination': pagination,
        'filters': filters,
    }


def get_top_games(limit):
    max_limit = int(current_app.config.get('TOP_MAX_LIMIT', 50))
    if limit < 1 or limit > max_limit:
        raise InvalidInput(f'Limit must be between 1 and {max_limit}')
    games = _ranked_query().limit(limit).all()
    return [_entry(g, rank=i + 1) for i, g in enumerate(games)]


def get_player_stats(session_key):
    validate_session_key(session_key)
    games = GameSession.query.filter_by(session_key=session_key).all()
    completed = [g for g in games if g.is_completed]
    best_attempts = min((g.attempts for g in completed), default=None)
    average_attempts = (
        round(sum(g.attempts for g in completed) / len(completed), 2) if completed else None
    )
    best_score = max(
        (calculate_score(g.attempts, g.completion_time or 0) for g in completed), default=None
    )
    return {
        'sessionKey': session_key,
        'totalGames': len(games),
        'completedGames': len(completed),
        'bestAttempts': best_attempts,
        'averageAttempts': average_attempts,
        'bestScore': best_score,
    }


def get_player_rank(session_key):
    """Rank of the key's best completed game within the full leaderboard."""
    validate_session_key(session_key)
    best = _ranked_query().filter(GameSession.session_key == session_key).first()
    if not best:
        raise SessionNotFound('No completed game for this session')

    ahead = GameSession.query.filter(
        GameSession.is_completed.is_(True),
        or_(
            GameSession.attempts < best.attempts,
            and_(GameSession.attempts == best.attempts, GameSession.end_time < best.end_time),
            and_(
                GameSession.attempts == best.attempts,
                GameSession.end_time == best.end_time,
                GameSession.id < best.id,
            ),
        ),
    ).count()
    total = GameSession.query.filter_by(is_completed=True).count()
    result = _entry(best, rank=ahead + 1)
    result['totalCompleted'] = total
    return result
