from flask import current_app

from memory_match import db
from memory_match.errors import GameError, InvalidInput
from memory_match.models import Move, utcnow
from .board import validate_positions
from .scoring import calculate_score
from .sessions import find_session, session_lock, validate_session_key


def resolve_move(session_key, positions) -> dict:
    """Reveal two cards on the session's grid and record the move.

    Every check runs before anything is mutated, so a rejected move leaves
    the stored session untouched.
    """
    validate_session_key(session_key)
    with session_lock(session_key):
        try:
            game = find_session(session_key, for_update=True)
            if game.is_completed:
                raise InvalidInput('Game is already completed')

            validate_positions(positions)
            first = game.card_at(positions[0])
            second = game.card_at(positions[1])
            if not first or not second:
                raise InvalidInput('Invalid card positions')
            if first.is_matched or second.is_matched:
                raise InvalidInput('Cannot select already matched cards')
        except GameError:
            db.session.rollback()
            raise

        first.is_revealed = True
        second.is_revealed = True
        categories = [first.category, second.category]
        is_match = first.category == second.category

        game.moves.append(Move(
            first_position=positions[0],
            second_position=positions[1],
            first_category=first.category,
            second_category=second.category,
            is_match=is_match,
            timestamp=utcnow(),
        ))
        game.attempts += 1

        if is_match:
            first.is_matched = True
            second.is_matched = True
            game.add_matched_pair(positions[0], positions[1])
            if all(c.is_matched for c in game.cards):
                game.complete()

        db.session.add(game)
        db.session.commit()

    current_app.logger.info(
        f"[move] session={session_key} cards={positions[0]},{positions[1]} match={is_match} attempts={game.attempts}"
    )
    if game.is_completed:
        current_app.logger.info(
            f"[complete] session={session_key} attempts={game.attempts} time_ms={game.completion_time}"
        )

    if is_match:
        message = f'Match found! {categories[0]} pairs matched.'
    else:
        message = f"No match. {categories[0]} and {categories[1]} don't match."

    result = {
        'isMatch': is_match,
        'categories': categories,
        'gameCompleted': game.is_completed,
        'attempts': game.attempts,
        'message': message,
    }
    if is_match:
        result['matchedPositions'] = [positions[0], positions[1]]
    if game.is_completed:
        result['completionTime'] = game.completion_time
        result['score'] = calculate_score(game.attempts, game.completion_time or 0)
    return result
