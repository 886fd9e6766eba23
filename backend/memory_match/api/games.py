from flask import Blueprint, jsonify, request, current_app
from memory_match import socketio
from memory_match.errors import InvalidInput
from memory_match.services.games.moves import resolve_move
from memory_match.services.games.sessions import start_session, get_status, get_history
from memory_match.services.pagination import parse_int_arg


games = Blueprint('games', __name__)


def _room(session_key: str) -> str:
    return f"game:{session_key}"


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput('Request body must be a JSON object')
    return data


@games.route('/start', methods=['POST'])
def start_game():
    data = _json_body()
    session_key = data.get('sessionKey')
    if session_key is not None and not isinstance(session_key, str):
        raise InvalidInput('Session key must be a string')
    game = start_session(session_key)
    return jsonify(game.to_dict()), 201


@games.route('/<string:session_key>/status', methods=['GET'])
def game_status(session_key):
    return jsonify(get_status(session_key))


@games.route('/<string:session_key>/submit', methods=['POST'])
def submit_move(session_key):
    data = _json_body()
    if 'cards' not in data:
        raise InvalidInput('Must select exactly 2 cards')
    result = resolve_move(session_key, data.get('cards'))

    socketio.emit('state_update', {'sessionKey': session_key}, to=_room(session_key), namespace='/ws')
    if result['gameCompleted']:
        socketio.emit('game_completed', {
            'sessionKey': session_key,
            'attempts': result['attempts'],
            'completionTime': result['completionTime'],
            'score': result['score'],
        }, to=_room(session_key), namespace='/ws')
    return jsonify(result)


@games.route('/<string:session_key>/history', methods=['GET'])
def game_history(session_key):
    cfg = current_app.config
    limit = parse_int_arg(request.args, 'limit', int(cfg.get('HISTORY_DEFAULT_LIMIT', 10)))
    page = parse_int_arg(request.args, 'page', 1)
    return jsonify(get_history(session_key, limit, page))
