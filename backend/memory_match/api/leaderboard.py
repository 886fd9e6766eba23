from flask import Blueprint, jsonify, request, current_app
from memory_match.services.leaderboard import (
    FILTER_FIELDS,
    get_leaderboard,
    get_player_rank,
    get_player_stats,
    get_top_games,
)
from memory_match.services.pagination import parse_int_arg


leaderboard = Blueprint('leaderboard', __name__)


@leaderboard.route('', methods=['GET'])
@leaderboard.route('/', methods=['GET'])
def list_leaderboard():
    cfg = current_app.config
    limit = parse_int_arg(request.args, 'limit', int(cfg.get('LEADERBOARD_DEFAULT_LIMIT', 10)))
    page = parse_int_arg(request.args, 'page', 1)
    filters = {name: parse_int_arg(request.args, name) for name in FILTER_FIELDS}
    return jsonify(get_leaderboard(limit, page, filters))


@leaderboard.route('/top', methods=['GET'])
def top_games():
    limit = parse_int_arg(request.args, 'limit', int(current_app.config.get('TOP_DEFAULT_LIMIT', 5)))
    return jsonify({'entries': get_top_games(limit)})


@leaderboard.route('/player/<string:session_key>', methods=['GET'])
def player_stats(session_key):
    return jsonify(get_player_stats(session_key))


@leaderboard.route('/player/<string:session_key>/rank', methods=['GET'])
def player_rank(session_key):
    return jsonify(get_player_rank(session_key))
