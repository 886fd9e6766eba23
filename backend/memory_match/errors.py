"""Error taxonomy shared by services and blueprints.

Services raise these; the handlers registered on the app turn them into
``{"error": <message>, "code": <code>}`` JSON bodies.
"""

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from memory_match import db


class GameError(Exception):
    status_code = 400
    code = 'invalid_input'

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class InvalidInput(GameError):
    status_code = 400
    code = 'invalid_input'


class SessionNotFound(GameError):
    status_code = 404
    code = 'not_found'


def register_error_handlers(flask_app):
    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc):
        db.session.rollback()
        flask_app.logger.exception(f"[db-error] {exc.__class__.__name__}")
        return jsonify({'error': 'Internal server error', 'code': 'server_error'}), 500
