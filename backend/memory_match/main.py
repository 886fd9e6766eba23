from flask import Blueprint, jsonify
from sqlalchemy import text
from memory_match import db

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Memory Match game server!'})

@main.route('/health')
def health():
    db.session.execute(text('SELECT 1'))
    return jsonify({'status': 'ok'})
