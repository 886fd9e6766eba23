from memory_match import db
from datetime import datetime, timezone
import json
import uuid


def utcnow():
    """Naive UTC timestamp; SQLite drops tzinfo so every stored value stays naive."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value):
    return value.isoformat() + 'Z' if value else None


class GameSession(db.Model):
    __tablename__ = 'game_session'
    # at most one active session per key, also across workers
    __table_args__ = (
        db.Index(
            'uq_game_session_active_key', 'session_key', unique=True,
            postgresql_where=db.text('NOT is_completed'),
            sqlite_where=db.text('is_completed = 0'),
        ),
    )
    id = db.Column(db.Integer, primary_key=True)
    session_key = db.Column(db.String(64), nullable=False, index=True)
    attempts = db.Column(db.Integer, nullable=False, default=0)
    start_time = db.Column(db.DateTime, nullable=False, default=utcnow)
    end_time = db.Column(db.DateTime, nullable=True, index=True)
    completion_time = db.Column(db.Integer, nullable=True)  # milliseconds, set on completion
    is_completed = db.Column(db.Boolean, nullable=False, default=False, index=True)
    matched_pairs_json = db.Column('matched_pairs', db.Text, nullable=False, default='[]')
    cards = db.relationship('Card', back_populates='session', order_by='Card.id', cascade='all, delete-orphan')
    moves = db.relationship('Move', back_populates='session', order_by='Move.id', cascade='all, delete-orphan')

    @property
    def matched_pairs(self):
        return json.loads(self.matched_pairs_json or '[]')

    def add_matched_pair(self, first, second):
        pairs = self.matched_pairs
        pairs.append([first, second])
        self.matched_pairs_json = json.dumps(pairs)

    def card_at(self, position):
        for card in self.cards:
            if card.position == position:
                return card
        return None

    def complete(self):
        self.is_completed = True
        self.end_time = utcnow()
        self.completion_time = int((self.end_time - self.start_time).total_seconds() * 1000)

    def to_dict(self, include_cards=False):
        data = {
            'sessionKey': self.session_key,
            'attempts': self.attempts,
            'startTime': isoformat_utc(self.start_time),
            'endTime': isoformat_utc(self.end_time),
            'isCompleted': self.is_completed,
            'matchedPairs': self.matched_pairs,
            'moves': [m.to_dict() for m in self.moves],
        }
        if include_cards:
            data['cards'] = [c.to_dict() for c in self.cards]
        return data


class Card(db.Model):
    __tablename__ = 'card'
    __table_args__ = (db.UniqueConstraint('session_id', 'position', name='uq_card_session_position'),)
    id = db.Column(db.Integer, primary_key=True)
    card_uid = db.Column(db.String(36), nullable=False, default=lambda: str(uuid.uuid4()))
    session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    category = db.Column(db.String(32), nullable=False)
    position = db.Column(db.String(2), nullable=False)
    is_matched = db.Column(db.Boolean, nullable=False, default=False)
    is_revealed = db.Column(db.Boolean, nullable=False, default=False)
    session = db.relationship('GameSession', back_populates='cards')

    def to_dict(self):
        return {
            'id': self.card_uid,
            'category': self.category,
            'position': self.position,
            'isMatched': self.is_matched,
            'isRevealed': self.is_revealed,
        }


class Move(db.Model):
    __tablename__ = 'move'
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    first_position = db.Column(db.String(2), nullable=False)
    second_position = db.Column(db.String(2), nullable=False)
    first_category = db.Column(db.String(32), nullable=False)
    second_category = db.Column(db.String(32), nullable=False)
    is_match = db.Column(db.Boolean, nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)
    session = db.relationship('GameSession', back_populates='moves')

    def to_dict(self):
        return {
            'cards': [self.first_position, self.second_position],
            'categories': [self.first_category, self.second_category],
            'isMatch': self.is_match,
            'timestamp': isoformat_utc(self.timestamp),
        }
