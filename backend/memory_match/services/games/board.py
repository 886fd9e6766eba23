"""The 4x4 card grid: fixed positions, categories and the initial deal."""

import random
import re
import uuid

from memory_match.errors import InvalidInput


CATEGORIES = ('Dog', 'Cat', 'Elephant', 'Lion', 'Tiger', 'Bear', 'Rabbit', 'Horse')

POSITIONS = tuple(f'{row}{col}' for row in 'ABCD' for col in '1234')

_POSITION_RE = re.compile(r'[A-D][1-4]')


def shuffled_layout(rng=None):
    """Deal the 16 cards: every category twice, shuffled over A1..D4.

    The category values are shuffled (Fisher-Yates via ``random.shuffle``)
    and then assigned to positions in their fixed enumeration order.
    """
    rng = rng or random
    categories = list(CATEGORIES) * 2
    rng.shuffle(categories)
    return [
        {'id': str(uuid.uuid4()), 'category': category, 'position': position}
        for position, category in zip(POSITIONS, categories)
    ]


def validate_positions(positions):
    """Check a submitted pair of positions, raising InvalidInput on any problem."""
    if not isinstance(positions, list) or len(positions) != 2:
        raise InvalidInput('Must select exactly 2 cards')
    if not all(isinstance(p, str) for p in positions):
        raise InvalidInput('Card positions must be strings')
    if positions[0] == positions[1]:
        raise InvalidInput('Cannot select the same card twice')
    if not all(_POSITION_RE.fullmatch(p) for p in positions):
        raise InvalidInput('Card positions must be in the range A - D, 1 - 4.')
    if not all(p in POSITIONS for p in positions):
        raise InvalidInput('Invalid card positions')
