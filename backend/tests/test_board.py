import random
from collections import Counter

import pytest

from memory_match.errors import InvalidInput
from memory_match.services.games.board import CATEGORIES, POSITIONS, shuffled_layout, validate_positions


def test_positions_enumerate_grid_in_order():
    assert len(POSITIONS) == 16
    assert POSITIONS[:5] == ('A1', 'A2', 'A3', 'A4', 'B1')
    assert POSITIONS[-1] == 'D4'


@pytest.mark.parametrize('seed', range(25))
def test_every_category_appears_exactly_twice(seed):
    layout = shuffled_layout(random.Random(seed))
    counts = Counter(card['category'] for card in layout)
    assert set(counts) == set(CATEGORIES)
    assert all(n == 2 for n in counts.values())


def test_layout_assigns_positions_in_fixed_order():
    layout = shuffled_layout(random.Random(7))
    assert [card['position'] for card in layout] == list(POSITIONS)
    assert len({card['id'] for card in layout}) == 16


def test_shuffle_varies_between_deals():
    deals = {tuple(c['category'] for c in shuffled_layout(random.Random(seed))) for seed in range(10)}
    assert len(deals) > 1


def test_valid_pair_passes():
    validate_positions(['A1', 'D4'])


@pytest.mark.parametrize('positions, message', [
    (['A1'], 'Must select exactly 2 cards'),
    (['A1', 'B2', 'C3'], 'Must select exactly 2 cards'),
    ('A1B2', 'Must select exactly 2 cards'),
    (None, 'Must select exactly 2 cards'),
    (['A1', 2], 'Card positions must be strings'),
    (['B2', 'B2'], 'Cannot select the same card twice'),
    (['A1', 'E1'], 'Card positions must be in the range A - D, 1 - 4.'),
    (['a1', 'B2'], 'Card positions must be in the range A - D, 1 - 4.'),
    (['A5', 'B2'], 'Card positions must be in the range A - D, 1 - 4.'),
    (['A1\n', 'B2'], 'Card positions must be in the range A - D, 1 - 4.'),
])
def test_invalid_pairs_are_rejected(positions, message):
    with pytest.raises(InvalidInput) as excinfo:
        validate_positions(positions)
    assert excinfo.value.message == message
    assert excinfo.value.code == 'invalid_input'
