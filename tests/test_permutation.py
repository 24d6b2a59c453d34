import pytest

from fantasyxi.optimizer.permutation import (
    SelectionKey,
    banded,
    get_permutation,
    identity,
    reverse,
    rotate,
    seeded_shuffle,
)


ITEMS = list(range(6))


def test_simple_permutations():
    key = SelectionKey(team_index=2)
    assert identity(ITEMS, key) == ITEMS
    assert reverse(ITEMS, key) == [5, 4, 3, 2, 1, 0]
    assert rotate(ITEMS, key) == [2, 3, 4, 5, 0, 1]
    assert rotate([], key) == []


def test_banded_modes_cycle_with_team_index():
    assert banded(ITEMS, SelectionKey(0)) == ITEMS
    assert banded(ITEMS, SelectionKey(1)) == [1, 2, 3, 4, 5, 0]
    assert banded(ITEMS, SelectionKey(2)) == [2, 3, 4, 5, 0, 1]
    assert banded(ITEMS, SelectionKey(3)) == [5, 4, 3, 2, 1, 0]
    assert sorted(banded(ITEMS, SelectionKey(4))) == ITEMS
    assert banded(ITEMS, SelectionKey(5)) == ITEMS


def test_banded_variant_shifts_mode_and_rotates():
    # variant 1 of team 0 uses mode 1 and then rotates once more
    assert banded(ITEMS, SelectionKey(0, 1)) == [2, 3, 4, 5, 0, 1]


def test_seeded_orders_are_reproducible():
    key = SelectionKey(4, 2)
    first = seeded_shuffle(list(range(20)), key)
    assert first == seeded_shuffle(list(range(20)), key)
    assert banded(list(range(20)), key) == banded(list(range(20)), key)
    assert sorted(first) == list(range(20))


def test_selection_key_variants():
    key = SelectionKey(3)
    assert key.next_variant() == SelectionKey(3, 1)
    assert key.seed != key.next_variant().seed


def test_get_permutation():
    assert get_permutation("Banded") is banded
    with pytest.raises(KeyError):
        get_permutation("spiral")
