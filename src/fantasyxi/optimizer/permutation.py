"""Deterministic candidate orderings keyed by team index and retry variant.

Every permutation here is a pure function of its inputs: the same candidates
and the same key always produce the same order. Randomised orderings draw from
a ``random.Random`` seeded by the key, never from global state.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

_BAND_MODES = 5


@dataclass(frozen=True)
class SelectionKey:
    team_index: int
    variant: int = 0

    @property
    def seed(self) -> int:
        return self.team_index * 1000 + self.variant

    def next_variant(self) -> "SelectionKey":
        return SelectionKey(self.team_index, self.variant + 1)


Permutation = Callable[[Sequence[T], SelectionKey], List[T]]


def identity(items: Sequence[T], key: SelectionKey) -> List[T]:
    return list(items)


def rotate(items: Sequence[T], key: SelectionKey) -> List[T]:
    """Rotate left by the team index plus the variant."""

    if not items:
        return []
    offset = (key.team_index + key.variant) % len(items)
    return list(items[offset:]) + list(items[:offset])


def reverse(items: Sequence[T], key: SelectionKey) -> List[T]:
    return list(reversed(items))


def seeded_shuffle(items: Sequence[T], key: SelectionKey) -> List[T]:
    shuffled = list(items)
    random.Random(key.seed).shuffle(shuffled)
    return shuffled


def _rotate_by(items: List[T], offset: int) -> List[T]:
    if not items:
        return items
    offset %= len(items)
    return items[offset:] + items[:offset]


def banded(items: Sequence[T], key: SelectionKey) -> List[T]:
    """Cycle through five orderings of a ranked candidate list.

    Modes by ``(team_index + variant) % 5``: top performers first, top one
    moved to the back, middle band first, reversed, seeded shuffle. Retry
    variants additionally rotate the result so successive variants of the same
    mode still differ.
    """

    ordered = list(items)
    size = len(ordered)
    if size <= 1:
        return ordered

    mode = (key.team_index + key.variant) % _BAND_MODES
    if mode == 1:
        ordered = _rotate_by(ordered, 1)
    elif mode == 2:
        ordered = _rotate_by(ordered, max(1, size // 3))
    elif mode == 3:
        ordered.reverse()
    elif mode == 4:
        ordered = seeded_shuffle(ordered, key)

    if key.variant:
        ordered = _rotate_by(ordered, key.variant)
    return ordered


PERMUTATIONS: dict[str, Permutation] = {
    "banded": banded,
    "identity": identity,
    "reverse": reverse,
    "rotate": rotate,
    "shuffle": seeded_shuffle,
}


def get_permutation(name: str) -> Permutation:
    key = name.strip().lower()
    if key not in PERMUTATIONS:
        raise KeyError(f"Unknown permutation {name!r}")
    return PERMUTATIONS[key]
