"""Role-quota selection of a single lineup and its admission check."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from fantasyxi.config.rules import CompositionTarget, LineupRules
from fantasyxi.exceptions import LineupUnsatisfiable
from fantasyxi.models.player import ROLE_ORDER, PlayerRecord
from fantasyxi.optimizer.permutation import Permutation, SelectionKey, banded
from fantasyxi.pool.filtering import DREAM_TEAM_PERCENTAGE, group_by_role


logger = logging.getLogger(__name__)

_CREDIT_TOLERANCE = 1e-9


def can_admit(
    candidate: PlayerRecord,
    selected_ids: AbstractSet[int],
    credits: float,
    team_counts: Mapping[str, int],
    rules: LineupRules,
) -> bool:
    """Return True when ``candidate`` may join the lineup in progress."""

    if candidate.player_id in selected_ids:
        return False
    if len(selected_ids) >= rules.lineup_size:
        return False
    if credits + candidate.credits > rules.credit_cap + _CREDIT_TOLERANCE:
        return False
    if team_counts.get(candidate.team, 0) + 1 > rules.max_per_team:
        return False
    return True


def rank_players(players: Sequence[PlayerRecord], rank_metric: str) -> List[PlayerRecord]:
    """Order players best first; ties break on credits then id for stability."""

    return sorted(players, key=lambda p: (-p.stat(rank_metric), -p.credits, p.player_id))


@dataclass(frozen=True)
class OverlapGuard:
    """Caps how many players a new lineup may share with each earlier lineup."""

    priors: Tuple[FrozenSet[int], ...]
    max_shared: int

    def allows(self, player_id: int, shared: Sequence[int]) -> bool:
        for index, prior in enumerate(self.priors):
            if player_id in prior and shared[index] + 1 > self.max_shared:
                return False
        return True


@dataclass(frozen=True)
class Selection:
    key: SelectionKey
    players: Tuple[PlayerRecord, ...]
    fallback_used: bool = False

    @property
    def player_ids(self) -> FrozenSet[int]:
        return frozenset(player.player_id for player in self.players)


class _LineupDraft:
    def __init__(
        self,
        rules: LineupRules,
        pool: Sequence[PlayerRecord],
        guard: Optional[OverlapGuard] = None,
    ):
        self.rules = rules
        self.guard = guard
        self.players: List[PlayerRecord] = []
        self.ids: set[int] = set()
        self.credits = 0.0
        self.team_counts: Counter[str] = Counter()
        self.shared = [0] * (len(guard.priors) if guard else 0)
        self._by_cost = sorted(pool, key=lambda p: (p.credits, p.player_id))

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.rules.lineup_size

    def _leaves_room(self, candidate: PlayerRecord) -> bool:
        slots = self.rules.lineup_size - len(self.players) - 1
        floor = 0.0
        for player in self._by_cost:
            if slots <= 0:
                break
            if player.player_id in self.ids or player.player_id == candidate.player_id:
                continue
            floor += player.credits
            slots -= 1
        return self.credits + candidate.credits + floor <= self.rules.credit_cap + _CREDIT_TOLERANCE

    def try_add(self, candidate: PlayerRecord) -> bool:
        if not can_admit(candidate, self.ids, self.credits, self.team_counts, self.rules):
            return False
        if self.guard is not None and not self.guard.allows(candidate.player_id, self.shared):
            return False
        if self.rules.reserve_budget and not self._leaves_room(candidate):
            return False

        self.players.append(candidate)
        self.ids.add(candidate.player_id)
        self.credits += candidate.credits
        self.team_counts[candidate.team] += 1
        if self.guard is not None:
            for index, prior in enumerate(self.guard.priors):
                if candidate.player_id in prior:
                    self.shared[index] += 1
        return True


def select_lineup(
    players: Sequence[PlayerRecord],
    composition: CompositionTarget,
    rules: LineupRules,
    key: SelectionKey,
    *,
    permutation: Permutation = banded,
    rank_metric: str = DREAM_TEAM_PERCENTAGE,
    guard: Optional[OverlapGuard] = None,
) -> Selection:
    """Draw one lineup from an already filtered pool.

    Each role takes the first ``composition.count(role)`` admissible players
    in permuted order. Any remaining slots are filled from the whole pool in
    the same permuted order. Raises LineupUnsatisfiable when the lineup still
    cannot reach full size.
    """

    ranked = rank_players(players, rank_metric)
    by_role = group_by_role(ranked)
    draft = _LineupDraft(rules, ranked, guard)

    for role in ROLE_ORDER:
        required = composition.count(role)
        if required <= 0:
            continue
        taken = 0
        for candidate in permutation(by_role[role], key):
            if taken >= required:
                break
            if draft.try_add(candidate):
                taken += 1
        if taken < required:
            logger.debug(
                "Lineup %s (variant %s): %s filled %s/%s from %s candidates",
                key.team_index + 1,
                key.variant,
                role.value,
                taken,
                required,
                len(by_role[role]),
            )

    fallback_used = False
    if not draft.is_full:
        remaining = [player for player in ranked if player.player_id not in draft.ids]
        for candidate in permutation(remaining, key):
            if draft.is_full:
                break
            if draft.try_add(candidate):
                fallback_used = True
        logger.debug(
            "Lineup %s (variant %s): fallback fill reached %s/%s players",
            key.team_index + 1,
            key.variant,
            len(draft.players),
            rules.lineup_size,
        )

    if not draft.is_full:
        raise LineupUnsatisfiable(key.team_index, len(draft.players))

    return Selection(key=key, players=tuple(draft.players), fallback_used=fallback_used)


__all__ = [
    "OverlapGuard",
    "Selection",
    "can_admit",
    "rank_players",
    "select_lineup",
]
