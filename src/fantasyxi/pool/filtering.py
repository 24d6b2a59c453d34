"""Eligibility filtering for the raw player pool of one match."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from fantasyxi.config.rules import StatRange
from fantasyxi.exceptions import EmptyPoolError
from fantasyxi.models.player import ROLE_ORDER, PlayerRecord, Role


logger = logging.getLogger(__name__)

DREAM_TEAM_PERCENTAGE = "dream_team_percentage"
SELECTION_PERCENTAGE = "selection_percentage"
AVERAGE_POINTS = "average_points"
FORM_RATING = "form_rating"
CAPTAIN_POTENTIAL = "captain_potential"


@dataclass(frozen=True)
class FilterCriteria:
    """Filtering configuration for a player pool.

    Every entry in ``stat_ranges`` must contain the player's value for that
    metric; a metric the player does not carry counts as 0.
    """

    stat_ranges: Mapping[str, StatRange] = field(default_factory=dict)
    min_credits: float | None = None
    max_credits: float | None = None
    exclude_player_ids: tuple[int, ...] = ()

    @classmethod
    def from_bounds(
        cls,
        bounds: Mapping[str, tuple[float, float]],
        **kwargs,
    ) -> "FilterCriteria":
        ranges = {name: StatRange(float(low), float(high)) for name, (low, high) in bounds.items()}
        return cls(stat_ranges=ranges, **kwargs)


@dataclass(frozen=True)
class FilterSummary:
    total_players: int
    eligible_players: int
    rejected_inactive: int
    rejected_stats: int
    rejected_credits: int
    rejected_excluded: int
    role_counts: Mapping[Role, int]


@dataclass(frozen=True)
class FilterResult:
    players: list[PlayerRecord]
    summary: FilterSummary

    def by_role(self) -> dict[Role, list[PlayerRecord]]:
        return group_by_role(self.players)


def group_by_role(players: Iterable[PlayerRecord]) -> dict[Role, list[PlayerRecord]]:
    grouped: dict[Role, list[PlayerRecord]] = {role: [] for role in ROLE_ORDER}
    for player in players:
        grouped[player.role].append(player)
    return grouped


def _passes_stats(player: PlayerRecord, criteria: FilterCriteria) -> bool:
    for metric, bounds in criteria.stat_ranges.items():
        if not bounds.contains(player.stat(metric)):
            return False
    return True


def _passes_credits(player: PlayerRecord, criteria: FilterCriteria) -> bool:
    if criteria.min_credits is not None and player.credits < criteria.min_credits:
        return False
    if criteria.max_credits is not None and player.credits > criteria.max_credits:
        return False
    return True


def filter_players(
    players: Sequence[PlayerRecord],
    criteria: FilterCriteria | None = None,
) -> FilterResult:
    """Reduce a pool to the players eligible for selection.

    Raises EmptyPoolError when nothing survives, so callers never build a
    batch from an empty pool.
    """

    criteria = criteria or FilterCriteria()
    excluded = set(criteria.exclude_player_ids)
    rejected: Counter[str] = Counter()
    eligible: list[PlayerRecord] = []

    for player in players:
        if not player.is_active:
            rejected["inactive"] += 1
        elif player.player_id in excluded:
            rejected["excluded"] += 1
        elif not _passes_credits(player, criteria):
            rejected["credits"] += 1
        elif not _passes_stats(player, criteria):
            rejected["stats"] += 1
        else:
            eligible.append(player)

    role_counts = Counter(player.role for player in eligible)
    summary = FilterSummary(
        total_players=len(players),
        eligible_players=len(eligible),
        rejected_inactive=rejected["inactive"],
        rejected_stats=rejected["stats"],
        rejected_credits=rejected["credits"],
        rejected_excluded=rejected["excluded"],
        role_counts={role: role_counts.get(role, 0) for role in ROLE_ORDER},
    )

    if not eligible:
        raise EmptyPoolError(
            f"No eligible players after filtering {len(players)} players "
            f"(inactive {summary.rejected_inactive}, stats {summary.rejected_stats}, "
            f"credits {summary.rejected_credits}, excluded {summary.rejected_excluded})",
            total_players=len(players),
        )

    if len(eligible) != len(players):
        logger.info(
            "Player pool trimmed from %s to %s (%s)",
            len(players),
            len(eligible),
            ", ".join(f"{role.value}:{count}" for role, count in summary.role_counts.items()),
        )
    else:
        logger.info("Player pool retained full size (%s players)", len(players))
    return FilterResult(players=eligible, summary=summary)


__all__ = [
    "AVERAGE_POINTS",
    "CAPTAIN_POTENTIAL",
    "DREAM_TEAM_PERCENTAGE",
    "FORM_RATING",
    "SELECTION_PERCENTAGE",
    "FilterCriteria",
    "FilterResult",
    "FilterSummary",
    "filter_players",
    "group_by_role",
]
