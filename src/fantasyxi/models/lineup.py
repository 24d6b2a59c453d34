"""Generated lineup containers returned by the generation pipeline."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from .player import ROLE_ORDER, PlayerRecord, Role


@dataclass(frozen=True)
class Lineup:
    """One candidate XI. References players, never copies or mutates them."""

    lineup_id: str
    team_index: int
    players: Tuple[PlayerRecord, ...]
    captain: PlayerRecord
    vice_captain: PlayerRecord
    fallback_used: bool = False

    @property
    def player_ids(self) -> FrozenSet[int]:
        return frozenset(player.player_id for player in self.players)

    @property
    def total_credits(self) -> float:
        return sum(player.credits for player in self.players)

    @property
    def team_counts(self) -> Dict[str, int]:
        return dict(Counter(player.team for player in self.players))

    @property
    def role_counts(self) -> Dict[Role, int]:
        counts = Counter(player.role for player in self.players)
        return {role: counts.get(role, 0) for role in ROLE_ORDER}

    def shared_with(self, other: "Lineup") -> int:
        return len(self.player_ids & other.player_ids)


@dataclass(frozen=True)
class DiversityReport:
    """Per-lineup diversity annotation.

    ``overlaps[i]`` is the shared-player ratio against the i-th lineup accepted
    before this one; ``conflicts`` holds the team indices whose overlap breached
    the batch threshold.
    """

    team_index: int
    overlaps: Tuple[float, ...]
    conflicts: Tuple[int, ...]
    meets_target: bool
    attempts: int

    @property
    def max_overlap(self) -> float:
        return max(self.overlaps, default=0.0)


@dataclass(frozen=True)
class LineupFailure:
    team_index: int
    reason: str
    selected: int = 0


@dataclass(frozen=True)
class GenerationBatch:
    """Ordered output of a single generation request."""

    requested: int
    lineups: Tuple[Lineup, ...] = ()
    reports: Tuple[DiversityReport, ...] = ()
    failures: Tuple[LineupFailure, ...] = ()
    min_diversity: float = 0.0
    summary: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}), compare=False)

    @property
    def is_complete(self) -> bool:
        return not self.failures and len(self.lineups) == self.requested

    @property
    def failed_indices(self) -> Tuple[int, ...]:
        return tuple(failure.team_index for failure in self.failures)

    @property
    def shortfall_indices(self) -> Tuple[int, ...]:
        return tuple(report.team_index for report in self.reports if not report.meets_target)

    @property
    def shortfall_pairs(self) -> Tuple[Tuple[int, int], ...]:
        pairs = []
        for report in self.reports:
            for prior in report.conflicts:
                pairs.append((prior, report.team_index))
        return tuple(pairs)

    def report_for(self, team_index: int) -> Optional[DiversityReport]:
        for report in self.reports:
            if report.team_index == team_index:
                return report
        return None

    def max_overlap(self) -> float:
        """Largest shared-player ratio between any two lineups in the batch."""

        worst = 0.0
        lineups = list(self.lineups)
        for i, first in enumerate(lineups):
            size = len(first.players) or 1
            for second in lineups[i + 1:]:
                worst = max(worst, first.shared_with(second) / size)
        return worst
