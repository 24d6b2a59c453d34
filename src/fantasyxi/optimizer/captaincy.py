"""Captain and vice-captain assignment with bounded repetition across a batch."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from fantasyxi.models.player import PlayerRecord, Role
from fantasyxi.pool.filtering import CAPTAIN_POTENTIAL, DREAM_TEAM_PERCENTAGE


@dataclass(frozen=True)
class CaptaincyPolicy:
    preferred_roles: Tuple[Role, ...] = (Role.BATSMAN, Role.ALLROUNDER)
    captain_metric: str = CAPTAIN_POTENTIAL
    rank_metric: str = DREAM_TEAM_PERCENTAGE
    min_distinct: int = 3

    def is_preferred(self, player: PlayerRecord) -> bool:
        return player.role in self.preferred_roles


class CaptaincyAssigner:
    """Picks (captain, vice-captain) for each lineup of one batch.

    Candidates are ranked by captaincy metric and rotated by team index; the
    least used candidate so far wins. Until ``min_distinct`` different players
    have held an armband, a lineup whose preferred candidates were all used
    already hands it to an unused player from the rest of the XI.
    """

    def __init__(self, policy: Optional[CaptaincyPolicy] = None):
        self.policy = policy or CaptaincyPolicy()
        self.captain_counts: Counter[int] = Counter()
        self.vice_captain_counts: Counter[int] = Counter()

    def _ordered(self, players: Sequence[PlayerRecord], team_index: int) -> List[PlayerRecord]:
        ranked = sorted(
            players,
            key=lambda p: (
                -p.stat(self.policy.captain_metric),
                -p.stat(self.policy.rank_metric),
                p.player_id,
            ),
        )
        if not ranked:
            return ranked
        offset = team_index % len(ranked)
        return ranked[offset:] + ranked[:offset]

    def _choose(
        self,
        lineup: Sequence[PlayerRecord],
        team_index: int,
        counts: Counter[int],
        exclude: Optional[int] = None,
    ) -> PlayerRecord:
        preferred = [player for player in lineup if self.policy.is_preferred(player)]
        pool = preferred if len(preferred) >= 2 else list(lineup)
        pool = [player for player in pool if player.player_id != exclude]
        eligible = [player for player in lineup if player.player_id != exclude]
        if not pool:
            pool = eligible

        ordered = self._ordered(pool, team_index)
        choice = min(ordered, key=lambda player: counts[player.player_id])
        if counts[choice.player_id] > 0 and len(counts) < self.policy.min_distinct:
            unused = [
                player
                for player in self._ordered(eligible, team_index)
                if counts[player.player_id] == 0
            ]
            if unused:
                choice = unused[0]
        return choice

    def assign(self, lineup: Sequence[PlayerRecord], team_index: int) -> Tuple[PlayerRecord, PlayerRecord]:
        if len(lineup) < 2:
            raise ValueError("A lineup needs at least two players to assign captaincy")
        captain = self._choose(lineup, team_index, self.captain_counts)
        vice_captain = self._choose(
            lineup, team_index, self.vice_captain_counts, exclude=captain.player_id
        )
        self.captain_counts[captain.player_id] += 1
        self.vice_captain_counts[vice_captain.player_id] += 1
        return captain, vice_captain
