"""Exposure analysis over a generated batch."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Tuple

from fantasyxi.exceptions import ConfigurationError
from fantasyxi.models import GenerationBatch, PlayerRecord


@dataclass(frozen=True)
class PlayerUsage:
    player: PlayerRecord
    count: int
    exposure: float
    captain_count: int = 0
    vice_captain_count: int = 0


@dataclass(frozen=True)
class CoreVariation:
    threshold: float
    core: Tuple[PlayerUsage, ...]
    variation: Tuple[PlayerUsage, ...]


def player_usage(batch: GenerationBatch) -> List[PlayerUsage]:
    """Per-player appearance counts across the batch, most used first."""

    total = len(batch.lineups)
    if total == 0:
        return []

    players: Dict[int, PlayerRecord] = {}
    counts: Counter[int] = Counter()
    captains: Counter[int] = Counter()
    vice_captains: Counter[int] = Counter()
    for lineup in batch.lineups:
        for player in lineup.players:
            players.setdefault(player.player_id, player)
            counts[player.player_id] += 1
        captains[lineup.captain.player_id] += 1
        vice_captains[lineup.vice_captain.player_id] += 1

    usage = [
        PlayerUsage(
            player=players[player_id],
            count=count,
            exposure=count / total,
            captain_count=captains[player_id],
            vice_captain_count=vice_captains[player_id],
        )
        for player_id, count in counts.items()
    ]
    usage.sort(key=lambda item: (-item.count, item.player.player_id))
    return usage


def core_variation(batch: GenerationBatch, threshold: float = 0.6) -> CoreVariation:
    """Split used players into a core (exposure >= threshold) and the rest."""

    if not 0.0 < threshold <= 1.0:
        raise ConfigurationError(f"threshold must be in (0, 1], got {threshold!r}")
    usage = player_usage(batch)
    core = tuple(item for item in usage if item.exposure >= threshold)
    variation = tuple(item for item in usage if item.exposure < threshold)
    return CoreVariation(threshold=threshold, core=core, variation=variation)


__all__ = ["CoreVariation", "PlayerUsage", "core_variation", "player_usage"]
