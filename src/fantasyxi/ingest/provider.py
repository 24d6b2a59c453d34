"""Player pool providers keyed by match id."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Sequence

from fantasyxi.models import PlayerRecord

from .players import load_records_from_csv


logger = logging.getLogger(__name__)


class PlayerProvider(Protocol):
    def fetch_eligible_players(self, match_id: str) -> List[PlayerRecord]:
        """Return the active players for a match; KeyError if the match is unknown."""


class InMemoryPlayerProvider:
    def __init__(self, pools: Optional[Mapping[str, Sequence[PlayerRecord]]] = None):
        self._pools: Dict[str, List[PlayerRecord]] = {
            str(match_id): list(players) for match_id, players in (pools or {}).items()
        }

    def add_match(self, match_id: str, players: Sequence[PlayerRecord]) -> None:
        self._pools[str(match_id)] = list(players)

    def fetch_eligible_players(self, match_id: str) -> List[PlayerRecord]:
        key = str(match_id)
        if key not in self._pools:
            raise KeyError(f"No player pool for match {match_id!r}")
        return [player for player in self._pools[key] if player.is_active]


class CsvPlayerProvider:
    """Reads ``<directory>/<match_id>.csv`` on every request."""

    def __init__(self, directory: Path, *, mapping: Mapping[str, str] | None = None):
        self.directory = Path(directory)
        self.mapping = mapping

    def _path_for(self, match_id: str) -> Path:
        name = Path(str(match_id)).name
        return self.directory / f"{name}.csv"

    def fetch_eligible_players(self, match_id: str) -> List[PlayerRecord]:
        path = self._path_for(match_id)
        if not path.is_file():
            raise KeyError(f"No player pool for match {match_id!r}")
        records = load_records_from_csv(path, mapping=self.mapping)
        eligible = [player for player in records if player.is_active]
        logger.info("Match %s: %s of %s players active", match_id, len(eligible), len(records))
        return eligible


__all__ = ["CsvPlayerProvider", "InMemoryPlayerProvider", "PlayerProvider"]
