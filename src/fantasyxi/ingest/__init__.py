"""Input adapters that normalize raw player pool data."""

from .players import (
    DEFAULT_PLAYERS_MAPPING,
    PlayerRow,
    load_player_csv,
    load_records_from_csv,
    rows_to_records,
)
from .provider import CsvPlayerProvider, InMemoryPlayerProvider, PlayerProvider

__all__ = [
    "DEFAULT_PLAYERS_MAPPING",
    "CsvPlayerProvider",
    "InMemoryPlayerProvider",
    "PlayerProvider",
    "PlayerRow",
    "load_player_csv",
    "load_records_from_csv",
    "rows_to_records",
]
