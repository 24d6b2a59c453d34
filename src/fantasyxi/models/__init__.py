"""Domain models for players and generated lineups."""

from .player import ROLE_ORDER, PlayerRecord, Role
from .lineup import DiversityReport, GenerationBatch, Lineup, LineupFailure

__all__ = [
    "ROLE_ORDER",
    "PlayerRecord",
    "Role",
    "DiversityReport",
    "GenerationBatch",
    "Lineup",
    "LineupFailure",
]
