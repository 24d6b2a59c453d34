"""Lineup selection, diversification and captaincy."""

from .analysis import CoreVariation, PlayerUsage, core_variation, player_usage
from .captaincy import CaptaincyAssigner, CaptaincyPolicy
from .permutation import PERMUTATIONS, SelectionKey, get_permutation
from .selection import OverlapGuard, Selection, can_admit, select_lineup
from .service import DiversityOptions, default_rules, generate_batch

__all__ = [
    "PERMUTATIONS",
    "CaptaincyAssigner",
    "CaptaincyPolicy",
    "CoreVariation",
    "DiversityOptions",
    "OverlapGuard",
    "PlayerUsage",
    "Selection",
    "SelectionKey",
    "can_admit",
    "core_variation",
    "default_rules",
    "generate_batch",
    "get_permutation",
    "player_usage",
    "select_lineup",
]
