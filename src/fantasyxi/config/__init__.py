"""Configuration helpers for lineup rules, compositions and presets."""

from .rules import (
    LINEUP_SIZE,
    CompositionTarget,
    LineupRules,
    StatRange,
    StrategyPreset,
    get_preset,
    get_presets_by_risk,
    iter_presets,
)

__all__ = [
    "LINEUP_SIZE",
    "CompositionTarget",
    "LineupRules",
    "StatRange",
    "StrategyPreset",
    "get_preset",
    "get_presets_by_risk",
    "iter_presets",
]
