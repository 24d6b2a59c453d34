"""Error taxonomy shared by the generation pipeline and its adapters."""

from __future__ import annotations


class FantasyXIError(Exception):
    """Base class for all lineup generation errors."""


class ConfigurationError(FantasyXIError, ValueError):
    """Raised when a composition, rule set or request is invalid.

    Always raised before any selection work happens, so callers can fix the
    input and resubmit.
    """


class EmptyPoolError(FantasyXIError):
    """Raised when the pool filter leaves no eligible players."""

    def __init__(self, message: str, *, total_players: int = 0):
        super().__init__(message)
        self.message = message
        self.total_players = total_players


class LineupUnsatisfiable(FantasyXIError):
    """Raised when a single lineup cannot reach full size under the rules."""

    def __init__(self, team_index: int, selected: int, message: str | None = None):
        self.team_index = team_index
        self.selected = selected
        self.message = message or (
            f"Lineup {team_index + 1} stalled at {selected} players under the active constraints"
        )
        super().__init__(self.message)


__all__ = [
    "FantasyXIError",
    "ConfigurationError",
    "EmptyPoolError",
    "LineupUnsatisfiable",
]
