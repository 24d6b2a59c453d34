"""Player pool utilities (filtering) and lineup batch export."""

from .filtering import (
    FilterCriteria,
    FilterResult,
    FilterSummary,
    filter_players,
    group_by_role,
)
from .export import export_lineups_to_csv

__all__ = [
    "FilterCriteria",
    "FilterResult",
    "FilterSummary",
    "filter_players",
    "group_by_role",
    "export_lineups_to_csv",
]
