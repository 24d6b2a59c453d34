from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from .lineup import (
    DiversityShortfallResponse,
    LineupFailureResponse,
    LineupResponse,
    PlayerUsageResponse,
)


class LineupBatchResponse(BaseModel):
    requested: int
    composition: Dict[str, int]
    min_diversity: float
    lineups: List[LineupResponse]
    failures: List[LineupFailureResponse] = Field(default_factory=list)
    shortfalls: List[DiversityShortfallResponse] = Field(default_factory=list)
    player_usage: List[PlayerUsageResponse] = Field(default_factory=list)
    core_player_ids: List[int] = Field(default_factory=list)
    summary: Dict[str, Any] = Field(default_factory=dict)
    message: str | None = None
    match_id: str | None = None
    preset_id: str | None = None
