from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field, model_validator


class PlayerPayload(BaseModel):
    player_id: int
    name: str
    team: str
    role: str
    credits: float = Field(..., gt=0.0)
    stats: Dict[str, float] = Field(default_factory=dict)
    is_active: bool = True


class StatRangePayload(BaseModel):
    minimum: float = 0.0
    maximum: float = 100.0

    @model_validator(mode="after")
    def _ordered(self) -> "StatRangePayload":
        if self.minimum > self.maximum:
            raise ValueError(f"minimum {self.minimum} exceeds maximum {self.maximum}")
        return self


class LineupRequest(BaseModel):
    team_count: int = Field(default=5, ge=1, le=50)
    match_id: str | None = None
    players: List[PlayerPayload] | None = None
    preset_id: str | None = None
    composition: Dict[str, int] | None = None
    pad_composition: bool = False
    credit_cap: float = Field(default=100.0, gt=0.0)
    max_per_team: int = Field(default=7, ge=1, le=11)
    min_diversity: float | None = Field(default=None, ge=0.0, le=1.0)
    reserve_budget: bool = False
    stat_ranges: Dict[str, StatRangePayload] = Field(default_factory=dict)
    exclude_player_ids: List[int] | None = None
    max_retries: int | None = Field(default=None, ge=0, le=100)

    @model_validator(mode="after")
    def _require_pool_source(self) -> "LineupRequest":
        if self.players is None and self.match_id is None:
            raise ValueError("Provide either players or match_id")
        return self


class LineupPlayerResponse(BaseModel):
    player_id: int
    name: str
    team: str
    role: str
    credits: float
    is_captain: bool = False
    is_vice_captain: bool = False


class LineupResponse(BaseModel):
    lineup_id: str
    team_index: int
    credits: float
    captain_id: int
    vice_captain_id: int
    fallback_used: bool
    role_counts: Dict[str, int]
    team_counts: Dict[str, int]
    players: List[LineupPlayerResponse]


class PlayerUsageResponse(BaseModel):
    player_id: int
    name: str
    team: str
    role: str
    count: int
    exposure: float
    captain_count: int = 0
    vice_captain_count: int = 0


class LineupFailureResponse(BaseModel):
    team_index: int
    reason: str
    selected: int


class DiversityShortfallResponse(BaseModel):
    team_index: int
    lineup_id: str
    max_overlap: float
    conflicts: List[int]
    attempts: int


class PresetResponse(BaseModel):
    preset_id: str
    name: str
    description: str
    risk_level: str
    composition: Dict[str, int]
    tags: List[str]
    stat_ranges: Dict[str, StatRangePayload] = Field(default_factory=dict)
