"""Pydantic models for API I/O."""

from .lineup import (
    DiversityShortfallResponse,
    LineupFailureResponse,
    LineupPlayerResponse,
    LineupRequest,
    LineupResponse,
    PlayerPayload,
    PlayerUsageResponse,
    PresetResponse,
    StatRangePayload,
)
from .batch import LineupBatchResponse

__all__ = [
    "DiversityShortfallResponse",
    "LineupBatchResponse",
    "LineupFailureResponse",
    "LineupPlayerResponse",
    "LineupRequest",
    "LineupResponse",
    "PlayerPayload",
    "PlayerUsageResponse",
    "PresetResponse",
    "StatRangePayload",
]
