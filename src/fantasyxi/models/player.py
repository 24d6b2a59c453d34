"""Canonical player models shared across ingestion and generation layers."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class Role(str, Enum):
    WICKETKEEPER = "WK"
    BATSMAN = "BAT"
    ALLROUNDER = "AR"
    BOWLER = "BWL"

    @classmethod
    def from_any(cls, value: object) -> "Role":
        """Accept a Role, an abbreviation, a member name or a descriptive label.

        Raises ValueError for anything that does not name a cricket role.
        """
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid role: {value!r}")

        token = re.sub(r"[^A-Z]", "", value.upper())
        if not token:
            raise ValueError(f"Invalid role: {value!r}")
        if token in _ROLE_ALIASES:
            return _ROLE_ALIASES[token]
        # Descriptive labels such as "Batting Allrounder" or "Right-arm pace".
        for keywords, role in _ROLE_KEYWORDS:
            if any(keyword in token for keyword in keywords):
                return role
        raise ValueError(f"Invalid role: {value!r}")

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]


_ROLE_ALIASES: Dict[str, Role] = {
    "WK": Role.WICKETKEEPER,
    "WICKETKEEPER": Role.WICKETKEEPER,
    "KEEPER": Role.WICKETKEEPER,
    "BAT": Role.BATSMAN,
    "BATSMAN": Role.BATSMAN,
    "BATSMEN": Role.BATSMAN,
    "BATTER": Role.BATSMAN,
    "AR": Role.ALLROUNDER,
    "ALLROUNDER": Role.ALLROUNDER,
    "ALLROUNDERS": Role.ALLROUNDER,
    "BWL": Role.BOWLER,
    "BOWL": Role.BOWLER,
    "BOWLER": Role.BOWLER,
    "BOWLERS": Role.BOWLER,
}

# Checked in order: keeper-batsmen are keepers, batting all-rounders are all-rounders.
_ROLE_KEYWORDS: tuple[tuple[tuple[str, ...], Role], ...] = (
    (("WICKET", "KEEP", "WK"), Role.WICKETKEEPER),
    (("ALLROUND", "ROUNDER"), Role.ALLROUNDER),
    (("BOWL", "SPIN", "PACE", "SEAM", "FAST"), Role.BOWLER),
    (("BAT",), Role.BATSMAN),
)

_ROLE_LABELS: Dict[Role, str] = {
    Role.WICKETKEEPER: "Wicket-Keeper",
    Role.BATSMAN: "Batsman",
    Role.ALLROUNDER: "All-Rounder",
    Role.BOWLER: "Bowler",
}

# Fixed selection order used wherever roles are walked.
ROLE_ORDER: tuple[Role, ...] = (Role.WICKETKEEPER, Role.BATSMAN, Role.ALLROUNDER, Role.BOWLER)


class PlayerRecord(BaseModel):
    """Normalized player payload consumed by the generation pipeline."""

    player_id: int
    name: str
    team: str = Field(..., min_length=1)
    role: Role
    credits: float = Field(..., gt=0.0)
    stats: Dict[str, float] = Field(default_factory=dict)
    is_active: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value: object) -> Role:
        return Role.from_any(value)

    def stat(self, name: str) -> float:
        """Return a statistical metric, treating a missing metric as 0."""

        return float(self.stats.get(name, 0.0))
