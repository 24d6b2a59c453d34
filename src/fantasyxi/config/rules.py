"""Lineup rules, role compositions and the strategy preset catalogue."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple, Union

from fantasyxi.exceptions import ConfigurationError
from fantasyxi.models.player import ROLE_ORDER, Role


LINEUP_SIZE = 11
ROLE_MIN = 1
ROLE_MAX = 8


@dataclass(frozen=True)
class LineupRules:
    credit_cap: float = 100.0
    max_per_team: int = 7
    min_diversity: float = 0.25
    reserve_budget: bool = False
    lineup_size: int = field(default=LINEUP_SIZE, init=False)

    def validate(self) -> "LineupRules":
        if self.credit_cap <= 0:
            raise ConfigurationError(f"credit_cap must be positive, got {self.credit_cap!r}")
        if not 1 <= self.max_per_team <= self.lineup_size:
            raise ConfigurationError(
                f"max_per_team must be between 1 and {self.lineup_size}, got {self.max_per_team!r}"
            )
        if self.max_per_team * 2 < self.lineup_size:
            raise ConfigurationError(
                f"max_per_team={self.max_per_team} cannot fill {self.lineup_size} players from two sides"
            )
        if not 0.0 <= self.min_diversity <= 1.0:
            raise ConfigurationError(
                f"min_diversity must be a fraction between 0 and 1, got {self.min_diversity!r}"
            )
        return self

    @property
    def max_overlap(self) -> float:
        """Largest shared-player ratio two lineups may have."""

        return 1.0 - self.min_diversity


RoleKey = Union[Role, str]


@dataclass(frozen=True)
class CompositionTarget:
    """Required player count per role for one lineup."""

    counts: Mapping[Role, int]

    def __post_init__(self) -> None:
        normalized = {role: 0 for role in ROLE_ORDER}
        for key, value in self.counts.items():
            role = Role.from_any(key)
            normalized[role] += int(value)
        object.__setattr__(self, "counts", MappingProxyType(normalized))

    @classmethod
    def from_mapping(cls, raw: Mapping[RoleKey, int], *, pad: bool = False) -> "CompositionTarget":
        """Build and validate a composition; ``pad`` opts into batsman padding."""

        try:
            target = cls(counts=dict(raw))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid composition {dict(raw)!r}: {exc}") from exc
        if pad:
            target = target.padded()
        return target.validate()

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def count(self, role: Role) -> int:
        return self.counts.get(role, 0)

    def validate(self) -> "CompositionTarget":
        if self.total != LINEUP_SIZE:
            raise ConfigurationError(
                f"Composition must add up to {LINEUP_SIZE} players, got {self.total} ({self.describe()})"
            )
        for role in ROLE_ORDER:
            count = self.count(role)
            if count < ROLE_MIN or count > ROLE_MAX:
                raise ConfigurationError(
                    f"{role.label} count must be between {ROLE_MIN} and {ROLE_MAX}, got {count}"
                )
        return self

    def padded(self) -> "CompositionTarget":
        """Return a copy whose batsman count absorbs the gap to a full XI."""

        gap = LINEUP_SIZE - self.total
        if gap == 0:
            return self
        counts = dict(self.counts)
        counts[Role.BATSMAN] = counts[Role.BATSMAN] + gap
        if counts[Role.BATSMAN] < 0:
            raise ConfigurationError(
                f"Cannot pad composition {self.describe()} to {LINEUP_SIZE} players"
            )
        return CompositionTarget(counts=counts)

    def describe(self) -> str:
        return " ".join(f"{role.value}:{self.count(role)}" for role in ROLE_ORDER)

    def as_dict(self) -> Dict[str, int]:
        return {role.value: self.count(role) for role in ROLE_ORDER}


@dataclass(frozen=True)
class StatRange:
    """Inclusive bounds for one statistical metric."""

    minimum: float = 0.0
    maximum: float = 100.0

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ConfigurationError(
                f"Stat range minimum {self.minimum} exceeds maximum {self.maximum}"
            )

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


@dataclass(frozen=True)
class StrategyPreset:
    preset_id: str
    name: str
    description: str
    risk_level: str
    composition: CompositionTarget
    tags: Tuple[str, ...] = ()
    stat_ranges: Mapping[str, StatRange] = field(default_factory=dict)


def _composition(wk: int, bat: int, ar: int, bwl: int) -> CompositionTarget:
    return CompositionTarget(
        counts={
            Role.WICKETKEEPER: wk,
            Role.BATSMAN: bat,
            Role.ALLROUNDER: ar,
            Role.BOWLER: bwl,
        }
    )


_PRESETS: Dict[str, StrategyPreset] = {
    "team-a-bias": StrategyPreset(
        preset_id="team-a-bias",
        name="Team A High Total, Team B Collapse",
        description="Heavy investment in Team A batsmen with Team B bowlers for a collapse scenario",
        risk_level="high",
        composition=_composition(1, 4, 2, 4),
        tags=("Team A Focus", "Collapse Strategy"),
    ),
    "team-b-bias": StrategyPreset(
        preset_id="team-b-bias",
        name="Team B High Total, Team A Collapse",
        description="Heavy investment in Team B batsmen with Team A bowlers for a collapse scenario",
        risk_level="high",
        composition=_composition(1, 4, 2, 4),
        tags=("Team B Focus", "Collapse Strategy"),
    ),
    "high-differential": StrategyPreset(
        preset_id="high-differential",
        name="High Differentials Strategy",
        description="Low-ownership players for unique lineups with high upside",
        risk_level="high",
        composition=_composition(1, 3, 3, 4),
        tags=("Low Ownership", "Tournament Strategy"),
        stat_ranges={"selection_percentage": StatRange(0.0, 20.0)},
    ),
    "balanced": StrategyPreset(
        preset_id="balanced",
        name="Balanced Roles",
        description="Well-balanced team with moderate risk and consistent performance expectations",
        risk_level="medium",
        composition=_composition(1, 4, 2, 4),
        tags=("Balanced", "Safe Play"),
    ),
    "all-rounder-heavy": StrategyPreset(
        preset_id="all-rounder-heavy",
        name="All-Rounder Heavy Lineup",
        description="Maximize all-rounders for flexible scoring options",
        risk_level="medium",
        composition=_composition(1, 2, 4, 4),
        tags=("Versatility", "High Floor"),
    ),
    "top-order-stack": StrategyPreset(
        preset_id="top-order-stack",
        name="Top Order Batting Stack",
        description="Heavy focus on top-order batsmen for powerplay and stable scoring",
        risk_level="medium",
        composition=_composition(1, 5, 2, 3),
        tags=("Powerplay Focus", "Batting Heavy"),
    ),
    "bowling-special": StrategyPreset(
        preset_id="bowling-special",
        name="Bowling Pitch Special",
        description="Extra bowlers for bowling-friendly conditions and low-scoring games",
        risk_level="high",
        composition=_composition(1, 3, 2, 5),
        tags=("Bowling Conditions", "Low Total"),
    ),
    "death-overs": StrategyPreset(
        preset_id="death-overs",
        name="Death Overs Specialists",
        description="Finishers and death bowlers for back-end execution",
        risk_level="high",
        composition=_composition(1, 3, 3, 4),
        tags=("Death Overs", "Specialist"),
    ),
}


def iter_presets() -> Iterable[StrategyPreset]:
    """Return an iterator of all configured presets."""

    return _PRESETS.values()


def get_preset(preset_id: str) -> StrategyPreset:
    """Fetch a preset by id, raising KeyError if missing."""

    key = preset_id.strip().lower()
    if key not in _PRESETS:
        raise KeyError(f"No strategy preset configured for {preset_id!r}")
    return _PRESETS[key]


def get_presets_by_risk(risk_level: str) -> Tuple[StrategyPreset, ...]:
    level = risk_level.strip().lower()
    return tuple(preset for preset in _PRESETS.values() if preset.risk_level == level)
