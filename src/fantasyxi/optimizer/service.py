"""Batch generation: diversity enforcement across lineups and captaincy."""

from __future__ import annotations

import logging
import math
import os
import time
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import FrozenSet, List, Optional, Sequence, Tuple

from fantasyxi.config.rules import CompositionTarget, LineupRules
from fantasyxi.exceptions import ConfigurationError, LineupUnsatisfiable
from fantasyxi.models import (
    DiversityReport,
    GenerationBatch,
    Lineup,
    LineupFailure,
    PlayerRecord,
)
from fantasyxi.optimizer.captaincy import CaptaincyAssigner, CaptaincyPolicy
from fantasyxi.optimizer.permutation import Permutation, SelectionKey, banded
from fantasyxi.optimizer.selection import OverlapGuard, Selection, select_lineup
from fantasyxi.pool.filtering import (
    CAPTAIN_POTENTIAL,
    DREAM_TEAM_PERCENTAGE,
    FilterCriteria,
    filter_players,
)


logger = logging.getLogger(__name__)

_DIVERSITY_RETRIES_ENV = "FANTASYXI_DIVERSITY_RETRIES"
_MIN_DIVERSITY_ENV = "FANTASYXI_MIN_DIVERSITY"

_DIVERSITY_RETRIES_DEFAULT = 12
_MIN_DIVERSITY_DEFAULT = 0.25


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def default_max_retries() -> int:
    return _env_int(_DIVERSITY_RETRIES_ENV, _DIVERSITY_RETRIES_DEFAULT, min_value=0)


def default_min_diversity() -> float:
    return _env_float(_MIN_DIVERSITY_ENV, _MIN_DIVERSITY_DEFAULT, clamp_min=0.0, clamp_max=1.0)


def default_rules() -> LineupRules:
    """Stock rules with the diversity threshold taken from the environment."""

    return LineupRules(min_diversity=default_min_diversity())


@dataclass(frozen=True)
class DiversityOptions:
    max_retries: int = field(default_factory=default_max_retries)
    rank_metric: str = DREAM_TEAM_PERCENTAGE
    captain_metric: str = CAPTAIN_POTENTIAL
    permutation: Permutation = banded

    def validate(self) -> "DiversityOptions":
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be non-negative, got {self.max_retries!r}")
        return self


def _max_shared(rules: LineupRules) -> int:
    # Largest shared count whose ratio stays within 1 - min_diversity.
    return math.floor(rules.lineup_size * rules.max_overlap + 1e-9)


def _shared_counts(selection: Selection, priors: Sequence[FrozenSet[int]]) -> List[int]:
    ids = selection.player_ids
    return [len(ids & prior) for prior in priors]


def _select_diverse(
    pool: Sequence[PlayerRecord],
    composition: CompositionTarget,
    rules: LineupRules,
    team_index: int,
    priors: Tuple[FrozenSet[int], ...],
    options: DiversityOptions,
    max_shared: int,
) -> Tuple[Optional[Selection], int, Optional[LineupUnsatisfiable]]:
    """Try variants for one team index until one clears every prior lineup.

    Returns the best selection seen (fewest shared players with its closest
    prior), the number of attempts made, and the last selector error.
    """

    key = SelectionKey(team_index)
    best: Optional[Selection] = None
    best_worst = 0
    last_error: Optional[LineupUnsatisfiable] = None
    attempts = 0

    for _ in range(options.max_retries + 1):
        attempts += 1
        # Only constrain overlap once an unguarded draw has breached it.
        guard = OverlapGuard(priors, max_shared) if best is not None else None
        try:
            selection = select_lineup(
                pool,
                composition,
                rules,
                key,
                permutation=options.permutation,
                rank_metric=options.rank_metric,
                guard=guard,
            )
        except LineupUnsatisfiable as exc:
            last_error = exc
            key = key.next_variant()
            continue

        worst = max(_shared_counts(selection, priors), default=0)
        if best is None or worst < best_worst:
            best, best_worst = selection, worst
        if worst <= max_shared:
            break
        key = key.next_variant()

    return best, attempts, last_error


def generate_batch(
    players: Sequence[PlayerRecord],
    composition: CompositionTarget,
    rules: Optional[LineupRules] = None,
    team_count: int = 1,
    options: Optional[DiversityOptions] = None,
    *,
    criteria: Optional[FilterCriteria] = None,
) -> GenerationBatch:
    """Generate ``team_count`` lineups from one player pool.

    Configuration is validated before any selection work, so invalid input
    raises ConfigurationError and an empty filtered pool raises
    EmptyPoolError. Past that point nothing is fatal: a team index that no
    variant can fill becomes a LineupFailure, and a lineup that never clears
    the diversity threshold is kept with its report flagged.
    """

    rules = (rules or default_rules()).validate()
    composition = composition.validate()
    options = (options or DiversityOptions()).validate()
    if team_count < 1:
        raise ConfigurationError(f"team_count must be at least 1, got {team_count!r}")

    run_start = time.perf_counter()
    filtered = filter_players(players, criteria)
    pool = filtered.players
    max_shared = _max_shared(rules)
    logger.info(
        "Generating %s lineups (%s) from %s eligible players; credit cap %.1f, max %s per team, min diversity %.2f",
        team_count,
        composition.describe(),
        len(pool),
        rules.credit_cap,
        rules.max_per_team,
        rules.min_diversity,
    )

    assigner = CaptaincyAssigner(
        CaptaincyPolicy(captain_metric=options.captain_metric, rank_metric=options.rank_metric)
    )
    lineups: List[Lineup] = []
    reports: List[DiversityReport] = []
    failures: List[LineupFailure] = []

    for team_index in range(team_count):
        priors = tuple(lineup.player_ids for lineup in lineups)
        selection, attempts, error = _select_diverse(
            pool, composition, rules, team_index, priors, options, max_shared
        )

        if selection is None:
            reason = error.message if error is not None else "No lineup could be selected"
            selected = error.selected if error is not None else 0
            logger.warning(
                "Lineup %s/%s failed after %s attempts: %s",
                team_index + 1,
                team_count,
                attempts,
                reason,
            )
            failures.append(LineupFailure(team_index=team_index, reason=reason, selected=selected))
            continue

        captain, vice_captain = assigner.assign(selection.players, team_index)
        lineup = Lineup(
            lineup_id=f"T{team_index + 1:02d}",
            team_index=team_index,
            players=selection.players,
            captain=captain,
            vice_captain=vice_captain,
            fallback_used=selection.fallback_used,
        )

        shared = _shared_counts(selection, priors)
        conflicts = tuple(
            prior.team_index for prior, count in zip(lineups, shared) if count > max_shared
        )
        report = DiversityReport(
            team_index=team_index,
            overlaps=tuple(count / rules.lineup_size for count in shared),
            conflicts=conflicts,
            meets_target=not conflicts,
            attempts=attempts,
        )
        if conflicts:
            logger.warning(
                "Lineup %s kept below diversity target after %s attempts (max overlap %.0f%% with lineups %s)",
                lineup.lineup_id,
                attempts,
                report.max_overlap * 100,
                ", ".join(str(index + 1) for index in conflicts),
            )
        logger.debug(
            "Built lineup %s: credits %.1f, captain %s, vice-captain %s, attempts %s",
            lineup.lineup_id,
            lineup.total_credits,
            captain.name,
            vice_captain.name,
            attempts,
        )
        lineups.append(lineup)
        reports.append(report)

    elapsed = time.perf_counter() - run_start
    batch = GenerationBatch(
        requested=team_count,
        lineups=tuple(lineups),
        reports=tuple(reports),
        failures=tuple(failures),
        min_diversity=rules.min_diversity,
    )
    batch = replace(
        batch,
        summary=MappingProxyType(
            {
                "requested": team_count,
                "generated": len(lineups),
                "failed": len(failures),
                "diversity_shortfalls": len(batch.shortfall_indices),
                "eligible_players": len(pool),
                "composition": composition.as_dict(),
                "max_overlap": round(batch.max_overlap(), 4),
                "distinct_captains": len(assigner.captain_counts),
                "distinct_vice_captains": len(assigner.vice_captain_counts),
                "elapsed_seconds": round(elapsed, 4),
            }
        ),
    )
    logger.info(
        "Completed %s/%s lineups in %.3fs (%s failed, %s below diversity target)",
        len(lineups),
        team_count,
        elapsed,
        len(failures),
        len(batch.shortfall_indices),
    )
    return batch


__all__ = [
    "DiversityOptions",
    "default_max_retries",
    "default_min_diversity",
    "default_rules",
    "generate_batch",
]
