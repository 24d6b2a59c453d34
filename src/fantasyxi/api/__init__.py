"""REST API for the fantasyxi lineup generator."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import ValidationError

from fantasyxi.api.schemas import (
    DiversityShortfallResponse,
    LineupBatchResponse,
    LineupFailureResponse,
    LineupPlayerResponse,
    LineupRequest,
    LineupResponse,
    PlayerUsageResponse,
    PresetResponse,
    StatRangePayload,
)
from fantasyxi.config import (
    CompositionTarget,
    LineupRules,
    StatRange,
    StrategyPreset,
    get_preset,
    iter_presets,
)
from fantasyxi.exceptions import ConfigurationError, EmptyPoolError
from fantasyxi.ingest import InMemoryPlayerProvider, PlayerProvider
from fantasyxi.models import GenerationBatch, Lineup, PlayerRecord
from fantasyxi.optimizer import (
    DiversityOptions,
    core_variation,
    default_rules,
    generate_batch,
    player_usage,
)
from fantasyxi.pool import FilterCriteria, export_lineups_to_csv


logger = logging.getLogger(__name__)


def _preset_to_response(preset: StrategyPreset) -> PresetResponse:
    return PresetResponse(
        preset_id=preset.preset_id,
        name=preset.name,
        description=preset.description,
        risk_level=preset.risk_level,
        composition=preset.composition.as_dict(),
        tags=list(preset.tags),
        stat_ranges={
            metric: StatRangePayload(minimum=bounds.minimum, maximum=bounds.maximum)
            for metric, bounds in preset.stat_ranges.items()
        },
    )


def _lineup_to_response(lineup: Lineup) -> LineupResponse:
    return LineupResponse(
        lineup_id=lineup.lineup_id,
        team_index=lineup.team_index,
        credits=round(lineup.total_credits, 2),
        captain_id=lineup.captain.player_id,
        vice_captain_id=lineup.vice_captain.player_id,
        fallback_used=lineup.fallback_used,
        role_counts={role.value: count for role, count in lineup.role_counts.items()},
        team_counts=lineup.team_counts,
        players=[
            LineupPlayerResponse(
                player_id=player.player_id,
                name=player.name,
                team=player.team,
                role=player.role.value,
                credits=player.credits,
                is_captain=player.player_id == lineup.captain.player_id,
                is_vice_captain=player.player_id == lineup.vice_captain.player_id,
            )
            for player in lineup.players
        ],
    )


def _batch_message(batch: GenerationBatch) -> str | None:
    parts = []
    if batch.failures:
        parts.append(
            f"{len(batch.lineups)}/{batch.requested} lineups generated; "
            f"{len(batch.failures)} could not be filled under the active constraints"
        )
    shortfalls = batch.shortfall_indices
    if shortfalls:
        parts.append(f"{len(shortfalls)} lineups are below the diversity target")
    return "; ".join(parts) or None


def _batch_to_response(
    batch: GenerationBatch,
    composition: CompositionTarget,
    request: LineupRequest,
) -> LineupBatchResponse:
    lineup_ids = {lineup.team_index: lineup.lineup_id for lineup in batch.lineups}
    shortfalls = [
        DiversityShortfallResponse(
            team_index=report.team_index,
            lineup_id=lineup_ids[report.team_index],
            max_overlap=round(report.max_overlap, 4),
            conflicts=list(report.conflicts),
            attempts=report.attempts,
        )
        for report in batch.reports
        if not report.meets_target
    ]
    usage = [
        PlayerUsageResponse(
            player_id=item.player.player_id,
            name=item.player.name,
            team=item.player.team,
            role=item.player.role.value,
            count=item.count,
            exposure=item.exposure,
            captain_count=item.captain_count,
            vice_captain_count=item.vice_captain_count,
        )
        for item in player_usage(batch)
    ]
    core = core_variation(batch).core if batch.lineups else ()
    return LineupBatchResponse(
        requested=batch.requested,
        composition=composition.as_dict(),
        min_diversity=batch.min_diversity,
        lineups=[_lineup_to_response(lineup) for lineup in batch.lineups],
        failures=[
            LineupFailureResponse(
                team_index=failure.team_index,
                reason=failure.reason,
                selected=failure.selected,
            )
            for failure in batch.failures
        ],
        shortfalls=shortfalls,
        player_usage=usage,
        core_player_ids=[item.player.player_id for item in core],
        summary=dict(batch.summary),
        message=_batch_message(batch),
        match_id=request.match_id,
        preset_id=request.preset_id,
    )


def create_app(player_provider: PlayerProvider | None = None) -> FastAPI:
    app = FastAPI(title="fantasyxi lineup generator")
    provider: PlayerProvider = player_provider or InMemoryPlayerProvider()
    app.state.player_provider = provider

    def resolve_preset(request: LineupRequest) -> StrategyPreset | None:
        if request.preset_id is None:
            return None
        try:
            return get_preset(request.preset_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown preset {request.preset_id!r}") from exc

    def resolve_players(request: LineupRequest) -> List[PlayerRecord]:
        if request.players is not None:
            try:
                return [PlayerRecord(**player.model_dump()) for player in request.players]
            except ValidationError as exc:
                raise HTTPException(status_code=400, detail=f"Invalid player pool: {exc}") from exc
        if request.match_id is None:
            raise HTTPException(status_code=400, detail="Provide either players or match_id")
        try:
            return provider.fetch_eligible_players(request.match_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown match {request.match_id!r}") from exc

    def resolve_inputs(
        request: LineupRequest,
    ) -> Tuple[CompositionTarget, LineupRules, DiversityOptions, FilterCriteria]:
        preset = resolve_preset(request)
        if request.composition is not None:
            composition = CompositionTarget.from_mapping(request.composition, pad=request.pad_composition)
        elif preset is not None:
            composition = preset.composition
            if request.pad_composition:
                composition = composition.padded()
            composition = composition.validate()
        else:
            raise ConfigurationError("Provide either composition or preset_id")

        base_rules = default_rules()
        rules = LineupRules(
            credit_cap=request.credit_cap,
            max_per_team=request.max_per_team,
            min_diversity=(
                request.min_diversity if request.min_diversity is not None else base_rules.min_diversity
            ),
            reserve_budget=request.reserve_budget,
        ).validate()

        options = DiversityOptions() if request.max_retries is None else DiversityOptions(max_retries=request.max_retries)

        stat_ranges: Dict[str, StatRange] = dict(preset.stat_ranges) if preset else {}
        for metric, bounds in request.stat_ranges.items():
            stat_ranges[metric] = StatRange(bounds.minimum, bounds.maximum)
        criteria = FilterCriteria(
            stat_ranges=stat_ranges,
            exclude_player_ids=tuple(request.exclude_player_ids or ()),
        )
        return composition, rules, options, criteria

    def run_request(request: LineupRequest) -> Tuple[GenerationBatch, CompositionTarget]:
        try:
            composition, rules, options, criteria = resolve_inputs(request)
            players = resolve_players(request)
            batch = generate_batch(
                players,
                composition,
                rules,
                team_count=request.team_count,
                options=options,
                criteria=criteria,
            )
        except ConfigurationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except EmptyPoolError as exc:
            raise HTTPException(status_code=422, detail=exc.message) from exc
        return batch, composition

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/presets", response_model=List[PresetResponse])
    async def list_presets() -> List[PresetResponse]:
        return [_preset_to_response(preset) for preset in iter_presets()]

    @app.get("/presets/{preset_id}", response_model=PresetResponse)
    async def fetch_preset(preset_id: str) -> PresetResponse:
        try:
            return _preset_to_response(get_preset(preset_id))
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown preset {preset_id!r}") from exc

    @app.post("/lineups", response_model=LineupBatchResponse)
    async def build(request: LineupRequest) -> LineupBatchResponse:
        batch, composition = run_request(request)
        if not batch.is_complete:
            logger.warning(
                "Returning partial batch: %s/%s lineups, failed indices %s",
                len(batch.lineups),
                batch.requested,
                list(batch.failed_indices),
            )
        return _batch_to_response(batch, composition, request)

    @app.post("/lineups/export.csv")
    async def export_csv(request: LineupRequest) -> Response:
        batch, _ = run_request(request)
        return Response(
            content=export_lineups_to_csv(batch),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="lineups.csv"'},
        )

    return app
