"""REST API for composite scoring and Best XI selection."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from fastapi import FastAPI, HTTPException
from pydantic import ValidationError

from teamsheet.api.schemas import (
    BestXIRequest,
    BestXIResponse,
    CompareRequest,
    CompareResponse,
    FormationPresetResponse,
    FormationValidateRequest,
    FormationValidateResponse,
    FormationValidationResponse,
    StatDefinitionsRequest,
    StatEntryPayload,
    StatsUpsertRequest,
    StatsUpsertResponse,
    StatValueResponse,
    UpsertResultResponse,
    WeightItem,
    WeightsRequest,
    WeightsResponse,
)
from teamsheet.config import (
    Formation,
    FormationValidation,
    default_context,
    default_formation,
    iter_presets,
    parse_formation,
    validate_formation,
)
from teamsheet.ingest import StatSheet, out_of_range
from teamsheet.models import StatDefinition, StatValue, WeightOverride
from teamsheet.scoring import WeightMap, build_weight_map, composite_scores
from teamsheet.selection import build_best_xi


logger = logging.getLogger("uvicorn.error")


def _validation_to_response(validation: FormationValidation) -> FormationValidationResponse:
    return FormationValidationResponse(ok=validation.ok, reason=validation.reason)


def _resolve_formation(value: Formation | str | None) -> Formation:
    try:
        return parse_formation(value if value is not None else default_formation())
    except (ValueError, ValidationError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _entries_to_values(entries: Iterable[StatEntryPayload], context_id: str) -> List[StatValue]:
    return [
        StatValue(player_id=entry.player_id, stat_key=entry.stat_key, value=entry.value, context_id=context_id)
        for entry in entries
    ]


def create_app() -> FastAPI:
    app = FastAPI(title="teamsheet selection service")
    app.state.stat_sheet = StatSheet()
    app.state.weight_overrides = {}
    app.state.stat_definitions = {}

    def stat_sheet() -> StatSheet:
        return app.state.stat_sheet

    def weight_overrides() -> Dict[Tuple[str, str], WeightOverride]:
        return app.state.weight_overrides

    def stat_definitions() -> Dict[str, StatDefinition]:
        return app.state.stat_definitions

    def resolve_weights(context_id: str, weights: dict[str, float] | None) -> WeightMap:
        if weights is None:
            return build_weight_map(weight_overrides().values(), context_id)
        try:
            return WeightMap.from_mapping(weights)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/formations", response_model=list[FormationPresetResponse])
    async def list_formations() -> list[FormationPresetResponse]:
        return [
            FormationPresetResponse(
                name=preset.name,
                description=preset.description,
                formation=preset.formation.to_dict(),
                total=preset.formation.total,
                validation=_validation_to_response(validate_formation(preset.formation)),
            )
            for preset in iter_presets()
        ]

    @app.post("/formations/validate", response_model=FormationValidateResponse)
    async def validate(payload: FormationValidateRequest) -> FormationValidateResponse:
        formation = _resolve_formation(payload.formation)
        return FormationValidateResponse(
            formation=formation.to_dict(),
            validation=_validation_to_response(validate_formation(formation)),
        )

    @app.get("/stat-definitions", response_model=list[StatDefinition])
    async def list_stat_definitions() -> list[StatDefinition]:
        return [stat_definitions()[key] for key in sorted(stat_definitions())]

    @app.put("/stat-definitions", response_model=list[StatDefinition])
    async def put_stat_definitions(payload: StatDefinitionsRequest) -> list[StatDefinition]:
        for definition in payload.definitions:
            stat_definitions()[definition.key] = definition
        logger.info("Stored %s stat definitions", len(payload.definitions))
        return await list_stat_definitions()

    @app.get("/contexts", response_model=list[str])
    async def list_contexts() -> list[str]:
        return stat_sheet().contexts()

    @app.get("/contexts/{context_id}/weights", response_model=WeightsResponse)
    async def get_weights(context_id: str) -> WeightsResponse:
        weight_map = build_weight_map(weight_overrides().values(), context_id)
        return WeightsResponse(
            context_id=context_id,
            weights=[WeightItem(stat_key=key, weight=weight_map[key]) for key in sorted(weight_map)],
        )

    @app.put("/contexts/{context_id}/weights", response_model=WeightsResponse)
    async def put_weights(context_id: str, payload: WeightsRequest) -> WeightsResponse:
        overrides = weight_overrides()
        for item in payload.weights:
            overrides[(context_id, item.stat_key)] = WeightOverride(
                context_id=context_id,
                stat_key=item.stat_key,
                weight=item.weight,
            )
        logger.info("Stored %s weight overrides for context %s", len(payload.weights), context_id)
        return await get_weights(context_id)

    @app.post("/contexts/{context_id}/stats", response_model=StatsUpsertResponse)
    async def post_stats(context_id: str, payload: StatsUpsertRequest) -> StatsUpsertResponse:
        values = _entries_to_values(payload.entries, context_id)
        for value in out_of_range(values, stat_definitions()):
            logger.warning(
                "Stat %s=%s for player %s is outside its declared range",
                value.stat_key,
                value.value,
                value.player_id,
            )
        results = stat_sheet().record(values)
        inserted = sum(1 for result in results if result.status == "inserted")
        logger.info(
            "Recorded %s stat entries for context %s (%s inserted, %s updated)",
            len(results),
            context_id,
            inserted,
            len(results) - inserted,
        )
        return StatsUpsertResponse(
            context_id=context_id,
            results=[
                UpsertResultResponse(player_id=result.player_id, stat_key=result.stat_key, status=result.status)
                for result in results
            ],
        )

    @app.get("/contexts/{context_id}/stats", response_model=list[StatValueResponse])
    async def get_stats(context_id: str, player_id: str | None = None) -> list[StatValueResponse]:
        player_ids = [player_id] if player_id else None
        return [
            StatValueResponse(**value.model_dump())
            for value in stat_sheet().values(context_id=context_id, player_ids=player_ids)
        ]

    @app.post("/compare", response_model=CompareResponse)
    async def compare(payload: CompareRequest) -> CompareResponse:
        if payload.stats is not None:
            context_id = payload.context_id or default_context()
            values = _entries_to_values(payload.stats, context_id)
        else:
            context_id = payload.context_id
            values = stat_sheet().values(context_id=context_id, player_ids=payload.player_ids)
        weights = resolve_weights(context_id or default_context(), payload.weights)
        report = composite_scores(values, weights, player_ids=payload.player_ids)
        definitions = stat_definitions()
        return CompareResponse(
            context_id=context_id,
            player_ids=report.player_ids,
            stat_keys=report.stat_keys,
            raw=report.raw,
            normalized=report.normalized,
            composites=report.composites,
            stat_definitions=[definitions[key] for key in report.stat_keys if key in definitions],
        )

    @app.post("/best-xi", response_model=BestXIResponse)
    async def best_xi(payload: BestXIRequest) -> BestXIResponse:
        context_id = payload.context_id or default_context()
        formation = _resolve_formation(payload.formation)
        validation = validate_formation(formation)
        if payload.strict and not validation.ok:
            raise HTTPException(status_code=400, detail=validation.reason)

        if payload.stats is not None:
            values = _entries_to_values(payload.stats, context_id)
        else:
            values = stat_sheet().values(context_id=context_id)
        weights = resolve_weights(context_id, payload.weights)

        output = build_best_xi(
            payload.players,
            values,
            formation,
            weights=weights,
            context_id=context_id,
            tiebreak_stat=payload.tiebreak_stat,
        )
        return BestXIResponse(
            context_id=context_id,
            formation=output.formation.to_dict(),
            validation=_validation_to_response(output.validation),
            xi=output.result.to_dict(),
            counts=output.counts,
        )

    return app


__all__ = ["create_app"]
