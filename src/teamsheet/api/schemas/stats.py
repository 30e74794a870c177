from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field

from teamsheet.models import WEIGHT_MAX, WEIGHT_MIN, StatDefinition


class StatEntryPayload(BaseModel):
    player_id: str = Field(..., min_length=1)
    stat_key: str = Field(..., min_length=1)
    value: float = Field(..., ge=0.0, allow_inf_nan=False)


class StatsUpsertRequest(BaseModel):
    entries: List[StatEntryPayload] = Field(..., min_length=1)


class UpsertResultResponse(BaseModel):
    player_id: str
    stat_key: str
    status: Literal["inserted", "updated"]


class StatsUpsertResponse(BaseModel):
    ok: bool = True
    context_id: str
    results: List[UpsertResultResponse]


class StatValueResponse(BaseModel):
    player_id: str
    stat_key: str
    value: float
    context_id: str


class WeightItem(BaseModel):
    stat_key: str = Field(..., min_length=1)
    weight: float = Field(..., ge=WEIGHT_MIN, le=WEIGHT_MAX)


class WeightsRequest(BaseModel):
    weights: List[WeightItem] = Field(..., min_length=1)


class WeightsResponse(BaseModel):
    context_id: str
    weights: List[WeightItem]


class StatDefinitionsRequest(BaseModel):
    definitions: List[StatDefinition] = Field(..., min_length=1)
