"""Pydantic models for API I/O."""

from .formation import (
    FormationPresetResponse,
    FormationValidateRequest,
    FormationValidateResponse,
    FormationValidationResponse,
)
from .selection import BestXIRequest, BestXIResponse, CompareRequest, CompareResponse
from .stats import (
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

__all__ = [
    "BestXIRequest",
    "BestXIResponse",
    "CompareRequest",
    "CompareResponse",
    "FormationPresetResponse",
    "FormationValidateRequest",
    "FormationValidateResponse",
    "FormationValidationResponse",
    "StatDefinitionsRequest",
    "StatEntryPayload",
    "StatValueResponse",
    "StatsUpsertRequest",
    "StatsUpsertResponse",
    "UpsertResultResponse",
    "WeightItem",
    "WeightsRequest",
    "WeightsResponse",
]
