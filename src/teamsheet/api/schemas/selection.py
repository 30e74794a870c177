from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from teamsheet.config import Formation
from teamsheet.models import PlayerCandidate, SquadPlayer, StatDefinition

from .formation import FormationValidationResponse
from .stats import StatEntryPayload


class CompareRequest(BaseModel):
    player_ids: List[str] = Field(..., min_length=1)
    context_id: str | None = None
    stats: List[StatEntryPayload] | None = None
    weights: Dict[str, float] | None = None


class CompareResponse(BaseModel):
    context_id: str | None
    player_ids: List[str]
    stat_keys: List[str]
    raw: Dict[str, Dict[str, float]]
    normalized: Dict[str, Dict[str, float]]
    composites: Dict[str, float]
    stat_definitions: List[StatDefinition] = Field(default_factory=list)


class BestXIRequest(BaseModel):
    context_id: str | None = None
    formation: Formation | str | None = None
    players: List[SquadPlayer] = Field(default_factory=list)
    stats: List[StatEntryPayload] | None = None
    weights: Dict[str, float] | None = None
    tiebreak_stat: str | None = None
    strict: bool = False


class BestXIResponse(BaseModel):
    context_id: str
    formation: Dict[str, int]
    validation: FormationValidationResponse
    xi: Dict[str, List[PlayerCandidate]]
    counts: Dict[str, int]
