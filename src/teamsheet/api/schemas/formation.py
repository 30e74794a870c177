from __future__ import annotations

from pydantic import BaseModel

from teamsheet.config import Formation


class FormationValidationResponse(BaseModel):
    ok: bool
    reason: str | None = None


class FormationPresetResponse(BaseModel):
    name: str
    description: str
    formation: dict[str, int]
    total: int
    validation: FormationValidationResponse


class FormationValidateRequest(BaseModel):
    formation: Formation | str


class FormationValidateResponse(BaseModel):
    formation: dict[str, int]
    validation: FormationValidationResponse
