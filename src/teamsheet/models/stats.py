"""Statistic records, definitions and per-team weight overrides."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


WEIGHT_MIN = 0.5
WEIGHT_MAX = 1.5
DEFAULT_WEIGHT = 1.0


class StatValue(BaseModel):
    """A single observation of one statistic for one player in one team context."""

    player_id: str = Field(..., min_length=1)
    stat_key: str = Field(..., min_length=1)
    value: float
    context_id: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.player_id, self.stat_key, self.context_id)


class StatDefinition(BaseModel):
    """Domain and direction of a statistic.

    The bounds are advisory metadata for entry forms; scoring never clamps to
    them and never inverts values on ``higher_is_better``.
    """

    key: str = Field(..., min_length=1)
    label: str
    min_value: float = 0.0
    max_value: float = 100.0
    higher_is_better: bool = True

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_bounds(self) -> "StatDefinition":
        if self.min_value > self.max_value:
            raise ValueError(f"min_value {self.min_value} exceeds max_value {self.max_value} for {self.key!r}")
        return self

    def in_range(self, value: float) -> bool:
        return self.min_value <= value <= self.max_value


class WeightOverride(BaseModel):
    """Coach-configured weight for one statistic within a team context."""

    context_id: str = Field(..., min_length=1)
    stat_key: str = Field(..., min_length=1)
    weight: float = Field(..., ge=WEIGHT_MIN, le=WEIGHT_MAX)

    model_config = ConfigDict(frozen=True)
