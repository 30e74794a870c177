"""Canonical player models consumed by the lineup selector."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PlayerCandidate(BaseModel):
    """Scored player entering a Best XI selection.

    Scores must be finite so candidates always sort in a total order.
    """

    id: str = Field(..., min_length=1)
    display_name: str
    # Kept as a plain string so malformed positions reach the selector, which
    # buckets anything unrecognised as MID.
    primary_position: str
    composite: float
    tiebreak: float = 0.0

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


class SquadPlayer(BaseModel):
    """Roster entry before scoring: identity and position only.

    ``current_context`` is the team the player is normally assigned to.
    """

    id: str = Field(..., min_length=1)
    display_name: str
    primary_position: str
    current_context: str | None = None

    model_config = ConfigDict(frozen=True)
