"""Domain models shared across scoring, ingestion and selection layers."""

from .player import PlayerCandidate, SquadPlayer
from .stats import (
    DEFAULT_WEIGHT,
    WEIGHT_MAX,
    WEIGHT_MIN,
    StatDefinition,
    StatValue,
    WeightOverride,
)

__all__ = [
    "DEFAULT_WEIGHT",
    "WEIGHT_MAX",
    "WEIGHT_MIN",
    "PlayerCandidate",
    "SquadPlayer",
    "StatDefinition",
    "StatValue",
    "WeightOverride",
]
