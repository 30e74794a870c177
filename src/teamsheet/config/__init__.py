"""Configuration helpers for formations and service defaults."""

from .formation import (
    BUCKET_ORDER,
    BUCKET_POSITIONS,
    FALLBACK_POSITION,
    FALLBACK_PREFERENCES,
    POSITIONS,
    Formation,
    FormationPreset,
    FormationValidation,
    bucket_for_position,
    get_preset,
    iter_presets,
    parse_formation,
    validate_formation,
)
from .settings import default_context, default_formation, tiebreak_stat_key

__all__ = [
    "BUCKET_ORDER",
    "BUCKET_POSITIONS",
    "FALLBACK_POSITION",
    "FALLBACK_PREFERENCES",
    "POSITIONS",
    "Formation",
    "FormationPreset",
    "FormationValidation",
    "bucket_for_position",
    "default_context",
    "default_formation",
    "get_preset",
    "iter_presets",
    "parse_formation",
    "tiebreak_stat_key",
    "validate_formation",
]
