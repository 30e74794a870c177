"""Input adapters that shape recorded statistics for scoring."""

from .stats import (
    StatSheet,
    UpsertResult,
    build_candidates,
    build_raw_matrix,
    out_of_range,
    roster_for_context,
    stat_keys_in_scope,
    tiebreak_values,
)

__all__ = [
    "StatSheet",
    "UpsertResult",
    "build_candidates",
    "build_raw_matrix",
    "out_of_range",
    "roster_for_context",
    "stat_keys_in_scope",
    "tiebreak_values",
]
