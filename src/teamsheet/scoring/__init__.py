"""Statistic normalisation and composite scoring."""

from .composite import CompositeReport, CompositeScorer, composite_scores, score_composite
from .normalize import NEUTRAL_SCORE, StatNormalizer, normalize_stats
from .weights import WeightMap, build_weight_map, check_weight

__all__ = [
    "NEUTRAL_SCORE",
    "CompositeReport",
    "CompositeScorer",
    "StatNormalizer",
    "WeightMap",
    "build_weight_map",
    "check_weight",
    "composite_scores",
    "normalize_stats",
    "score_composite",
]
