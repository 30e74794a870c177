"""Weighted composite scores built from normalised statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from teamsheet.ingest.stats import build_raw_matrix, stat_keys_in_scope
from teamsheet.models import StatValue

from .normalize import NEUTRAL_SCORE, NormalizedMatrix, normalize_stats
from .weights import WeightMap


def score_composite(
    normalized_row: Mapping[str, float],
    weights: Mapping[str, float] | WeightMap,
    stat_keys: Iterable[str],
) -> float:
    """Weighted mean of a player's normalised statistics.

    Only keys in ``stat_keys`` count toward either side of the mean; an
    in-scope key missing from the row counts as neutral. Keys are visited in
    sorted order so repeated calls sum in the same order.
    """

    weight_map = weights if isinstance(weights, WeightMap) else WeightMap.from_mapping(weights, validate=False)
    numerator = 0.0
    denominator = 0.0
    for stat_key in sorted(set(stat_keys)):
        weight = weight_map.get_or(stat_key)
        numerator += float(normalized_row.get(stat_key, NEUTRAL_SCORE)) * weight
        denominator += weight
    if denominator == 0.0:
        return 0.0
    return numerator / denominator


@dataclass(frozen=True)
class CompositeScorer:
    """Scorer bound to one team context's weights."""

    weights: WeightMap

    def score(self, normalized_row: Mapping[str, float], stat_keys: Iterable[str]) -> float:
        return score_composite(normalized_row, self.weights, stat_keys)

    def score_all(self, normalized: NormalizedMatrix, stat_keys: Sequence[str]) -> Dict[str, float]:
        return {player_id: self.score(row, stat_keys) for player_id, row in normalized.items()}


@dataclass(frozen=True)
class CompositeReport:
    player_ids: List[str]
    stat_keys: List[str]
    raw: Dict[str, Dict[str, float]]
    normalized: NormalizedMatrix
    composites: Dict[str, float]


def composite_scores(
    values: Iterable[StatValue],
    weights: Mapping[str, float] | WeightMap | None,
    *,
    player_ids: Optional[Sequence[str]] = None,
) -> CompositeReport:
    """Normalise and score a comparison set of players.

    The comparison set is ``player_ids`` when given (players without any
    recorded values still get neutral rows), otherwise every player with a
    value. Statistics in scope are those recorded for at least one player in
    the set.
    """

    values = list(values)
    if player_ids is None:
        ids = list(dict.fromkeys(value.player_id for value in values))
    else:
        ids = list(dict.fromkeys(player_ids))
        wanted = set(ids)
        values = [value for value in values if value.player_id in wanted]

    raw = build_raw_matrix(values, ids)
    stat_keys = stat_keys_in_scope(values)
    normalized = normalize_stats(raw, stat_keys)
    weight_map = weights if isinstance(weights, WeightMap) else WeightMap.from_mapping(weights)
    composites = CompositeScorer(weight_map).score_all(normalized, stat_keys)
    return CompositeReport(
        player_ids=ids,
        stat_keys=stat_keys,
        raw=raw,
        normalized=normalized,
        composites=composites,
    )
