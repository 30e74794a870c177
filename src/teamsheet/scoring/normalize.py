"""Min-max normalisation of raw statistics across a comparison set."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple


NEUTRAL_SCORE = 0.5

RawMatrix = Mapping[str, Mapping[str, float]]
NormalizedMatrix = Dict[str, Dict[str, float]]


def _numeric(value: object) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    # NaN and infinities are skipped like any other unusable value.
    if not math.isfinite(number):
        return None
    return number


def _stat_range(raw: RawMatrix, stat_key: str) -> Optional[Tuple[float, float]]:
    low: Optional[float] = None
    high: Optional[float] = None
    for row in raw.values():
        value = _numeric((row or {}).get(stat_key))
        if value is None:
            continue
        if low is None or value < low:
            low = value
        if high is None or value > high:
            high = value
    if low is None or high is None:
        return None
    return low, high


def normalize_stats(raw: RawMatrix, stat_keys: Iterable[str]) -> NormalizedMatrix:
    """Rescale each statistic to ``[0, 1]`` relative to the players in ``raw``.

    Every player gets a value for every key. A missing or non-finite value,
    a single data point, or a statistic where everyone is level all map to
    the neutral ``0.5``. The result depends on the comparison set: the same raw value can
    normalise differently against a different pool.
    """

    normalized: NormalizedMatrix = {player_id: {} for player_id in raw}
    for stat_key in stat_keys:
        bounds = _stat_range(raw, stat_key)
        for player_id, row in raw.items():
            value = _numeric((row or {}).get(stat_key))
            if value is None or bounds is None:
                normalized[player_id][stat_key] = NEUTRAL_SCORE
                continue
            low, high = bounds
            if high == low:
                normalized[player_id][stat_key] = NEUTRAL_SCORE
            else:
                normalized[player_id][stat_key] = (value - low) / (high - low)
    return normalized


@dataclass(frozen=True)
class StatNormalizer:
    """Normaliser bound to a fixed set of statistics."""

    stat_keys: Tuple[str, ...]

    @classmethod
    def for_keys(cls, stat_keys: Iterable[str]) -> "StatNormalizer":
        return cls(stat_keys=tuple(sorted(set(stat_keys))))

    def normalize(self, raw: RawMatrix) -> NormalizedMatrix:
        return normalize_stats(raw, self.stat_keys)
