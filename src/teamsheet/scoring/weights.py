"""Per-team statistic weights."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Mapping

from teamsheet.models import DEFAULT_WEIGHT, WEIGHT_MAX, WEIGHT_MIN, WeightOverride


def check_weight(stat_key: str, weight: float) -> float:
    """Reject weights outside the coach-configurable range."""

    value = float(weight)
    if not WEIGHT_MIN <= value <= WEIGHT_MAX:
        raise ValueError(
            f"weight for {stat_key!r} must be between {WEIGHT_MIN} and {WEIGHT_MAX}, got {weight!r}"
        )
    return value


@dataclass(frozen=True)
class WeightMap(Mapping[str, float]):
    """Explicit weights with a neutral default for statistics not overridden."""

    weights: Mapping[str, float] = field(default_factory=dict)
    default: float = DEFAULT_WEIGHT

    def get_or(self, stat_key: str, default: float | None = None) -> float:
        fallback = self.default if default is None else default
        return float(self.weights.get(stat_key, fallback))

    def __getitem__(self, stat_key: str) -> float:
        return self.weights[stat_key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.weights)

    def __len__(self) -> int:
        return len(self.weights)

    @classmethod
    def from_mapping(cls, weights: Mapping[str, float] | None, *, validate: bool = True) -> "WeightMap":
        items: Dict[str, float] = {}
        for stat_key, weight in (weights or {}).items():
            items[stat_key] = check_weight(stat_key, weight) if validate else float(weight)
        return cls(weights=items)


def build_weight_map(overrides: Iterable[WeightOverride], context_id: str) -> WeightMap:
    """Collapse overrides for one context; later entries replace earlier ones."""

    weights: Dict[str, float] = {}
    for override in overrides:
        if override.context_id != context_id:
            continue
        weights[override.stat_key] = override.weight
    return WeightMap(weights=weights)
