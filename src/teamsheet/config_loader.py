"""Persist and load per-team weight profiles for the CLI."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from teamsheet.models import WeightOverride
from teamsheet.scoring import WeightMap, check_weight


@dataclass
class WeightProfile:
    context_id: str
    weights: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "WeightProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        weights = {
            str(stat_key): check_weight(str(stat_key), weight)
            for stat_key, weight in (data.get("weights") or {}).items()
        }
        return cls(context_id=str(data.get("context_id", "")), weights=weights)

    def save(self, path: Path) -> None:
        payload = {
            "context_id": self.context_id,
            "weights": dict(sorted(self.weights.items())),
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def overrides(self) -> List[WeightOverride]:
        return [
            WeightOverride(context_id=self.context_id, stat_key=stat_key, weight=weight)
            for stat_key, weight in self.weights.items()
        ]

    def weight_map(self) -> WeightMap:
        return WeightMap.from_mapping(self.weights)
