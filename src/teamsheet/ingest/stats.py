"""Helpers that turn recorded statistics into scoring and selection inputs."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Tuple

from teamsheet.config import POSITIONS
from teamsheet.models import PlayerCandidate, SquadPlayer, StatDefinition, StatValue


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpsertResult:
    player_id: str
    stat_key: str
    status: Literal["inserted", "updated"]


class StatSheet:
    """In-memory stat values, one per (player, statistic, context).

    Recording a value for a key that already exists replaces it.
    """

    def __init__(self, values: Iterable[StatValue] = ()):
        self._values: Dict[Tuple[str, str, str], StatValue] = {}
        if values:
            self.record(values)

    def __len__(self) -> int:
        return len(self._values)

    def record(self, entries: Iterable[StatValue]) -> List[UpsertResult]:
        results: List[UpsertResult] = []
        for entry in entries:
            status: Literal["inserted", "updated"] = "updated" if entry.key in self._values else "inserted"
            self._values[entry.key] = entry
            results.append(UpsertResult(player_id=entry.player_id, stat_key=entry.stat_key, status=status))
        return results

    def values(
        self,
        *,
        context_id: Optional[str] = None,
        player_ids: Optional[Iterable[str]] = None,
    ) -> List[StatValue]:
        wanted = set(player_ids) if player_ids is not None else None
        selected: List[StatValue] = []
        for value in self._values.values():
            if context_id is not None and value.context_id != context_id:
                continue
            if wanted is not None and value.player_id not in wanted:
                continue
            selected.append(value)
        return selected

    def contexts(self) -> List[str]:
        return sorted({value.context_id for value in self._values.values()})


def build_raw_matrix(
    values: Iterable[StatValue],
    player_ids: Optional[Sequence[str]] = None,
) -> Dict[str, Dict[str, float]]:
    """Pivot values into ``player -> stat -> value``.

    Every id in ``player_ids`` gets a row even when nothing is recorded for
    it. Values are expected to come from a single context; when several
    share a (player, stat) pair the last one wins.
    """

    raw: Dict[str, Dict[str, float]] = {pid: {} for pid in (player_ids or [])}
    for value in values:
        raw.setdefault(value.player_id, {})[value.stat_key] = value.value
    return raw


def stat_keys_in_scope(values: Iterable[StatValue]) -> List[str]:
    """Sorted union of statistics with at least one recorded value."""

    return sorted({value.stat_key for value in values})


def tiebreak_values(values: Iterable[StatValue], stat_key: str) -> Dict[str, float]:
    return {value.player_id: value.value for value in values if value.stat_key == stat_key}


def _finite_score(player: SquadPlayer, label: str, value: Optional[float]) -> float:
    score = float(value or 0.0)
    if not math.isfinite(score):
        logger.warning("Player %s has a non-finite %s (%s); using 0.0", player.id, label, score)
        return 0.0
    return score


def build_candidates(
    players: Iterable[SquadPlayer],
    composites: Mapping[str, float],
    tiebreaks: Optional[Mapping[str, float]] = None,
) -> List[PlayerCandidate]:
    """Attach composite and tie-break values to roster entries.

    Players without a composite score enter with ``0.0``; unknown positions
    are passed through unchanged (the selector treats them as MID) and
    logged here so bad roster data surfaces.
    """

    tiebreaks = tiebreaks or {}
    candidates: List[PlayerCandidate] = []
    for player in players:
        composite = _finite_score(player, "composite", composites.get(player.id))
        tiebreak = _finite_score(player, "tie-break", tiebreaks.get(player.id))
        if player.primary_position not in POSITIONS:
            logger.warning(
                "Player %s (%s) has unrecognised position %r; selection will treat them as MID",
                player.id,
                player.display_name,
                player.primary_position,
            )
        candidates.append(
            PlayerCandidate(
                id=player.id,
                display_name=player.display_name,
                primary_position=player.primary_position,
                composite=composite,
                tiebreak=tiebreak,
            )
        )
    return candidates


def roster_for_context(
    players: Iterable[SquadPlayer],
    values: Iterable[StatValue],
    context_id: str,
) -> List[SquadPlayer]:
    """Players eligible for a context's selection.

    A player assigned to another context is left out unless they have a
    value recorded in this one; unassigned players always stay.
    """

    with_stats = {value.player_id for value in values if value.context_id == context_id}
    eligible: List[SquadPlayer] = []
    for player in players:
        if player.current_context in (None, context_id) or player.id in with_stats:
            eligible.append(player)
    return eligible


def out_of_range(
    values: Iterable[StatValue],
    definitions: Mapping[str, StatDefinition],
) -> List[StatValue]:
    """Values falling outside their statistic's declared bounds."""

    flagged: List[StatValue] = []
    for value in values:
        definition = definitions.get(value.stat_key)
        if definition is not None and not definition.in_range(value.value):
            flagged.append(value)
    return flagged
