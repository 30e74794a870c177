"""Best XI selection: per-position fill with positional fallback."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from teamsheet.config import (
    BUCKET_ORDER,
    BUCKET_POSITIONS,
    FALLBACK_POSITION,
    FALLBACK_PREFERENCES,
    POSITIONS,
    Formation,
    FormationValidation,
    bucket_for_position,
    parse_formation,
    tiebreak_stat_key,
    validate_formation,
)
from teamsheet.ingest import build_candidates, roster_for_context, tiebreak_values
from teamsheet.models import PlayerCandidate, SquadPlayer, StatValue
from teamsheet.scoring import CompositeReport, WeightMap, composite_scores


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

Observer = Callable[[str, Mapping[str, Any]], None]


@dataclass(frozen=True)
class SelectionResult:
    gk: Tuple[PlayerCandidate, ...]
    def_: Tuple[PlayerCandidate, ...]
    mid: Tuple[PlayerCandidate, ...]
    wng: Tuple[PlayerCandidate, ...]
    st: Tuple[PlayerCandidate, ...]
    ordered_xi: Tuple[PlayerCandidate, ...]

    def bucket(self, name: str) -> Tuple[PlayerCandidate, ...]:
        if name not in BUCKET_ORDER:
            raise KeyError(f"Unknown formation bucket {name!r}")
        return getattr(self, "def_" if name == "def" else name)

    @property
    def selected_ids(self) -> List[str]:
        return [candidate.id for candidate in self.ordered_xi]

    def counts(self) -> Dict[str, int]:
        return {name: len(self.bucket(name)) for name in BUCKET_ORDER}

    def to_dict(self) -> Dict[str, List[dict]]:
        payload = {name: [candidate.model_dump() for candidate in self.bucket(name)] for name in BUCKET_ORDER}
        payload["ordered_xi"] = [candidate.model_dump() for candidate in self.ordered_xi]
        return payload


def candidate_sort_key(candidate: PlayerCandidate) -> Tuple[float, float, str]:
    """Composite desc, tie-break desc, then display name ascending."""

    return (-candidate.composite, -(candidate.tiebreak or 0.0), candidate.display_name)


def _notify(observer: Optional[Observer], event: str, **payload: Any) -> None:
    if observer is not None:
        observer(event, payload)


def _unique_pool(pool: Iterable[PlayerCandidate], observer: Optional[Observer]) -> List[PlayerCandidate]:
    seen: set[str] = set()
    unique: List[PlayerCandidate] = []
    for candidate in pool:
        if candidate.id in seen:
            _notify(observer, "duplicate_candidate", candidate_id=candidate.id)
            continue
        seen.add(candidate.id)
        unique.append(candidate)
    return unique


def _group_by_position(
    pool: Sequence[PlayerCandidate],
    observer: Optional[Observer],
) -> Dict[str, List[PlayerCandidate]]:
    by_position: Dict[str, List[PlayerCandidate]] = {position: [] for position in POSITIONS}
    for candidate in pool:
        position = candidate.primary_position
        if bucket_for_position(position) is None:
            _notify(observer, "coerced_position", candidate_id=candidate.id, position=position)
            position = FALLBACK_POSITION
        by_position[position].append(candidate)
    for players in by_position.values():
        players.sort(key=candidate_sort_key)
    return by_position


def _primary_fill(
    by_position: Mapping[str, List[PlayerCandidate]],
    formation: Formation,
) -> Tuple[Dict[str, List[PlayerCandidate]], FrozenSet[str]]:
    buckets: Dict[str, List[PlayerCandidate]] = {}
    for bucket in BUCKET_ORDER:
        position = BUCKET_POSITIONS[bucket]
        needed = max(0, formation.count(bucket))
        buckets[bucket] = list(by_position[position][:needed])
    selected_ids = frozenset(candidate.id for players in buckets.values() for candidate in players)
    return buckets, selected_ids


def _take_unselected(
    bucket_players: List[PlayerCandidate],
    needed: int,
    ordered: Iterable[PlayerCandidate],
    selected_ids: FrozenSet[str],
) -> Tuple[List[PlayerCandidate], FrozenSet[str]]:
    taken = set(selected_ids)
    for candidate in ordered:
        if len(bucket_players) >= needed:
            break
        if candidate.id in taken:
            continue
        bucket_players.append(candidate)
        taken.add(candidate.id)
    return bucket_players, frozenset(taken)


def _fill_shortage(
    bucket: str,
    bucket_players: List[PlayerCandidate],
    needed: int,
    by_position: Mapping[str, List[PlayerCandidate]],
    global_order: Sequence[PlayerCandidate],
    selected_ids: FrozenSet[str],
) -> Tuple[List[PlayerCandidate], FrozenSet[str]]:
    filled = list(bucket_players)
    for position in FALLBACK_PREFERENCES[bucket]:
        if len(filled) >= needed:
            break
        filled, selected_ids = _take_unselected(filled, needed, by_position[position], selected_ids)
    if len(filled) < needed:
        filled, selected_ids = _take_unselected(filled, needed, global_order, selected_ids)
    return filled, selected_ids


def select_xi(
    pool: Iterable[PlayerCandidate],
    formation: Formation,
    *,
    observer: Optional[Observer] = None,
) -> SelectionResult:
    """Pick the best available players for each bucket of ``formation``.

    Each bucket takes its own position's best players first. A short bucket
    then borrows from its preferred neighbouring positions and finally from
    the best remaining players overall. Nobody is picked twice, and the
    result holds ``min(formation.total, len(pool))`` players. Buckets with a
    non-positive count stay empty.
    """

    candidates = _unique_pool(pool, observer)
    by_position = _group_by_position(candidates, observer)
    buckets, selected_ids = _primary_fill(by_position, formation)
    _notify(observer, "primary_fill", counts={name: len(players) for name, players in buckets.items()})

    global_order = sorted(candidates, key=candidate_sort_key)
    for bucket in BUCKET_ORDER:
        needed = max(0, formation.count(bucket))
        if len(buckets[bucket]) >= needed:
            continue
        before = len(buckets[bucket])
        buckets[bucket], selected_ids = _fill_shortage(
            bucket,
            buckets[bucket],
            needed,
            by_position,
            global_order,
            selected_ids,
        )
        _notify(
            observer,
            "fallback_fill",
            bucket=bucket,
            needed=needed,
            added=[candidate.id for candidate in buckets[bucket][before:]],
        )

    ordered_xi = tuple(candidate for bucket in BUCKET_ORDER for candidate in buckets[bucket])
    result = SelectionResult(
        gk=tuple(buckets["gk"]),
        def_=tuple(buckets["def"]),
        mid=tuple(buckets["mid"]),
        wng=tuple(buckets["wng"]),
        st=tuple(buckets["st"]),
        ordered_xi=ordered_xi,
    )
    _notify(observer, "completed", total=len(ordered_xi), expected=formation.total, pool=len(candidates))
    return result


@dataclass(frozen=True)
class BestXIOutput:
    context_id: Optional[str]
    formation: Formation
    validation: FormationValidation
    result: SelectionResult
    counts: Dict[str, int]
    report: CompositeReport


def selection_counts(result: SelectionResult, formation: Formation, pool_size: int) -> Dict[str, int]:
    counts = result.counts()
    counts["total"] = len(result.ordered_xi)
    counts["expected"] = formation.total
    counts["pool"] = pool_size
    return counts


def build_best_xi(
    players: Sequence[SquadPlayer],
    values: Iterable[StatValue],
    formation: Formation | str | Mapping[str, Any],
    *,
    weights: Mapping[str, float] | WeightMap | None = None,
    context_id: Optional[str] = None,
    tiebreak_stat: Optional[str] = None,
    observer: Optional[Observer] = None,
) -> BestXIOutput:
    """Score a squad within one team context and select its Best XI.

    With ``context_id`` set, players assigned to another context only enter
    the pool when they have stats recorded for this one.
    """

    resolved = parse_formation(formation)
    validation = validate_formation(resolved)
    if not validation.ok:
        logger.warning("Formation %s is not an 11-a-side shape: %s", resolved.to_dict(), validation.reason)

    values = list(values)
    if context_id is not None:
        values = [value for value in values if value.context_id == context_id]
        eligible = roster_for_context(players, values, context_id)
        if len(eligible) < len(players):
            logger.info(
                "Left out %s players assigned to other contexts without %s stats",
                len(players) - len(eligible),
                context_id,
            )
        players = eligible
    player_ids = [player.id for player in players]
    report = composite_scores(values, weights, player_ids=player_ids)

    tiebreak_key = tiebreak_stat or tiebreak_stat_key()
    tiebreaks = tiebreak_values(values, tiebreak_key)
    pool = build_candidates(players, report.composites, tiebreaks)

    logger.info(
        "Selecting Best XI – context=%s, pool=%s, stats=%s, formation=%s, expected=%s",
        context_id or "-",
        len(pool),
        len(report.stat_keys),
        resolved.label,
        resolved.total,
    )
    result = select_xi(pool, resolved, observer=observer)
    counts = selection_counts(result, resolved, len(pool))
    if counts["total"] < counts["expected"]:
        logger.info(
            "Pool of %s players cannot fill %s slots; returning %s",
            len(pool),
            counts["expected"],
            counts["total"],
        )
    logger.info("Best XI selected – %s", ", ".join(f"{name}:{counts[name]}" for name in BUCKET_ORDER))
    return BestXIOutput(
        context_id=context_id,
        formation=resolved,
        validation=validation,
        result=result,
        counts=counts,
        report=report,
    )
