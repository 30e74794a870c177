"""Command-line interface for picking a Best XI from a squad file."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from pydantic import ValidationError

from teamsheet.config import Formation, default_context, default_formation, get_preset
from teamsheet.config_loader import WeightProfile
from teamsheet.models import SquadPlayer, StatValue, WeightOverride
from teamsheet.scoring import build_weight_map, check_weight
from teamsheet.selection import BestXIOutput, build_best_xi


def _parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Select a Best XI from composite player scores")
    parser.add_argument(
        "squad",
        type=Path,
        help="Squad JSON with 'players', 'stats' and optional 'weights'",
    )
    parser.add_argument(
        "--formation",
        default=None,
        help="Formation shorthand (e.g., 4-3-3, 1-4-4-2) or preset name (e.g., 4-3-3W)",
    )
    parser.add_argument("--context", default=None, help="Team context whose stats and weights apply")
    parser.add_argument("--tiebreak-stat", default=None, help="Stat used to split equal composite scores")
    parser.add_argument("--weights-profile", type=Path, default=None, help="Load weight profile JSON")
    parser.add_argument("--save-profile", type=Path, default=None, help="Save the effective weights as a profile")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Refuse formations that are not a legal 11-a-side shape",
    )
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write the selection JSON")
    return parser.parse_args(argv)


def _resolve_formation_arg(value: str | None) -> Formation | str:
    text = value or default_formation()
    try:
        return get_preset(text).formation
    except KeyError:
        return text


def _load_squad(path: Path, context_id: str) -> tuple[list[SquadPlayer], list[StatValue], list[WeightOverride]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    players = [SquadPlayer.model_validate(item) for item in data.get("players", [])]
    stats = [
        StatValue.model_validate({"context_id": context_id, **item})
        for item in data.get("stats", [])
    ]
    overrides = [
        WeightOverride(context_id=context_id, stat_key=stat_key, weight=check_weight(stat_key, weight))
        for stat_key, weight in (data.get("weights") or {}).items()
    ]
    return players, stats, overrides


def _output_payload(output: BestXIOutput) -> dict:
    return {
        "context_id": output.context_id,
        "formation": output.formation.to_dict(),
        "validation": {"ok": output.validation.ok, "reason": output.validation.reason},
        "xi": output.result.to_dict(),
        "counts": output.counts,
        "stat_keys": output.report.stat_keys,
    }


def main(argv: List[str] | None = None) -> int:
    args = _parse_args(argv)
    context_id = args.context or default_context()

    try:
        players, stats, overrides = _load_squad(args.squad, context_id)
    except (ValueError, ValidationError) as exc:
        print(f"Invalid squad file {args.squad}: {exc}", file=sys.stderr)
        return 2

    if args.weights_profile:
        try:
            profile = WeightProfile.load(args.weights_profile)
        except (OSError, ValueError) as exc:
            print(f"Invalid weight profile {args.weights_profile}: {exc}", file=sys.stderr)
            return 2
        # Squad-file weights are applied after the profile so they win.
        overrides = [
            WeightOverride(context_id=context_id, stat_key=item.stat_key, weight=item.weight)
            for item in profile.overrides()
        ] + overrides
    weights = build_weight_map(overrides, context_id)

    if args.save_profile:
        WeightProfile(context_id=context_id, weights=dict(weights)).save(args.save_profile)
        print(f"Saved weight profile to {args.save_profile}")

    try:
        output = build_best_xi(
            players,
            stats,
            _resolve_formation_arg(args.formation),
            weights=weights,
            context_id=context_id,
            tiebreak_stat=args.tiebreak_stat,
        )
    except ValueError as exc:
        print(f"Invalid formation: {exc}", file=sys.stderr)
        return 2

    if args.strict and not output.validation.ok:
        print(f"Formation rejected: {output.validation.reason}", file=sys.stderr)
        return 1

    counts = output.counts
    print(
        f"Best XI for {context_id} ({output.formation.label}): "
        f"{counts['total']}/{counts['expected']} selected from {counts['pool']} players"
    )
    if not output.validation.ok:
        print(f"Warning: {output.validation.reason}")
    for player in output.result.ordered_xi:
        print(f"  {player.primary_position:<4} {player.display_name:<24} {player.composite:.3f}")

    if args.output:
        args.output.write_text(json.dumps(_output_payload(output), indent=2), encoding="utf-8")
        print(f"Wrote selection to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
