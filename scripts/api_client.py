"""Lightweight REST client for the teamsheet API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_squad(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid squad JSON: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the teamsheet REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("squad", type=Path, nargs="?", help="Squad JSON with players, stats and weights")
    parser.add_argument("--context", default=None, help="Team context code, e.g. 1s")
    parser.add_argument("--formation", default="4-3-3", help="Formation shorthand")
    parser.add_argument("--strict", action="store_true", help="Reject formations that are not 11-a-side")
    parser.add_argument("--list-formations", action="store_true", help="List formation presets and exit")
    parser.add_argument("--get-weights", metavar="CONTEXT", help="Fetch stored weights for a context and exit")
    args = parser.parse_args()

    if args.list_formations or args.get_weights:
        with httpx.Client(base_url=args.base_url) as client:
            if args.list_formations:
                resp = client.get("/formations")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
            if args.get_weights:
                resp = client.get(f"/contexts/{args.get_weights}/weights")
                resp.raise_for_status()
                print(json.dumps(resp.json(), indent=2))
        return

    if args.squad is None:
        raise SystemExit("a squad file is required unless using --list-formations/--get-weights")

    squad = load_squad(args.squad)
    payload = {
        "context_id": args.context,
        "formation": args.formation,
        "players": squad.get("players", []),
        "stats": squad.get("stats"),
        "weights": squad.get("weights"),
        "strict": args.strict,
    }

    with httpx.Client(base_url=args.base_url) as client:
        resp = client.post("/best-xi", json=payload)
        if resp.status_code == 400:
            raise SystemExit(f"request rejected: {resp.json().get('detail')}")
        resp.raise_for_status()
        body = resp.json()
        print("Counts:", json.dumps(body["counts"], indent=2))
        if not body["validation"]["ok"]:
            print(f"Formation warning: {body['validation']['reason']}")
        for player in body["xi"]["ordered_xi"]:
            print(f"{player['primary_position']:<4} {player['display_name']} ({player['composite']:.3f})")


if __name__ == "__main__":
    main()
