import random

import pytest

from teamsheet.config import BUCKET_ORDER, Formation, parse_formation
from teamsheet.ingest import build_candidates
from teamsheet.models import PlayerCandidate, SquadPlayer, StatValue
from teamsheet.selection import build_best_xi, candidate_sort_key, select_xi


_POOL = [
    ("gk1", "GK", 85, 70),
    ("gk2", "GK", 80, 65),
    ("def1", "DEF", 90, 80),
    ("def2", "DEF", 85, 75),
    ("def3", "DEF", 80, 70),
    ("def4", "DEF", 75, 65),
    ("def5", "DEF", 70, 60),
    ("mid1", "MID", 95, 85),
    ("mid2", "MID", 90, 80),
    ("mid3", "MID", 85, 75),
    ("mid4", "MID", 80, 70),
    ("wng1", "WNG", 88, 90),
    ("wng2", "WNG", 85, 85),
    ("wng3", "WNG", 80, 80),
    ("st1", "ST", 92, 85),
    ("st2", "ST", 88, 80),
    ("st3", "ST", 85, 75),
]


def _candidate(pid: str, position: str, composite: float, tiebreak: float = 0.0, name: str | None = None):
    return PlayerCandidate(
        id=pid,
        display_name=name or pid.upper(),
        primary_position=position,
        composite=composite,
        tiebreak=tiebreak,
    )


def _pool(exclude_positions=(), ids=None):
    return [
        _candidate(pid, position, composite, tiebreak)
        for pid, position, composite, tiebreak in _POOL
        if position not in exclude_positions and (ids is None or pid in ids)
    ]


def _ids(players):
    return [player.id for player in players]


def test_full_pool_433():
    result = select_xi(_pool(), parse_formation("4-3-3"))

    assert _ids(result.gk) == ["gk1"]
    assert _ids(result.def_) == ["def1", "def2", "def3", "def4"]
    assert _ids(result.mid) == ["mid1", "mid2", "mid3"]
    assert result.wng == ()
    assert _ids(result.st) == ["st1", "st2", "st3"]
    assert result.selected_ids == [
        "gk1", "def1", "def2", "def3", "def4", "mid1", "mid2", "mid3", "st1", "st2", "st3",
    ]


def test_winger_formation_takes_own_wingers():
    result = select_xi(_pool(), Formation(gk=1, def_=4, mid=3, wng=2, st=1))

    assert _ids(result.wng) == ["wng1", "wng2"]
    assert _ids(result.st) == ["st1"]
    assert len(result.ordered_xi) == 11


def test_small_pool_returns_everyone():
    first_eight = [pid for pid, *_ in _POOL[:8]]
    result = select_xi(_pool(ids=set(first_eight)), parse_formation("4-3-3"))

    assert len(result.ordered_xi) == 8
    assert sorted(result.selected_ids) == sorted(first_eight)
    assert _ids(result.gk) == ["gk1"]
    assert _ids(result.mid) == ["mid1", "def5", "gk2"]
    assert result.st == ()


def test_missing_wingers_borrow_midfield_then_strikers():
    result = select_xi(_pool(exclude_positions={"WNG"}), Formation(gk=1, def_=4, mid=3, wng=2, st=1))

    assert _ids(result.wng) == ["mid4", "st2"]
    assert _ids(result.mid) == ["mid1", "mid2", "mid3"]
    assert _ids(result.st) == ["st1"]


def test_missing_strikers_borrow_wingers():
    result = select_xi(_pool(exclude_positions={"ST"}), parse_formation("4-3-3"))

    assert _ids(result.st) == ["wng1", "wng2", "wng3"]


def test_missing_goalkeepers_borrow_defender():
    result = select_xi(_pool(exclude_positions={"GK"}), parse_formation("4-3-3"))

    assert _ids(result.gk) == ["def5"]
    assert _ids(result.def_) == ["def1", "def2", "def3", "def4"]


def test_short_defence_borrows_midfield_before_wingers():
    ids = {"gk1", "def1", "def2", "mid1", "mid2", "mid3", "mid4", "wng1", "wng2", "wng3", "st1", "st2", "st3"}
    result = select_xi(_pool(ids=ids), parse_formation("4-3-3"))

    assert _ids(result.def_) == ["def1", "def2", "mid4", "wng1"]
    assert _ids(result.mid) == ["mid1", "mid2", "mid3"]


def test_global_fallback_when_preferences_exhausted():
    result = select_xi(_pool(ids={"gk1", "gk2", "st1"}), Formation(gk=1, def_=1, mid=0, wng=0, st=0))

    assert _ids(result.gk) == ["gk1"]
    assert _ids(result.def_) == ["st1"]
    assert "gk2" not in result.selected_ids


def test_tiebreak_then_name_order():
    pool = [
        _candidate("gk1", "GK", 80, 70),
        _candidate("gk2", "GK", 80, 80),
    ]
    result = select_xi(pool, Formation(gk=1, def_=0, mid=0, wng=0, st=0))
    assert _ids(result.gk) == ["gk2"]

    named = [
        _candidate("c", "MID", 0.5, 1.0, name="alpha"),
        _candidate("b", "MID", 0.5, 1.0, name="Bravo"),
        _candidate("a", "MID", 0.5, 1.0, name="Alpha"),
    ]
    assert [c.display_name for c in sorted(named, key=candidate_sort_key)] == ["Alpha", "Bravo", "alpha"]


def test_unknown_position_is_treated_as_midfielder():
    events = []
    pool = _pool(exclude_positions={"MID"}) + [_candidate("cb1", "CB", 99, 0)]

    result = select_xi(pool, parse_formation("4-3-3"), observer=lambda event, payload: events.append((event, payload)))

    assert result.mid[0].id == "cb1"
    assert result.mid[0].primary_position == "CB"
    assert ("coerced_position", {"candidate_id": "cb1", "position": "CB"}) in events
    assert events[-1][0] == "completed"


def test_negative_and_zero_counts_leave_bucket_empty():
    result = select_xi(_pool(), Formation(gk=1, def_=-2, mid=3, wng=0, st=3))

    assert result.def_ == ()
    assert result.wng == ()
    assert len(result.ordered_xi) == 7


def test_empty_pool():
    result = select_xi([], parse_formation("4-3-3"))
    assert result.ordered_xi == ()
    assert result.counts() == {name: 0 for name in BUCKET_ORDER}


def test_duplicate_ids_are_selected_once():
    events = []
    pool = _pool() + [_candidate("mid1", "ST", 99, 99)]

    result = select_xi(pool, parse_formation("4-3-3"), observer=lambda event, payload: events.append(event))

    assert result.selected_ids.count("mid1") == 1
    assert _ids(result.st) == ["st1", "st2", "st3"]
    assert "duplicate_candidate" in events


def test_fallback_event_reports_added_players():
    events = []
    select_xi(
        _pool(exclude_positions={"GK"}),
        parse_formation("4-3-3"),
        observer=lambda event, payload: events.append((event, payload)),
    )

    fallback = [payload for event, payload in events if event == "fallback_fill"]
    assert fallback == [{"bucket": "gk", "needed": 1, "added": ["def5"]}]


def test_better_candidate_never_loses_to_worse_in_same_bucket():
    result = select_xi(_pool(), parse_formation("4-4-2"))
    selected = set(result.selected_ids)
    for bucket in BUCKET_ORDER:
        players = result.bucket(bucket)
        for chosen in players:
            for other in _pool():
                if other.primary_position != chosen.primary_position or other.id in selected:
                    continue
                assert candidate_sort_key(chosen) <= candidate_sort_key(other)


def test_random_pools_fill_without_duplicates():
    rng = random.Random(42)
    positions = ["GK", "DEF", "MID", "WNG", "ST", "CB"]
    for trial in range(50):
        size = rng.randint(0, 25)
        pool = [
            _candidate(
                f"p{trial}_{index}",
                rng.choice(positions),
                round(rng.random(), 3),
                rng.randint(0, 100),
            )
            for index in range(size)
        ]
        formation = Formation(
            gk=rng.randint(0, 2),
            def_=rng.randint(-1, 5),
            mid=rng.randint(0, 5),
            wng=rng.randint(0, 3),
            st=rng.randint(0, 3),
        )

        result = select_xi(pool, formation)

        assert len(result.ordered_xi) == min(formation.total, size)
        assert len(set(result.selected_ids)) == len(result.selected_ids)
        for bucket in BUCKET_ORDER:
            assert len(result.bucket(bucket)) <= max(0, formation.count(bucket))


def test_selection_is_deterministic():
    pool = _pool()
    shuffled = list(pool)
    random.Random(7).shuffle(shuffled)

    first = select_xi(pool, parse_formation("3-5-2"))
    second = select_xi(shuffled, parse_formation("3-5-2"))

    assert first.selected_ids == second.selected_ids


def test_bucket_rejects_unknown_name():
    result = select_xi(_pool(), parse_formation("4-3-3"))
    with pytest.raises(KeyError):
        result.bucket("lb")


def _squad_and_stats(context_id: str = "1s"):
    players = [
        SquadPlayer(id=pid, display_name=pid.upper(), primary_position=position)
        for pid, position, _, _ in _POOL
    ]
    stats = []
    for pid, _, rating, speed in _POOL:
        stats.append(StatValue(player_id=pid, stat_key="rating", value=rating, context_id=context_id))
        stats.append(StatValue(player_id=pid, stat_key="speed", value=speed, context_id=context_id))
    return players, stats


def test_build_best_xi_end_to_end():
    players, stats = _squad_and_stats()
    other_context = [StatValue(player_id="gk2", stat_key="rating", value=1000, context_id="2s")]

    output = build_best_xi(
        players,
        stats + other_context,
        "4-3-3",
        weights={"rating": 1.5, "speed": 0.5},
        context_id="1s",
    )

    assert output.validation.ok
    assert output.report.stat_keys == ["rating", "speed"]
    assert output.counts["total"] == 11
    assert output.counts["expected"] == 11
    assert output.counts["pool"] == 17
    assert _ids(output.result.gk) == ["gk1"]
    assert output.result.gk[0].tiebreak == 70
    assert 0.0 <= output.result.ordered_xi[0].composite <= 1.0


def test_build_best_xi_reports_invalid_formation_but_still_selects():
    players, stats = _squad_and_stats()

    output = build_best_xi(players, stats, {"gk": 2, "def": 4, "mid": 3, "wng": 0, "st": 3}, context_id="1s")

    assert not output.validation.ok
    assert output.validation.reason == "Exactly 1 goalkeeper is required"
    assert _ids(output.result.gk) == ["gk1", "gk2"]
    assert output.counts["expected"] == 12


def test_build_best_xi_rejects_bad_shorthand():
    players, stats = _squad_and_stats()
    with pytest.raises(ValueError):
        build_best_xi(players, stats, "4-4", context_id="1s")


def test_build_best_xi_uses_configured_tiebreak(monkeypatch):
    monkeypatch.setenv("TEAMSHEET_TIEBREAK_STAT", "stamina")
    players = [
        SquadPlayer(id="gk1", display_name="Keeper One", primary_position="GK"),
        SquadPlayer(id="gk2", display_name="Keeper Two", primary_position="GK"),
    ]
    stats = [
        StatValue(player_id="gk1", stat_key="rating", value=50, context_id="1s"),
        StatValue(player_id="gk2", stat_key="rating", value=50, context_id="1s"),
        StatValue(player_id="gk1", stat_key="stamina", value=10, context_id="1s"),
        StatValue(player_id="gk2", stat_key="stamina", value=10, context_id="1s"),
        StatValue(player_id="gk2", stat_key="speed", value=99, context_id="1s"),
    ]

    output = build_best_xi(players, stats, Formation(gk=1, def_=0, mid=0, wng=0, st=0), context_id="1s")

    # Composites tie and stamina ties, so the display name decides.
    assert _ids(output.result.gk) == ["gk1"]
    assert output.result.gk[0].tiebreak == 10


def test_nan_composite_does_not_make_selection_order_dependent():
    players = [
        SquadPlayer(id="x", display_name="X", primary_position="DEF"),
        SquadPlayer(id="lo", display_name="Lo", primary_position="DEF"),
        SquadPlayer(id="hi", display_name="Hi", primary_position="DEF"),
    ]
    composites = {"x": float("nan"), "lo": 0.1, "hi": 0.9}
    formation = Formation(gk=0, def_=1, mid=0, wng=0, st=0)

    forward = select_xi(build_candidates(players, composites), formation)
    backward = select_xi(build_candidates(list(reversed(players)), composites), formation)

    assert _ids(forward.def_) == ["hi"]
    assert _ids(backward.def_) == ["hi"]


def test_build_best_xi_narrows_roster_to_context():
    players = [
        SquadPlayer(id="gk1", display_name="Home Keeper", primary_position="GK", current_context="1s"),
        SquadPlayer(id="gk2", display_name="Away Keeper", primary_position="GK", current_context="2s"),
        SquadPlayer(id="gk3", display_name="Loan Keeper", primary_position="GK", current_context="2s"),
    ]
    stats = [
        StatValue(player_id="gk1", stat_key="rating", value=40, context_id="1s"),
        StatValue(player_id="gk3", stat_key="rating", value=60, context_id="1s"),
        StatValue(player_id="gk2", stat_key="rating", value=99, context_id="2s"),
    ]

    output = build_best_xi(players, stats, Formation(gk=2, def_=0, mid=0, wng=0, st=0), context_id="1s")

    assert _ids(output.result.gk) == ["gk3", "gk1"]
    assert output.counts["pool"] == 2
