"""Formation shapes, presets and positional fallback rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


POSITIONS: Tuple[str, ...] = ("GK", "DEF", "MID", "WNG", "ST")
BUCKET_ORDER: Tuple[str, ...] = ("gk", "def", "mid", "wng", "st")
FALLBACK_POSITION = "MID"

POSITION_BUCKETS: Mapping[str, str] = dict(zip(POSITIONS, BUCKET_ORDER))
BUCKET_POSITIONS: Mapping[str, str] = dict(zip(BUCKET_ORDER, POSITIONS))

# Adjacent positions tried, in order, when a bucket cannot be filled from its
# own position.
FALLBACK_PREFERENCES: Mapping[str, Tuple[str, ...]] = {
    "gk": ("DEF",),
    "def": ("MID", "WNG"),
    "mid": ("WNG", "DEF"),
    "wng": ("MID", "ST"),
    "st": ("WNG", "MID"),
}

_SHORTHAND_PATTERN = re.compile(r"^\d-\d-\d$|^\d-\d-\d-\d$")


class Formation(BaseModel):
    """Players required per position bucket.

    Counts are not range-checked here; ``validate_formation`` is the advisory
    check for an 11-a-side shape and the selector honours whatever it is given.
    """

    gk: int = 1
    def_: int = Field(default=4, alias="def")
    mid: int = 3
    wng: int = 0
    st: int = 3

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def count(self, bucket: str) -> int:
        if bucket not in BUCKET_ORDER:
            raise KeyError(f"Unknown formation bucket {bucket!r}")
        return int(getattr(self, "def_" if bucket == "def" else bucket))

    def counts(self) -> Dict[str, int]:
        return {bucket: self.count(bucket) for bucket in BUCKET_ORDER}

    @property
    def total(self) -> int:
        """Players requested, ignoring negative counts."""

        return sum(max(0, count) for count in self.counts().values())

    @property
    def label(self) -> str:
        if self.wng:
            return f"{self.def_}-{self.mid}-{self.wng}-{self.st}"
        return f"{self.def_}-{self.mid}-{self.st}"

    def to_dict(self) -> Dict[str, int]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class FormationValidation:
    ok: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class FormationPreset:
    name: str
    description: str
    formation: Formation


_PRESETS: Dict[str, FormationPreset] = {
    "4-3-3": FormationPreset(
        name="4-3-3",
        description="Back four, three central midfielders, front three",
        formation=Formation(gk=1, def_=4, mid=3, wng=0, st=3),
    ),
    "4-3-3W": FormationPreset(
        name="4-3-3W",
        description="Back four, three midfielders, two wingers and a lone striker",
        formation=Formation(gk=1, def_=4, mid=3, wng=2, st=1),
    ),
    "4-4-2": FormationPreset(
        name="4-4-2",
        description="Flat four across midfield with a strike pair",
        formation=Formation(gk=1, def_=4, mid=4, wng=0, st=2),
    ),
    "4-2-2-2": FormationPreset(
        name="4-2-2-2",
        description="Double pivot with two wide midfielders and two strikers",
        formation=Formation(gk=1, def_=4, mid=2, wng=2, st=2),
    ),
    "3-5-2": FormationPreset(
        name="3-5-2",
        description="Back three, five midfielders, strike pair",
        formation=Formation(gk=1, def_=3, mid=5, wng=0, st=2),
    ),
    "3-4-3": FormationPreset(
        name="3-4-3",
        description="Back three, four midfielders, front three",
        formation=Formation(gk=1, def_=3, mid=4, wng=0, st=3),
    ),
    "4-5-1": FormationPreset(
        name="4-5-1",
        description="Back four, packed midfield, lone striker",
        formation=Formation(gk=1, def_=4, mid=5, wng=0, st=1),
    ),
    "5-3-2": FormationPreset(
        name="5-3-2",
        description="Back five with a strike pair",
        formation=Formation(gk=1, def_=5, mid=3, wng=0, st=2),
    ),
}


def iter_presets() -> Iterable[FormationPreset]:
    """Return an iterator of all configured presets."""

    return _PRESETS.values()


def get_preset(name: str) -> FormationPreset:
    """Fetch a preset by name, raising KeyError if missing."""

    key = name.strip().upper()
    if key not in _PRESETS:
        raise KeyError(f"No formation preset named {name!r}")
    return _PRESETS[key]


def parse_formation(value: Union[str, Mapping[str, Any], Formation]) -> Formation:
    """Resolve a formation from shorthand, a bucket mapping or a Formation.

    ``"4-3-3"`` reads as defenders-midfielders-strikers behind one goalkeeper;
    ``"1-4-3-3"`` carries an explicit leading goalkeeper count. Wingers are
    always zero in shorthand form.
    """

    if isinstance(value, Formation):
        return value
    if isinstance(value, Mapping):
        return Formation.model_validate(dict(value))
    if not isinstance(value, str):
        raise TypeError("formation must be a shorthand string, mapping or Formation")

    text = value.strip()
    if not _SHORTHAND_PATTERN.match(text):
        raise ValueError(f"formation shorthand must look like '4-3-3' or '1-4-3-3', got {value!r}")

    parts = [int(part) for part in text.split("-")]
    if len(parts) == 3:
        gk, (def_, mid, st) = 1, parts
    else:
        gk, def_, mid, st = parts
    return Formation(gk=gk, def_=def_, mid=mid, wng=0, st=st)


def validate_formation(formation: Formation) -> FormationValidation:
    """Check an 11-a-side shape; the first failing rule is reported."""

    if formation.gk != 1:
        return FormationValidation(ok=False, reason="Exactly 1 goalkeeper is required")
    outfield = formation.def_ + formation.mid + formation.wng + formation.st
    if outfield != 10:
        return FormationValidation(ok=False, reason="Outfield players must sum to 10")
    if any(count < 0 for count in (formation.def_, formation.mid, formation.wng, formation.st)):
        return FormationValidation(ok=False, reason="Counts cannot be negative")
    return FormationValidation(ok=True)


def bucket_for_position(position: str) -> Optional[str]:
    """Return the bucket for a recognised position, or None."""

    return POSITION_BUCKETS.get(position)
