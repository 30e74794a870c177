"""Environment-driven defaults for the selection service."""

from __future__ import annotations

import logging
import os

from .formation import parse_formation

logger = logging.getLogger("uvicorn.error")

_DEFAULT_FORMATION_ENV = "TEAMSHEET_DEFAULT_FORMATION"
_TIEBREAK_STAT_ENV = "TEAMSHEET_TIEBREAK_STAT"
_DEFAULT_CONTEXT_ENV = "TEAMSHEET_DEFAULT_CONTEXT"

_DEFAULT_FORMATION = "4-3-3"
_DEFAULT_TIEBREAK_STAT = "speed"
_DEFAULT_CONTEXT = "1s"


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    if not value:
        logger.warning("Empty value for %s; using default %s", name, default)
        return default
    return value


def default_formation() -> str:
    value = _env_str(_DEFAULT_FORMATION_ENV, _DEFAULT_FORMATION)
    try:
        parse_formation(value)
    except ValueError:
        logger.warning("Invalid formation for %s: %s; using default %s", _DEFAULT_FORMATION_ENV, value, _DEFAULT_FORMATION)
        return _DEFAULT_FORMATION
    return value


def tiebreak_stat_key() -> str:
    return _env_str(_TIEBREAK_STAT_ENV, _DEFAULT_TIEBREAK_STAT)


def default_context() -> str:
    return _env_str(_DEFAULT_CONTEXT_ENV, _DEFAULT_CONTEXT)
