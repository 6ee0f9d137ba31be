"""
Param parsing utilities for score notes (the "sounddef" dict of each note).
Supports dotted keys for nested lookups, e.g. get_param(score, "init.name").
Shaping defaults live in SHAPING_PARAMS; they are applied once, when a note is read.
"""
from dataclasses import dataclass
from typing import Any, Optional, Tuple


# -----------------------------------------------------------------------------
# Param definition
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ParamDef:
    """Definition of a single shaping parameter. Aliases are alternate score keys."""
    name: str
    key: str
    default: float
    unit: Optional[str] = None
    aliases: Tuple[str, ...] = ()


# Field name on ShapingParams -> score key. Keys match the score format ("vibratoFreq").
SHAPING_PARAMS: Tuple[ParamDef, ...] = (
    ParamDef("taper", "taper", 3.0, unit="1/s"),
    ParamDef("attack", "attack", 0.05, unit="s"),
    ParamDef("decay", "decay", 0.2, unit="s"),
    ParamDef("sustain", "sustain", 0.7),
    ParamDef("release", "release", 0.3, unit="s"),
    ParamDef("vibrato_frequency", "vibratoFreq", 5.0, unit="Hz", aliases=("vibratoFrequency",)),
    ParamDef("vibrato_depth", "vibratoDepth", 5.0, unit="Hz"),
)


# -----------------------------------------------------------------------------
# Lookup helpers
# -----------------------------------------------------------------------------

def get_param(params: dict, name: str, default: Any = None) -> Any:
    """
    Read a value from params, supporting dotted keys for nested dicts.
    E.g. get_param(score, "init.name", "untitled") -> score["init"]["name"] or default.
    If any intermediate key is missing or not a dict, returns default.
    A present key holding None also returns default.
    """
    if not params or not name:
        return default
    keys = name.split(".")
    current = params
    for key in keys[:-1]:
        next_val = current.get(key)
        if next_val is None or not isinstance(next_val, dict):
            return default
        current = next_val
    value = current.get(keys[-1])
    return default if value is None else value


def get_number(params: dict, param: ParamDef) -> float:
    """
    Read a numeric shaping value by its score key (or aliases), falling back to the default.
    Raises TypeError for non-numeric values; bools are rejected too.
    """
    for key in (param.key,) + param.aliases:
        value = get_param(params, key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"{key} must be a number, got {value!r}")
        return float(value)
    return param.default
