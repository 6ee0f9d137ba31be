from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, Any, Optional, Tuple

from scoresynth.core.params import SHAPING_PARAMS, get_number
from scoresynth.errors import InvalidScoreShape, UnknownWaveformKind


class WaveformKind(str, Enum):
    STRINGS = "strings"
    PAUSE = "pause"
    WIGGLE = "wiggle"
    KICK = "kick"
    SNARE = "snare"

    @classmethod
    def parse(cls, tag) -> "WaveformKind":
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            raise UnknownWaveformKind(tag) from None


@dataclass(frozen=True)
class ShapingParams:
    taper: float = 3.0
    attack: float = 0.05
    decay: float = 0.2
    sustain: float = 0.7
    release: float = 0.3
    vibrato_frequency: float = 5.0
    vibrato_depth: float = 5.0

    @classmethod
    def from_dict(cls, sounddef: Optional[Dict[str, Any]]) -> "ShapingParams":
        """Apply defaults once. Missing or null keys take the default; explicit 0 is kept."""
        if sounddef is None:
            return cls()
        if not isinstance(sounddef, dict):
            raise InvalidScoreShape(f"sounddef must be an object, got {type(sounddef).__name__}")
        try:
            values = {p.name: get_number(sounddef, p) for p in SHAPING_PARAMS}
        except TypeError as exc:
            raise InvalidScoreShape(f"sounddef: {exc}") from exc
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        by_name = {p.name: p.key for p in SHAPING_PARAMS}
        return {by_name[f.name]: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Note:
    kind: WaveformKind
    frequency: float
    duration: float  # seconds
    shaping: ShapingParams = field(default_factory=ShapingParams)


Channel = Tuple[Note, ...]


@dataclass(frozen=True)
class Score:
    name: str
    channels: Tuple[Channel, ...] = ()


@dataclass
class TrackMetadata:
    """Tags attached to compressed exports."""
    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    year: Optional[str] = None
    comment: Optional[str] = None
