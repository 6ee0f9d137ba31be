"""
Score loading: JSON -> Score.

    { "init": { "name": str },
      "instructions": [ [ {"type", "freq", "length", "sounddef": {...}}, ... ], ... ] }

One inner list per channel. Structural problems raise InvalidScoreShape naming the
channel/note index. Unknown note types raise UnknownWaveformKind, or with strict=False
are replaced by the library's fallback tone (logged).
"""
import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Union

from scoresynth.core.params import get_param
from scoresynth.core.types import Note, Score, ShapingParams, WaveformKind
from scoresynth.errors import InvalidScoreShape, UnknownWaveformKind
from scoresynth.instruments.library import FALLBACK_NOTE

logger = logging.getLogger(__name__)

DEFAULT_NAME = "untitled"

# Kinds whose pitch is fixed; a missing "freq" is allowed for them
_UNPITCHED = (WaveformKind.PAUSE, WaveformKind.KICK, WaveformKind.SNARE)


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScoreShape(f"{what} must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    # json accepts Infinity / NaN and unbounded integers
    if not math.isfinite(number):
        raise InvalidScoreShape(f"{what} must be a finite number, got {value!r}")
    return number


def parse_note(data: Any, where: str = "note", strict: bool = True) -> Note:
    if not isinstance(data, dict):
        raise InvalidScoreShape(f"{where}: expected an object, got {type(data).__name__}")
    tag = data.get("type")
    if not isinstance(tag, str):
        raise InvalidScoreShape(f"{where}: 'type' must be a string, got {tag!r}")
    try:
        kind = WaveformKind.parse(tag)
    except UnknownWaveformKind:
        if strict:
            raise
        logger.warning("%s: unknown waveform kind %r, substituting default tone", where, tag)
        return FALLBACK_NOTE

    if "length" not in data:
        raise InvalidScoreShape(f"{where}: missing 'length'")
    duration = _number(data["length"], f"{where}.length")
    if "freq" in data:
        frequency = _number(data["freq"], f"{where}.freq")
    elif kind in _UNPITCHED:
        frequency = 0.0
    else:
        raise InvalidScoreShape(f"{where}: missing 'freq'")

    try:
        shaping = ShapingParams.from_dict(data.get("sounddef"))
    except InvalidScoreShape as exc:
        raise InvalidScoreShape(f"{where}: {exc}") from exc
    return Note(kind, frequency, duration, shaping)


def parse_score(data: Any, strict: bool = True) -> Score:
    """Validate and convert a decoded score dict."""
    if not isinstance(data, dict):
        raise InvalidScoreShape(f"score must be an object, got {type(data).__name__}")
    instructions = data.get("instructions")
    if not isinstance(instructions, list):
        raise InvalidScoreShape("score is missing an 'instructions' list")

    channels = []
    for ci, channel in enumerate(instructions):
        if not isinstance(channel, list):
            raise InvalidScoreShape(f"channel {ci}: expected a list of notes, got {type(channel).__name__}")
        channels.append(tuple(
            parse_note(note, f"channel {ci} note {ni}", strict=strict)
            for ni, note in enumerate(channel)
        ))

    name = get_param(data, "init.name", DEFAULT_NAME)
    return Score(name=str(name), channels=tuple(channels))


def load_score(path: Union[str, Path], strict: bool = True) -> Score:
    """Read and parse a score file. Invalid JSON is reported as InvalidScoreShape."""
    path = Path(path)
    try:
        data: Dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidScoreShape(f"{path}: invalid JSON ({exc})") from exc
    score = parse_score(data, strict=strict)
    logger.info("Loaded score %r: %d channels", score.name, len(score.channels))
    return score
