"""
Score parsing tests: structure validation, shaping defaults, unknown kinds.
Run from project root: python -m pytest tests/test_score_loader.py -v
"""
import sys
import os
import json

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from scoresynth.core.types import Note, ShapingParams, WaveformKind
from scoresynth.errors import InvalidScoreShape, UnknownWaveformKind
from scoresynth.instruments.library import FALLBACK_NOTE
from scoresynth.score.loader import load_score, parse_note, parse_score

SCORE = {
    "init": {"name": "Two Voices"},
    "instructions": [
        [
            {"type": "strings", "freq": 440, "length": 0.5, "sounddef": {"taper": 2}},
            {"type": "pause", "freq": 0, "length": 0.25, "sounddef": {}},
        ],
        [
            {"type": "wiggle", "freq": 220.0, "length": 1, "sounddef": {"attack": 0.1, "vibratoFreq": 6}},
            {"type": "kick", "length": 0.5},
        ],
    ],
}


# -----------------------------------------------------------------------------
# Valid scores
# -----------------------------------------------------------------------------

def test_parse_score_structure():
    score = parse_score(SCORE)
    assert score.name == "Two Voices"
    assert len(score.channels) == 2
    assert [n.kind for n in score.channels[0]] == [WaveformKind.STRINGS, WaveformKind.PAUSE]
    assert score.channels[0][0] == Note(WaveformKind.STRINGS, 440.0, 0.5, ShapingParams(taper=2.0))


def test_shaping_defaults_applied_once():
    wiggle = parse_score(SCORE).channels[1][0]
    assert wiggle.shaping == ShapingParams(attack=0.1, vibrato_frequency=6.0)
    assert wiggle.shaping.decay == 0.2
    assert wiggle.shaping.vibrato_depth == 5.0


def test_unpitched_note_without_freq():
    kick = parse_score(SCORE).channels[1][1]
    assert kick.kind is WaveformKind.KICK
    assert kick.frequency == 0.0
    assert kick.shaping == ShapingParams()


def test_missing_name_defaults():
    score = parse_score({"instructions": []})
    assert score.name == "untitled"
    assert score.channels == ()


def test_explicit_zero_is_honored_and_null_is_default():
    shaping = ShapingParams.from_dict({"sustain": 0, "release": None, "taper": -1.5})
    assert shaping.sustain == 0.0
    assert shaping.release == 0.3
    assert shaping.taper == -1.5


def test_vibrato_frequency_alias():
    assert ShapingParams.from_dict({"vibratoFrequency": 8}).vibrato_frequency == 8.0


def test_shaping_to_dict_uses_score_keys():
    d = ShapingParams().to_dict()
    assert d["vibratoFreq"] == 5.0
    assert d["taper"] == 3.0
    assert ShapingParams.from_dict(d) == ShapingParams()


def test_load_score_from_file(tmp_path):
    path = tmp_path / "score.json"
    path.write_text(json.dumps(SCORE))
    assert load_score(path) == parse_score(SCORE)


# -----------------------------------------------------------------------------
# Invalid shapes
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("bad", [
    [],
    {"init": {"name": "x"}},
    {"instructions": {"a": 1}},
    {"instructions": [{"type": "strings"}]},
    {"instructions": [["strings"]]},
    {"instructions": [[{"freq": 440, "length": 1}]]},
    {"instructions": [[{"type": "strings", "freq": 440}]]},
    {"instructions": [[{"type": "strings", "length": 1}]]},
    {"instructions": [[{"type": "strings", "freq": "440", "length": 1}]]},
    {"instructions": [[{"type": "strings", "freq": 440, "length": True}]]},
    {"instructions": [[{"type": "wiggle", "freq": 440, "length": 1, "sounddef": {"attack": "fast"}}]]},
    {"instructions": [[{"type": "wiggle", "freq": 440, "length": 1, "sounddef": [1, 2]}]]},
])
def test_invalid_shapes_raise(bad):
    with pytest.raises(InvalidScoreShape):
        parse_score(bad)


@pytest.mark.parametrize("field", ["length", "freq"])
@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), 10 ** 400])
def test_non_finite_numbers_raise(field, value):
    note = {"type": "strings", "freq": 440, "length": 1}
    note[field] = value
    with pytest.raises(InvalidScoreShape, match="finite"):
        parse_score({"instructions": [[note]]})


def test_json_infinity_length_rejected(tmp_path):
    path = tmp_path / "inf.json"
    path.write_text('{"instructions": [[{"type": "strings", "freq": 440, "length": Infinity}]]}')
    with pytest.raises(InvalidScoreShape):
        load_score(path)


def test_error_names_position():
    bad = {"instructions": [[], [{"type": "strings", "freq": 1, "length": 1}, {"type": "strings"}]]}
    with pytest.raises(InvalidScoreShape, match="channel 1 note 1"):
        parse_score(bad)


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(InvalidScoreShape):
        load_score(path)


# -----------------------------------------------------------------------------
# Unknown kinds
# -----------------------------------------------------------------------------

def test_unknown_kind_fails_fast():
    with pytest.raises(UnknownWaveformKind):
        parse_note({"type": "theremin", "freq": 440, "length": 1})


def test_unknown_kind_lenient_substitutes():
    score = parse_score(
        {"instructions": [[{"type": "theremin", "freq": 440, "length": 1}]]}, strict=False
    )
    assert score.channels[0][0] == FALLBACK_NOTE
    assert FALLBACK_NOTE.frequency == 600.0 and FALLBACK_NOTE.duration == 3.0
