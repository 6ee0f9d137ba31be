"""
Pipeline tests: channel concatenation, score render, file export and the render.py tool.
Run from project root: python -m pytest tests/test_pipeline.py -v
"""
import sys
import os
import io
import json
import struct
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np
import pytest
import soundfile as sf
import torch
from scoresynth.core.config import AppConfig
from scoresynth.core.types import Note, Score, ShapingParams, WaveformKind
from scoresynth.errors import EncodingIOFailure, ExternalEncoderFailure
from scoresynth.export import compressed
from scoresynth.instruments.library import WaveformLibrary
from scoresynth.render.channel import ChannelRenderer
from scoresynth.render.pipeline import Pipeline
from tools import render as render_tool

SR = 44100

NOTE_A = Note(WaveformKind.STRINGS, 440.0, 0.3, ShapingParams(taper=2.0))
NOTE_B = Note(WaveformKind.WIGGLE, 330.0, 0.45, ShapingParams(release=0.1))

SCORE_JSON = {
    "init": {"name": "Beat"},
    "instructions": [
        [
            {"type": "strings", "freq": 440, "length": 0.2, "sounddef": {}},
            {"type": "pause", "freq": 0, "length": 0.1, "sounddef": {}},
        ],
        [
            {"type": "kick", "freq": 0, "length": 0.25, "sounddef": {}},
            {"type": "snare", "freq": 0, "length": 0.25, "sounddef": {}},
        ],
    ],
}


# -----------------------------------------------------------------------------
# ChannelRenderer
# -----------------------------------------------------------------------------

def test_channel_is_exact_concatenation():
    library = WaveformLibrary()
    a = library.generate_note(NOTE_A)
    b = library.generate_note(NOTE_B)
    out = ChannelRenderer(library).render((NOTE_A, NOTE_B))
    assert out.shape[0] == a.shape[0] + b.shape[0]
    assert torch.equal(out, torch.cat([a, b]))
    assert out.numpy().tobytes() == a.numpy().tobytes() + b.numpy().tobytes()


def test_empty_channel_renders_empty():
    assert ChannelRenderer(WaveformLibrary()).render(()).shape == (0,)


# -----------------------------------------------------------------------------
# Pipeline
# -----------------------------------------------------------------------------

def test_render_length_is_longest_channel():
    score = Score("t", ((NOTE_A,), (NOTE_A, NOTE_B)))
    audio = Pipeline().render(score)
    assert audio.shape == (round(0.3 * SR) * 2 + round(0.45 * SR),)
    assert torch.max(torch.abs(audio)).item() <= 1.0


def test_render_loud_channels_normalized():
    loud = Note(WaveformKind.STRINGS, 441.0, 0.1, ShapingParams(taper=0.0))
    audio = Pipeline().render(Score("loud", ((loud,), (loud,), (loud,))))
    assert abs(torch.max(torch.abs(audio)).item() - 1.0) < 1e-6


def test_seeded_pipeline_is_reproducible():
    from scoresynth.score.loader import parse_score
    score = parse_score(SCORE_JSON)
    a = Pipeline(seed=42).render(score)
    b = Pipeline(seed=42).render(score)
    assert torch.equal(a, b)


def test_export_writes_wav(tmp_path):
    score = Score("t", ((NOTE_A,),))
    paths = Pipeline().export(score, tmp_path / "song")
    assert paths == [tmp_path / "song.wav"]
    data = paths[0].read_bytes()
    n = round(0.3 * SR)
    assert len(data) == 44 + 2 * n
    assert struct.unpack_from("<I", data, 40)[0] == 2 * n


def test_export_compressed_uses_same_pcm(tmp_path):
    score = Score("Tagged", ((NOTE_A, NOTE_B),))
    pipeline = Pipeline(app_config=AppConfig(artist="Band"))
    paths = pipeline.export(score, tmp_path / "song", formats=("wav", "flac"))
    assert [p.name for p in paths] == ["song.wav", "song.flac"]

    pcm, _ = sf.read(paths[0], dtype="int16")
    flac, sr = sf.read(io.BytesIO(paths[1].read_bytes()), dtype="int16")
    assert sr == SR
    np.testing.assert_array_equal(flac, pcm)


def test_metadata_defaults_from_app_config():
    meta = Pipeline(app_config=AppConfig(artist="A", album="B", year="2026")).metadata_for(Score("Song"))
    assert (meta.title, meta.artist, meta.album, meta.year, meta.comment) == ("Song", "A", "B", "2026", None)


def test_export_io_failure(tmp_path):
    with pytest.raises(EncodingIOFailure):
        Pipeline().export(Score("t", ((NOTE_A,),)), tmp_path / "nope" / "song")


def test_encoder_failure_writes_nothing(tmp_path, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("no mp3 support")

    monkeypatch.setattr(compressed.sf, "SoundFile", broken)
    with pytest.raises(ExternalEncoderFailure):
        Pipeline().export(Score("t", ((NOTE_A,),)), tmp_path / "song", formats=("wav", "mp3"))
    assert not (tmp_path / "song.wav").exists()
    assert list(tmp_path.iterdir()) == []


# -----------------------------------------------------------------------------
# render.py tool
# -----------------------------------------------------------------------------

@pytest.fixture
def score_path(tmp_path):
    path = tmp_path / "score.json"
    path.write_text(json.dumps(SCORE_JSON))
    return path


def test_cli_without_score_is_noop(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert render_tool.main([]) == 0
    assert list(tmp_path.iterdir()) == []


def test_cli_without_output_is_usage_error(score_path):
    with pytest.raises(SystemExit) as exc_info:
        render_tool.main([str(score_path)])
    assert exc_info.value.code == 2


def test_cli_renders_wav_and_trace(score_path, tmp_path):
    out = tmp_path / "out" / "beat"
    assert render_tool.main([str(score_path), str(out), "--seed", "3", "--debug"]) == 0
    wav = Path(str(out) + ".wav")
    assert wav.exists()
    pcm, sr = sf.read(wav, dtype="int16")
    assert sr == SR
    assert pcm.shape == (round(0.5 * SR),)

    trace = json.loads(Path(str(out) + ".render.json").read_text())
    assert trace["score_name"] == "Beat"
    assert trace["seed"] == 3
    assert trace["fingerprint"]["samples"] == round(0.5 * SR)
    assert trace["channels"][1][0]["type"] == "kick"


def test_cli_mp3_flag_writes_both(score_path, tmp_path):
    out = tmp_path / "beat"
    assert render_tool.main([str(score_path), str(out), "--mp3"]) == 0
    assert (tmp_path / "beat.wav").exists()
    mp3 = tmp_path / "beat.mp3"
    assert mp3.exists()
    with sf.SoundFile(mp3) as f:
        assert f.samplerate == SR
        assert f.title == "Beat"


def test_cli_unknown_kind_fails(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"instructions": [[{"type": "banjo", "freq": 1, "length": 0.1}]]}))
    assert render_tool.main([str(path), str(tmp_path / "bad")]) == 1
    assert not (tmp_path / "bad.wav").exists()


def test_cli_lenient_substitutes(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"instructions": [[{"type": "banjo", "freq": 1, "length": 0.1}]]}))
    assert render_tool.main([str(path), str(tmp_path / "ok"), "--lenient"]) == 0
    pcm, _ = sf.read(tmp_path / "ok.wav", dtype="int16")
    assert pcm.shape == (3 * SR,)
