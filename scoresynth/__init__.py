"""
Score synthesizer: renders multi-channel note scores to a mixed mono WAV (and MP3/OGG/FLAC).
"""
from scoresynth.core.config import RenderConfig
from scoresynth.core.types import Note, Score, ShapingParams, TrackMetadata, WaveformKind
from scoresynth.render.pipeline import Pipeline
from scoresynth.score.loader import load_score, parse_score

__all__ = [
    "RenderConfig",
    "Note",
    "Score",
    "ShapingParams",
    "TrackMetadata",
    "WaveformKind",
    "Pipeline",
    "load_score",
    "parse_score",
]
