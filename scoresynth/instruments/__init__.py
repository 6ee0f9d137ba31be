"""
Waveform generators, one module per kind, and the WaveformLibrary that dispatches to them.
"""
from scoresynth.instruments.library import WaveformLibrary, FALLBACK_NOTE

__all__ = ["WaveformLibrary", "FALLBACK_NOTE"]
