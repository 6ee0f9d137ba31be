"""
Error taxonomy for score rendering.
Every failure aborts the whole render; nothing here is retried.
"""
from typing import Optional


class ScoreSynthError(Exception):
    """Base class for all rendering errors."""


class UnknownWaveformKind(ScoreSynthError):
    """Score references a waveform kind that is not in the library."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unknown waveform kind: {kind!r}")


class InvalidScoreShape(ScoreSynthError):
    """Score structure is malformed (missing instructions, non-list channel, bad note)."""


class EncodingIOFailure(ScoreSynthError):
    """Writing an encoded container to disk failed."""

    def __init__(self, path, cause: Optional[BaseException] = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to write {self.path}: {cause}")


class ExternalEncoderFailure(ScoreSynthError):
    """The compressed-format encoder raised an error."""

    def __init__(self, format: str, cause: Optional[BaseException] = None):
        self.format = format
        self.cause = cause
        super().__init__(f"{format} encoder failed: {cause}")
