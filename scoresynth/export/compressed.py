"""
Compressed export through libsndfile (soundfile).
Input is the exact container produced by ContainerEncoder.encode(); the PCM is re-encoded
as MP3, OGG Vorbis or FLAC with optional tags. Failures are wrapped, never retried.
"""
import asyncio
import io
import logging
from typing import Optional

import soundfile as sf

from scoresynth.core.types import TrackMetadata
from scoresynth.errors import ExternalEncoderFailure

logger = logging.getLogger(__name__)

# format name -> (libsndfile major format, subtype)
FORMATS = {
    "mp3": ("MP3", "MPEG_LAYER_III"),
    "ogg": ("OGG", "VORBIS"),
    "flac": ("FLAC", "PCM_16"),
}

# TrackMetadata field -> SoundFile string attribute
_TAGS = {
    "title": "title",
    "artist": "artist",
    "album": "album",
    "year": "date",
    "comment": "comment",
}


class CompressedSink:
    @staticmethod
    def encode(wav_bytes: bytes, metadata: Optional[TrackMetadata] = None, format: str = "mp3") -> bytes:
        """
        Re-encode a canonical WAV container. Returns the compressed stream as bytes.
        Raises ValueError for unsupported formats, ExternalEncoderFailure for encoder errors.
        """
        format = format.lower()
        if format not in FORMATS:
            raise ValueError(f"format must be one of {sorted(FORMATS)}, got {format!r}")
        major, subtype = FORMATS[format]

        buffer = io.BytesIO()
        try:
            pcm, sample_rate = sf.read(io.BytesIO(wav_bytes), dtype="int16")
            with sf.SoundFile(
                buffer, mode="w", samplerate=sample_rate, channels=1, format=major, subtype=subtype
            ) as out:
                # Tags must be set before the first frame is written
                if metadata is not None:
                    for field_name, attr in _TAGS.items():
                        value = getattr(metadata, field_name)
                        if value:
                            setattr(out, attr, str(value))
                out.write(pcm)
        except (RuntimeError, TypeError, ValueError) as exc:
            raise ExternalEncoderFailure(format, exc) from exc

        data = buffer.getvalue()
        logger.debug("Encoded %d samples as %s (%d bytes)", pcm.shape[0], format, len(data))
        return data

    @classmethod
    async def encode_async(
        cls, wav_bytes: bytes, metadata: Optional[TrackMetadata] = None, format: str = "mp3"
    ) -> bytes:
        """Same as encode(), run on a worker thread."""
        return await asyncio.to_thread(cls.encode, wav_bytes, metadata, format)
