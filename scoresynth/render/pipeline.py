"""
Score -> per-channel render -> mix -> encode.
One RenderConfig is shared by the library, the mixer and the encoder.
"""
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

import torch

from scoresynth.core.config import AppConfig, RenderConfig
from scoresynth.core.types import Score, TrackMetadata
from scoresynth.dsp.mixer import ChannelMixer
from scoresynth.errors import EncodingIOFailure
from scoresynth.export.compressed import CompressedSink
from scoresynth.export.wav import ContainerEncoder
from scoresynth.instruments.library import WaveformLibrary
from scoresynth.render.channel import ChannelRenderer

logger = logging.getLogger(__name__)


class Pipeline:
    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        seed: Optional[int] = None,
        strict: bool = True,
        app_config: Optional[AppConfig] = None,
    ):
        self.config = config or RenderConfig()
        self.app_config = app_config or AppConfig()
        self.library = WaveformLibrary(self.config, seed=seed, strict=strict)
        self.renderer = ChannelRenderer(self.library)
        self.encoder = ContainerEncoder(self.config)

    def render(self, score: Score) -> torch.Tensor:
        """Render every channel and mix them into one normalized buffer."""
        mixer = ChannelMixer(self.config)
        for channel in score.channels:
            mixer.add(self.renderer.render(channel))
        return mixer.mix()

    def metadata_for(self, score: Score) -> TrackMetadata:
        cfg = self.app_config
        return TrackMetadata(
            title=score.name, artist=cfg.artist, album=cfg.album, year=cfg.year, comment=cfg.comment,
        )

    def export(
        self,
        score: Score,
        basename: Union[str, Path],
        formats: Iterable[str] = ("wav",),
        metadata: Optional[TrackMetadata] = None,
    ) -> List[Path]:
        """
        Render and write <basename>.wav plus <basename>.<fmt> for each compressed format.
        Returns the written paths. Any failure aborts the export.
        """
        logger.info("Rendering %r", score.name)
        return self.write(self.render(score), basename, formats, metadata or self.metadata_for(score))

    def write(
        self,
        audio: torch.Tensor,
        basename: Union[str, Path],
        formats: Iterable[str] = ("wav",),
        metadata: Optional[TrackMetadata] = None,
    ) -> List[Path]:
        """
        Encode an already rendered mix to <basename>.<fmt> for each format.
        Every format is encoded before any file is written, so an encoder failure leaves no output.
        """
        wav_bytes = self.encoder.encode(audio)

        basename = Path(basename)
        encoded = []
        for fmt in formats:
            fmt = fmt.lower()
            path = basename.with_name(f"{basename.name}.{fmt}")
            if fmt == "wav":
                encoded.append((path, wav_bytes))
            else:
                encoded.append((path, CompressedSink.encode(wav_bytes, metadata, fmt)))

        written = []
        for path, data in encoded:
            try:
                path.write_bytes(data)
            except OSError as exc:
                raise EncodingIOFailure(path, exc) from exc
            logger.info("Wrote %s (%d bytes)", path, len(data))
            written.append(path)
        return written
