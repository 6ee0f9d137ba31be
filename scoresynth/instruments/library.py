"""
WaveformLibrary: one generate() entry point dispatching on WaveformKind.
Every kind returns a float32 buffer of config.num_samples(duration) samples.
Kick and snare draw noise from the library's generator; seed it for reproducible renders.
"""
import logging
from typing import Optional, Union

import torch

from scoresynth.core.config import RenderConfig
from scoresynth.core.types import Note, ShapingParams, WaveformKind
from scoresynth.errors import UnknownWaveformKind
from scoresynth.instruments.kick import KickEngine
from scoresynth.instruments.snare import SnareEngine
from scoresynth.instruments.strings import StringsEngine
from scoresynth.instruments.wiggle import WiggleEngine

logger = logging.getLogger(__name__)

# Legacy stand-in for unknown kinds when strict=False
FALLBACK_NOTE = Note(WaveformKind.STRINGS, 600.0, 3.0, ShapingParams())


class WaveformLibrary:
    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        generator: Optional[torch.Generator] = None,
        seed: Optional[int] = None,
        strict: bool = True,
    ):
        self.config = config or RenderConfig()
        if generator is None and seed is not None:
            generator = torch.Generator().manual_seed(int(seed))
        self.generator = generator
        self.strict = strict

        self.strings = StringsEngine(self.config)
        self.wiggle = WiggleEngine(self.config)
        self.kick = KickEngine(self.config, self.generator)
        self.snare = SnareEngine(self.config, self.generator)

    def generate(
        self,
        kind: Union[WaveformKind, str],
        frequency: float,
        duration: float,
        shaping: Optional[ShapingParams] = None,
    ) -> torch.Tensor:
        """
        Render one note. Raises UnknownWaveformKind for tags outside WaveformKind,
        unless the library was built with strict=False (then a 600 Hz, 3 s strings tone is used).
        """
        shaping = shaping or ShapingParams()
        try:
            kind = WaveformKind.parse(kind)
        except UnknownWaveformKind:
            if self.strict:
                raise
            logger.warning("Unknown waveform kind %r, substituting default tone", kind)
            return self.generate_note(FALLBACK_NOTE)

        if kind is WaveformKind.STRINGS:
            return self.strings.render(frequency, duration, shaping)
        elif kind is WaveformKind.PAUSE:
            return torch.zeros(self.config.num_samples(duration), dtype=torch.float32)
        elif kind is WaveformKind.WIGGLE:
            return self.wiggle.render(frequency, duration, shaping)
        elif kind is WaveformKind.KICK:
            return self.kick.render(duration)
        elif kind is WaveformKind.SNARE:
            return self.snare.render(duration)
        raise UnknownWaveformKind(kind)

    def generate_note(self, note: Note) -> torch.Tensor:
        return self.generate(note.kind, note.frequency, note.duration, note.shaping)
