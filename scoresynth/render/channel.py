import logging
from typing import Iterable

import torch

from scoresynth.core.types import Note
from scoresynth.instruments.library import WaveformLibrary

logger = logging.getLogger(__name__)


class ChannelRenderer:
    """Render one channel: notes back to back, no overlap or cross-fade."""

    def __init__(self, library: WaveformLibrary):
        self.library = library

    def render(self, channel: Iterable[Note]) -> torch.Tensor:
        buffers = [self.library.generate_note(note) for note in channel]
        if not buffers:
            return torch.zeros(0, dtype=torch.float32)
        out = torch.cat(buffers)
        logger.debug("Rendered channel: %d notes, %d samples", len(buffers), out.shape[-1])
        return out
