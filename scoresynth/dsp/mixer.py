"""
Additive channel mix with peak normalization.
Shorter channels are zero-padded to the longest; nothing is truncated or wrapped.
A mix whose peak exceeds 1.0 is scaled down by that peak; quieter mixes are left as-is.
"""
import logging
import math
from typing import List, Optional, Sequence

import torch

from scoresynth.core.config import RenderConfig

logger = logging.getLogger(__name__)


def peak(buffer: torch.Tensor) -> float:
    """max(|x|), 0.0 for an empty buffer."""
    if buffer.numel() == 0:
        return 0.0
    return float(torch.max(torch.abs(buffer)))


def peak_dbfs(buffer: torch.Tensor) -> float:
    """Peak level in dBFS; -inf for silence."""
    p = peak(buffer)
    if p <= 0:
        return -math.inf
    return 20.0 * math.log10(p)


def normalize_peak(buffer: torch.Tensor) -> torch.Tensor:
    """Divide by the peak when it exceeds 1.0, otherwise return the buffer unchanged."""
    p = peak(buffer)
    if p > 1.0:
        logger.warning("Mix peak %.3f exceeds full scale, normalizing", p)
        return buffer / p
    return buffer


# -----------------------------------------------------------------------------
# Channel mixer
# -----------------------------------------------------------------------------

class ChannelMixer:
    """
    Sum channel buffers sample by sample, then normalize for clipping.
    Use mix(channels) directly, or add() buffers one by one and call mix() with no argument.
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self._channels: List[torch.Tensor] = []

    def add(self, audio: torch.Tensor) -> None:
        """Register a channel buffer. Channels are mixed in the order added."""
        self._channels.append(audio)

    def mix(self, channels: Optional[Sequence[torch.Tensor]] = None) -> torch.Tensor:
        """
        Returns a new float32 buffer of length max(len(c)); every sample lies in [-1, 1].
        With no argument, mixes the channels registered through add().
        """
        channels = list(self._channels if channels is None else channels)
        if not channels:
            return torch.zeros(0, dtype=torch.float32)

        ref_len = max(c.shape[-1] for c in channels)
        master = torch.zeros(ref_len, dtype=torch.float64)
        for channel in channels:
            layer = channel.reshape(-1)
            master[: layer.shape[-1]] += layer.to(torch.float64)

        logger.debug(
            "Mixed %d channels, %d samples (%.3f s), peak %.2f dBFS",
            len(channels), ref_len, ref_len / self.config.sample_rate, peak_dbfs(master),
        )
        return normalize_peak(master).float()
