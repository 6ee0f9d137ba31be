"""
Canonical WAV container: 44-byte RIFF header followed by little-endian int16 PCM.

    0  "RIFF"   4  u32 36 + data_bytes   8  "WAVE"
    12 "fmt "   16 u32 16                20 u16 1 (PCM)   22 u16 channels
    24 u32 sample_rate   28 u32 byte_rate   32 u16 block_align   34 u16 bits
    36 "data"   40 u32 data_bytes        44 samples

Quantization: clamp to [-1, 1], scale by 32767, round half away from zero.
"""
import struct
from typing import Optional

import torch

from scoresynth.core.config import RenderConfig

HEADER_SIZE = 44
FULL_SCALE = 32767
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
_PCM = 1


def quantize(samples: torch.Tensor) -> torch.Tensor:
    """Float samples -> int16, clamped to [-1, 1] and rounded half away from zero."""
    x = torch.clamp(samples.reshape(-1).to(torch.float64), -1.0, 1.0) * FULL_SCALE
    return (torch.sign(x) * torch.floor(torch.abs(x) + 0.5)).to(torch.int16)


class ContainerEncoder:
    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()

    def header(self, num_samples: int) -> bytes:
        cfg = self.config
        data_bytes = num_samples * cfg.block_align
        return _HEADER.pack(
            b"RIFF", 36 + data_bytes, b"WAVE",
            b"fmt ", 16, _PCM, cfg.num_channels,
            cfg.sample_rate, cfg.byte_rate, cfg.block_align, cfg.bits_per_sample,
            b"data", data_bytes,
        )

    def encode(self, samples: torch.Tensor) -> bytes:
        """Serialize a mono float buffer as a canonical 16-bit PCM WAV."""
        pcm = quantize(samples).numpy().astype("<i2")
        return self.header(pcm.shape[0]) + pcm.tobytes()
