"""
Snare: white-noise burst with a fast exponential decay.
"""
from typing import Optional

import torch

from scoresynth.core.config import RenderConfig
from scoresynth.dsp.envelopes import Envelope, time_axis
from scoresynth.dsp.noise import Noise

DECAY_S = 0.1


class SnareEngine:
    def __init__(self, config: RenderConfig, generator: Optional[torch.Generator] = None):
        self.config = config
        self.generator = generator

    def render(self, duration: float) -> torch.Tensor:
        n = self.config.num_samples(duration)
        t = time_axis(n, self.config.sample_rate)
        return (Noise.uniform(n, self.generator) * Envelope.exponential_decay(t, DECAY_S)).float()
