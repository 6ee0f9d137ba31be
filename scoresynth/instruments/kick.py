"""
Kick: pitch-swept sine body plus a short noise click.
Body pitch falls exponentially from 150 Hz toward 50 Hz; the note's own frequency and
shaping are not used, every kick sounds the same apart from its length and the click noise.
"""
from typing import Optional

import torch

from scoresynth.core.config import RenderConfig
from scoresynth.dsp.envelopes import Envelope, time_axis
from scoresynth.dsp.noise import Noise
from scoresynth.dsp.oscillators import Oscillator

START_FREQ_HZ = 150.0
END_FREQ_HZ = 50.0
DECAY_S = 0.4
CLICK_LEVEL = 0.05
CLICK_DECAY_S = 0.02


class KickEngine:
    def __init__(self, config: RenderConfig, generator: Optional[torch.Generator] = None):
        self.config = config
        self.generator = generator

    def render(self, duration: float) -> torch.Tensor:
        n = self.config.num_samples(duration)
        t = time_axis(n, self.config.sample_rate)

        # Exponential pitch drop, evaluated as sin(2*pi*f(t)*t)
        freq = START_FREQ_HZ * (END_FREQ_HZ / START_FREQ_HZ) ** (t / DECAY_S)
        body = Oscillator.sine(freq, t) * Envelope.exponential_decay(t, DECAY_S)

        click = Noise.uniform(n, self.generator) * CLICK_LEVEL * Envelope.exponential_decay(t, CLICK_DECAY_S)
        return (body + click).float()
