"""
Strings: a plain sine with a natural exponential decay, sin(2*pi*f*t) * exp(-taper*t).
"""
import torch

from scoresynth.core.config import RenderConfig
from scoresynth.core.types import ShapingParams
from scoresynth.dsp.envelopes import Envelope, time_axis
from scoresynth.dsp.oscillators import Oscillator


class StringsEngine:
    def __init__(self, config: RenderConfig):
        self.config = config

    def render(self, frequency: float, duration: float, shaping: ShapingParams) -> torch.Tensor:
        t = time_axis(self.config.num_samples(duration), self.config.sample_rate)
        env = Envelope.exponential_taper(t, shaping.taper)
        return (Oscillator.sine(frequency, t) * env).float()
