"""
Wiggle: brassy saw/triangle blend with vibrato, soft-clipped and shaped by a linear ADSR.

    f'(t) = f + depth * sin(2*pi*vib_freq*t)
    wave  = 0.7 * saw(f', t) + 0.3 * tri(f', t)
    out   = tanh(wave) * env(t)
"""
import torch

from scoresynth.core.config import RenderConfig
from scoresynth.core.types import ShapingParams
from scoresynth.dsp.envelopes import ADSR, time_axis
from scoresynth.dsp.oscillators import Oscillator

SAW_MIX = 0.7
TRI_MIX = 0.3


class WiggleEngine:
    def __init__(self, config: RenderConfig):
        self.config = config

    def render(self, frequency: float, duration: float, shaping: ShapingParams) -> torch.Tensor:
        t = time_axis(self.config.num_samples(duration), self.config.sample_rate)

        vibrato = Oscillator.sine(shaping.vibrato_frequency, t) * shaping.vibrato_depth
        inst_freq = frequency + vibrato

        wave = SAW_MIX * Oscillator.saw(inst_freq, t) + TRI_MIX * Oscillator.triangle(inst_freq, t)

        adsr = ADSR(shaping.attack, shaping.decay, shaping.sustain, shaping.release)
        env = adsr.render(t, duration)
        return (torch.tanh(wave) * env).float()
