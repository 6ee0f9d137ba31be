"""
Oscillators evaluated over an explicit time axis.
Frequency may be a scalar or a tensor (one value per sample) for vibrato / pitch sweeps;
the waveform is evaluated at t * f(t), phase starts at 0 for every note.
"""

import torch
import numpy as np

class Oscillator:
    @staticmethod
    def sine(frequency, t: torch.Tensor, phase: float = 0.0) -> torch.Tensor:
        """
        sin(2*pi*f*t + phase).

        Args:
            frequency: Frequency (Hz) - scalar or tensor shaped like t
            t: Sample times in seconds
            phase: Initial phase offset (radians)
        """
        return torch.sin(2 * np.pi * frequency * t + phase)

    @staticmethod
    def triangle(frequency, t: torch.Tensor) -> torch.Tensor:
        """
        2 * abs(2 * (t*f - floor(t*f + 0.5))) - 1, in [-1, 1].
        """
        x = t * frequency
        return 2 * torch.abs(2 * (x - torch.floor(x + 0.5))) - 1

    @staticmethod
    def saw(frequency, t: torch.Tensor) -> torch.Tensor:
        """Sawtooth: 2 * (t*f - floor(0.5 + t*f)), in [-1, 1)."""
        x = t * frequency
        return 2 * (x - torch.floor(0.5 + x))
