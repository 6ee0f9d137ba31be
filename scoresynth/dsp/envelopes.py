import torch


# -----------------------------------------------------------------------------
# Helpers (reusable across envelopes and instruments)
# -----------------------------------------------------------------------------

def time_axis(num_samples: int, sample_rate: int) -> torch.Tensor:
    """Sample times t = i / sample_rate for i in [0, num_samples), float64."""
    return torch.arange(max(0, int(num_samples)), dtype=torch.float64) / float(sample_rate)


def _safe_div(numerator: torch.Tensor, denominator: float) -> torch.Tensor:
    # Zero-length segments are never selected; keep the unused branch finite.
    return numerator / denominator if denominator != 0 else torch.zeros_like(numerator)


# -----------------------------------------------------------------------------
# Envelopes
# -----------------------------------------------------------------------------

class Envelope:
    @staticmethod
    def exponential_decay(t: torch.Tensor, time_constant: float) -> torch.Tensor:
        """
        y(t) = e^(-t / time_constant)
        """
        return torch.exp(-t / time_constant)

    @staticmethod
    def exponential_taper(t: torch.Tensor, taper: float) -> torch.Tensor:
        """
        y(t) = e^(-taper * t). Negative taper grows instead of decaying.
        """
        return torch.exp(-taper * t)


class ADSR:
    """
    Linear ADSR evaluated per sample over a note of known duration.

    Segments are tested in priority order, first match wins:
      t < attack                  -> 0 .. 1
      t < attack + decay          -> 1 .. sustain
      t < duration - release      -> sustain
      otherwise                   -> sustain .. 0 over the final `release` seconds
    When attack + decay + release exceeds the duration the segments overlap and the
    order above decides; the release ramp then starts from `sustain` regardless of
    where the decay had reached.
    """

    def __init__(self, attack_s: float, decay_s: float, sustain_level: float, release_s: float):
        self.attack_s = float(attack_s)
        self.decay_s = float(decay_s)
        self.sustain_level = float(sustain_level)
        self.release_s = float(release_s)

    def render(self, t: torch.Tensor, duration_s: float) -> torch.Tensor:
        attack, decay, sustain, release = self.attack_s, self.decay_s, self.sustain_level, self.release_s
        release_start = float(duration_s) - release

        attack_seg = _safe_div(t, attack)
        decay_seg = 1.0 - _safe_div(t - attack, decay) * (1.0 - sustain)
        sustain_seg = torch.full_like(t, sustain)
        release_seg = sustain * (1.0 - _safe_div(t - release_start, release))

        # Build from the lowest priority up so earlier tests overwrite later ones.
        env = release_seg
        env = torch.where(t < release_start, sustain_seg, env)
        env = torch.where(t < attack + decay, decay_seg, env)
        env = torch.where(t < attack, attack_seg, env)
        return env
