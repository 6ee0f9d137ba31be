from typing import Optional

import torch

class Noise:
    @staticmethod
    def uniform(num_samples: int, generator: Optional[torch.Generator] = None) -> torch.Tensor:
        """White noise, uniform in [-1, 1). Pass a seeded generator for reproducible output."""
        return torch.rand(max(0, int(num_samples)), generator=generator, dtype=torch.float64) * 2 - 1
