"""
Core rendering utilities with debug outputs, fingerprinting, and a render trace.
Used by the render.py tool.
"""
import sys
import os
import json
import hashlib
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import torch

from scoresynth.core.config import load_config
from scoresynth.core.types import Score
from scoresynth.dsp.mixer import peak_dbfs
from scoresynth.render.pipeline import Pipeline


def _get_git_hash() -> str:
    """Get short git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            cwd=os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except OSError:
        pass
    return "unknown"


def _compute_audio_fingerprint(audio: torch.Tensor, sample_rate: int) -> Dict:
    """Compute fingerprint: SHA256, peak, RMS, length."""
    audio_1d = audio.view(-1).float()

    # SHA256 hash of audio bytes
    sha256 = hashlib.sha256(audio_1d.numpy().tobytes()).hexdigest()

    if audio_1d.numel() == 0:
        return {"sha256": sha256, "samples": 0, "duration_s": 0.0, "peak": 0.0, "peak_dbfs": None, "rms": 0.0}

    p = float(torch.max(torch.abs(audio_1d)))
    rms = float(torch.sqrt(torch.mean(audio_1d ** 2) + 1e-12))
    dbfs = peak_dbfs(audio_1d)
    return {
        "sha256": sha256,
        "samples": int(audio_1d.numel()),
        "duration_s": audio_1d.numel() / sample_rate,
        "peak": p,
        "peak_dbfs": dbfs if dbfs != float("-inf") else None,
        "rms": rms,
    }


def render_score(
    score: Score,
    basename: Path,
    formats: Iterable[str] = ("wav",),
    seed: Optional[int] = None,
    strict: bool = True,
    debug: bool = False,
    script_name: str = "unknown",
) -> Tuple[torch.Tensor, Dict]:
    """
    Render a score to <basename>.<fmt> files with a fingerprint and optional trace.

    Args:
        score: Parsed score
        basename: Output path without extension
        formats: "wav" and/or compressed formats ("mp3", "ogg", "flac")
        seed: Noise seed for kick/snare (None = not reproducible)
        strict: Fail on unknown waveform kinds instead of substituting
        debug: Save <basename>.render.json with the render trace
        script_name: Name of calling script (for debug JSON)

    Returns:
        Tuple of (audio_tensor, debug_info_dict)
    """
    basename = Path(basename)
    basename.parent.mkdir(parents=True, exist_ok=True)
    formats = [f.lower() for f in formats]

    # Step 1: Render
    pipeline = Pipeline(seed=seed, strict=strict, app_config=load_config())
    audio = pipeline.render(score)

    # Step 2: Fingerprint
    fingerprint = _compute_audio_fingerprint(audio, pipeline.config.sample_rate)

    # Step 3: Write containers
    written = pipeline.write(audio, basename, formats, pipeline.metadata_for(score))

    # Step 4: Save debug JSON if enabled
    debug_info = {
        "score_name": score.name,
        "script_name": script_name,
        "timestamp": datetime.now().isoformat(),
        "git_hash": _get_git_hash(),
        "seed": seed,
        "strict": strict,
        "sample_rate": pipeline.config.sample_rate,
        "channels": [
            [{"type": n.kind.value, "freq": n.frequency, "length": n.duration, "sounddef": n.shaping.to_dict()}
             for n in channel]
            for channel in score.channels
        ],
        "fingerprint": fingerprint,
        "outputs": [str(p) for p in written],
    }

    if debug:
        json_path = basename.with_name(f"{basename.name}.render.json")
        with open(json_path, "w") as f:
            json.dump(debug_info, f, indent=2, default=str)
        debug_info["debug_json"] = str(json_path)

    return audio, debug_info
