"""
Render configuration and user-level defaults.

RenderConfig is immutable and threaded through every stage (library, renderer,
mixer, encoder) so the generation rate and the encoding rate can never drift apart.
AppConfig holds metadata defaults for compressed exports (artist, album, ...),
read from ~/.config/scoresynth/config.json and overridden by SCORESYNTH_* env vars.
"""
import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_SAMPLE_RATE = 44100


@dataclass(frozen=True)
class RenderConfig:
    """Output format shared by all stages: mono, 16-bit, 44.1 kHz."""
    sample_rate: int = DEFAULT_SAMPLE_RATE
    num_channels: int = 1
    sample_width: int = 2  # bytes per sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.num_channels * self.sample_width

    @property
    def block_align(self) -> int:
        return self.num_channels * self.sample_width

    @property
    def bits_per_sample(self) -> int:
        return self.sample_width * 8

    def num_samples(self, duration_s: float) -> int:
        """Buffer length for a duration: round(duration * sample_rate), never negative."""
        return max(0, int(round(float(duration_s) * self.sample_rate)))


# -----------------------------------------------------------------------------
# App config (metadata defaults)
# -----------------------------------------------------------------------------

ENV_PREFIX = "SCORESYNTH_"


def default_config_dir() -> Path:
    return Path.home() / ".config" / "scoresynth"


def default_config_path() -> Path:
    return default_config_dir() / "config.json"


@dataclass
class AppConfig:
    artist: Optional[str] = None
    album: Optional[str] = None
    year: Optional[str] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "artist": self.artist,
            "album": self.album,
            "year": self.year,
            "comment": self.comment,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AppConfig":
        year = d.get("year")
        return AppConfig(
            artist=d.get("artist") or None,
            album=d.get("album") or None,
            year=str(year) if year else None,
            comment=d.get("comment") or None,
        )


def load_config(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> AppConfig:
    """
    Load metadata defaults from JSON, then apply SCORESYNTH_ARTIST / _ALBUM / _YEAR / _COMMENT.
    A missing file yields an empty AppConfig.
    """
    p = path or default_config_path()
    cfg = AppConfig()
    if p.exists():
        cfg = AppConfig.from_dict(json.loads(p.read_text(encoding="utf-8")))

    env = os.environ if environ is None else environ
    overrides = {}
    for field_name in ("artist", "album", "year", "comment"):
        value = env.get(ENV_PREFIX + field_name.upper())
        if value:
            overrides[field_name] = value
    return replace(cfg, **overrides) if overrides else cfg


def save_config(cfg: AppConfig, path: Optional[Path] = None) -> Path:
    p = path or default_config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(cfg.to_dict(), indent=2, sort_keys=True) + "\n", encoding="utf-8")
    return p
