from scoresynth.render.channel import ChannelRenderer
from scoresynth.render.pipeline import Pipeline

__all__ = ["ChannelRenderer", "Pipeline"]
