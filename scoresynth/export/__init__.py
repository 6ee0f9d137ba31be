from scoresynth.export.wav import ContainerEncoder, quantize
from scoresynth.export.compressed import CompressedSink

__all__ = ["ContainerEncoder", "CompressedSink", "quantize"]
