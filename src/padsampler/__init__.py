"""Padsampler: a 16-pad drum sampler with preset loading and session recording."""

__version__ = "0.1.0"

from .core import PlaybackEngine, SampleStore, Sampler, SessionRecorder

__all__ = [
    "PlaybackEngine",
    "SampleStore",
    "Sampler",
    "SessionRecorder",
]
