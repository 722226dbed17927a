"""Core sampler components: sample store, playback engine, session recorder."""

from .playback import PlaybackEngine
from .recorder import SessionRecorder
from .sample_store import SampleStore
from .sampler import Sampler

__all__ = ["PlaybackEngine", "SampleStore", "Sampler", "SessionRecorder"]
