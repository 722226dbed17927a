"""Protocols and events shared between the engine and its observers."""

from .events import PlaybackEvent, RecordingEvent
from .observers import RecordingObserver, StateObserver

__all__ = [
    "PlaybackEvent",
    "RecordingEvent",
    "RecordingObserver",
    "StateObserver",
]
