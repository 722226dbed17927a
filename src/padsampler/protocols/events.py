"""Domain events for observer pattern.

- Playback events: voice lifecycle in the playback engine
- Recording events: session recorder state changes and chunk delivery
"""

from enum import Enum


class PlaybackEvent(Enum):
    """Events from the playback engine."""

    VOICE_STARTED = "voice_started"    # Voice registered and audible
    VOICE_FINISHED = "voice_finished"  # Voice reached the end of its range
    VOICE_STOPPED = "voice_stopped"    # Voice was force-stopped


class RecordingEvent(Enum):
    """Events from the session recorder."""

    STARTED = "started"                # Capture opened
    CHUNK_RECEIVED = "chunk_received"  # One capture chunk appended
    FINISHED = "finished"              # Export bytes produced
    FAILED = "failed"                  # Finalize failed, nothing produced
