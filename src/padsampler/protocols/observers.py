"""Observer protocol definitions for domain-specific events.

- State observers: react to voice lifecycle changes
- Recording observers: react to session recorder events
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .events import PlaybackEvent, RecordingEvent

if TYPE_CHECKING:
    from padsampler.audio import Voice


@runtime_checkable
class StateObserver(Protocol):
    """
    Observer that receives playback state change events.

    This protocol allows loose coupling between the playback engine
    and whatever displays or reacts to pad activity.
    """

    def on_playback_event(self, event: PlaybackEvent, voice: "Voice") -> None:
        """
        Handle playback state changes.

        Args:
            event: The type of playback event
            voice: The voice that changed state

        Note:
            VOICE_FINISHED is emitted from the audio thread, so implementations
            should be thread-safe and avoid blocking operations.
        """
        ...


@runtime_checkable
class RecordingObserver(Protocol):
    """Observer that receives session recorder events."""

    def on_recording_event(self, event: RecordingEvent, detail: Any = None) -> None:
        """
        Handle recorder events.

        Args:
            event: The type of recording event
            detail: Event-specific data (chunk size, export size, or the error)

        Note:
            CHUNK_RECEIVED is emitted from the audio thread.
        """
        ...
