"""Polyphonic one-shot playback engine."""

import itertools
import logging
from threading import Lock
from typing import Optional

import numpy as np
import numpy.typing as npt

from padsampler.audio import MixingBus, Voice
from padsampler.exceptions import InvalidRangeError, PolyphonyLimitError, SampleNotLoadedError
from padsampler.protocols import PlaybackEvent, StateObserver
from padsampler.utils import ObserverManager

from .sample_store import SampleStore

logger = logging.getLogger(__name__)


class PlaybackEngine:
    """
    Plays trimmed regions of stored samples through the shared mixing bus.

    Every play() creates an independent Voice tracked until it finishes
    naturally (removed by its own completion hook during render()) or is
    force-stopped. The engine is the only writer of the tracked-voice set.

    The audio device, when given, pulls blocks through render() from its
    real-time callback. Without a device, callers drive render() directly.
    """

    def __init__(
        self,
        store: SampleStore,
        audio_device=None,
        bus: Optional[MixingBus] = None,
        max_polyphony: Optional[int] = 16,
    ):
        """
        Initialize playback engine.

        Args:
            store: Sample store to read samples from
            audio_device: Optional AudioDevice driving render()
            bus: Shared mixing bus (created to match the device if None)
            max_polyphony: Maximum simultaneous voices (None = unlimited)
        """
        self._store = store
        self._device = audio_device

        if bus is None:
            num_channels = audio_device.num_channels if audio_device is not None else 2
            bus = MixingBus(num_channels=num_channels)
        self._bus = bus

        self.max_polyphony = max_polyphony

        self._voices: dict[int, Voice] = {}
        self._voice_ids = itertools.count(1)
        self._lock = Lock()
        # Separate lock: observers are notified after _lock is released
        self._observers = ObserverManager[StateObserver](observer_type_name="state")

        if self._device is not None:
            self._device.set_callback(self._audio_callback)

    # =================================================================
    # Playback
    # =================================================================

    def play(
        self,
        slot: int,
        start: Optional[float] = None,
        end: Optional[float] = None,
        volume: float = 1.0,
    ) -> Voice:
        """
        Start a voice for a slot's sample.

        Args:
            slot: Slot index in the store
            start: Start offset in seconds (defaults to the trim start)
            end: End offset in seconds (defaults to the trim end)
            volume: Per-voice gain

        Returns:
            The new Voice, usable as a handle for stop_voice()

        Raises:
            SampleNotLoadedError: If the slot has no decoded sample
            InvalidRangeError: If start >= end or either is outside [0, duration]
            PolyphonyLimitError: If max_polyphony voices are already playing
        """
        sample = self._store.get(slot)
        if sample is None or not sample.is_loaded:
            raise SampleNotLoadedError(slot)

        audio = sample.audio
        trim_left, trim_right = sample.trim
        start = trim_left if start is None else float(start)
        end = trim_right if end is None else float(end)

        duration = audio.duration
        if not (0.0 <= start < end <= duration):
            raise InvalidRangeError(start, end, duration)

        start_frame, end_frame = self._to_frames(start, end, audio.sample_rate, audio.num_frames)

        voice = Voice(
            voice_id=next(self._voice_ids),
            slot=slot,
            audio_data=audio,
            start_frame=start_frame,
            end_frame=end_frame,
            volume=volume,
            on_complete=self._on_voice_complete,
        )

        with self._lock:
            if self.max_polyphony is not None and len(self._voices) >= self.max_polyphony:
                raise PolyphonyLimitError(self.max_polyphony)
            self._voices[voice.voice_id] = voice

        logger.debug(f"Voice {voice.voice_id} started on slot {slot} ({start:.3f}s - {end:.3f}s)")
        self._observers.notify("on_playback_event", PlaybackEvent.VOICE_STARTED, voice)
        return voice

    @staticmethod
    def _to_frames(start: float, end: float, sample_rate: int, num_frames: int) -> tuple[int, int]:
        """Map a seconds range to a non-empty frame range inside the buffer."""
        start_frame = min(int(round(start * sample_rate)), num_frames - 1)
        end_frame = min(int(round(end * sample_rate)), num_frames)
        if end_frame <= start_frame:
            end_frame = start_frame + 1
        return start_frame, end_frame

    def stop_all(self) -> None:
        """Force-stop every voice. Safe to call repeatedly."""
        with self._lock:
            voices = list(self._voices.values())
            self._voices.clear()

        self._stop_voices(voices)
        if voices:
            logger.info(f"Stopped {len(voices)} voice(s)")

    def stop_slot(self, slot: int) -> None:
        """Force-stop every voice playing a slot."""
        with self._lock:
            voices = [v for v in self._voices.values() if v.slot == slot]
            for voice in voices:
                del self._voices[voice.voice_id]

        self._stop_voices(voices)

    def stop_voice(self, voice: Voice) -> None:
        """Force-stop one voice. Does nothing if it already finished."""
        with self._lock:
            tracked = self._voices.pop(voice.voice_id, None)

        if tracked is not None:
            self._stop_voices([tracked])

    def _stop_voices(self, voices: list[Voice]) -> None:
        for voice in voices:
            voice.stop()
            self._observers.notify("on_playback_event", PlaybackEvent.VOICE_STOPPED, voice)

    def _on_voice_complete(self, voice: Voice) -> None:
        """Completion hook: runs once per voice, from render()."""
        with self._lock:
            tracked = self._voices.pop(voice.voice_id, None)

        if tracked is not None:
            self._observers.notify("on_playback_event", PlaybackEvent.VOICE_FINISHED, voice)

    # =================================================================
    # Rendering
    # =================================================================

    def render(self, num_frames: int) -> npt.NDArray[np.float32]:
        """
        Mix the next block of every live voice through the bus.

        Voices reaching their end are completed and removed here.

        Returns:
            Mixed block (num_frames, channels), or (num_frames,) for a mono bus
        """
        with self._lock:
            voices = list(self._voices.values())
        return self._bus.mix(voices, num_frames)

    def _audio_callback(self, outdata: np.ndarray, frames: int) -> None:
        """
        Audio callback for mixing and rendering.

        Called by AudioDevice for each audio block.
        """
        try:
            mixed = self.render(frames)

            if self._bus.num_channels == 1:
                outdata[:, 0] = mixed
            else:
                outdata[:] = mixed

        except Exception as e:
            # Output silence rather than crash the stream
            logger.exception(f"Error in audio callback: {e}")
            outdata.fill(0.0)

    # =================================================================
    # Gain, observers and state
    # =================================================================

    def set_master_gain(self, gain: float) -> None:
        """Set the mixing bus gain (clamped to >= 0)."""
        self._bus.gain = gain

    @property
    def master_gain(self) -> float:
        return self._bus.gain

    @property
    def bus(self) -> MixingBus:
        return self._bus

    def register_observer(self, observer: StateObserver) -> None:
        """Register an observer to receive playback events."""
        self._observers.register(observer)

    def unregister_observer(self, observer: StateObserver) -> None:
        self._observers.unregister(observer)

    @property
    def active_voices(self) -> int:
        """Get number of currently tracked voices."""
        with self._lock:
            return len(self._voices)

    @property
    def voices(self) -> list[Voice]:
        with self._lock:
            return list(self._voices.values())

    def playing_slots(self) -> list[int]:
        """Sorted indices of slots with at least one live voice."""
        with self._lock:
            return sorted({v.slot for v in self._voices.values()})

    def is_slot_playing(self, slot: int) -> bool:
        with self._lock:
            return any(v.slot == slot for v in self._voices.values())

    # =================================================================
    # Device lifecycle
    # =================================================================

    def start(self) -> None:
        """Start the audio device."""
        if self._device is None:
            raise RuntimeError("No audio device attached; drive render() directly")
        self._device.start()

    def stop(self) -> None:
        """Stop all voices and the audio device."""
        self.stop_all()
        if self._device is not None:
            self._device.stop()

    @property
    def is_running(self) -> bool:
        return self._device is not None and self._device.is_running

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
