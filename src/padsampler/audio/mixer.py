"""Mixing bus: sums voices, applies master gain and feeds output taps."""

import logging
from collections.abc import Callable, Iterable
from threading import Lock

import numpy as np
import numpy.typing as npt

from .data import Voice

logger = logging.getLogger(__name__)

Tap = Callable[[npt.NDArray[np.float32]], None]


class MixingBus:
    """
    Shared summing point for every voice.

    The same post-gain block goes to the hardware output (the return value
    of mix()) and to every registered tap, so a capture destination hears
    exactly what the listener hears.

    Thread-safe for use in audio callbacks.
    """

    def __init__(self, num_channels: int = 2, gain: float = 1.0):
        """
        Initialize mixing bus.

        Args:
            num_channels: Number of output channels (1=mono, 2=stereo)
            gain: Scalar multiplier applied to the summed block
        """
        self.num_channels = num_channels
        self._gain = max(0.0, float(gain))
        self._taps: list[Tap] = []
        self._lock = Lock()

    @property
    def gain(self) -> float:
        return self._gain

    @gain.setter
    def gain(self, value: float) -> None:
        self._gain = max(0.0, float(value))

    def add_tap(self, tap: Tap) -> None:
        """Register a callable receiving every mixed block."""
        with self._lock:
            if tap not in self._taps:
                self._taps.append(tap)

    def remove_tap(self, tap: Tap) -> None:
        with self._lock:
            if tap in self._taps:
                self._taps.remove(tap)

    @property
    def tap_count(self) -> int:
        with self._lock:
            return len(self._taps)

    def silence(self, num_frames: int) -> npt.NDArray[np.float32]:
        """Create an empty output block."""
        if self.num_channels == 1:
            return np.zeros(num_frames, dtype=np.float32)
        return np.zeros((num_frames, self.num_channels), dtype=np.float32)

    def mix(self, voices: Iterable[Voice], num_frames: int) -> npt.NDArray[np.float32]:
        """
        Mix voices into a single block and push it to the taps.

        Each voice is advanced by the number of frames it contributed, which
        completes (and fires the completion hook of) voices reaching their end.

        Args:
            voices: Voices to mix
            num_frames: Number of frames to generate

        Returns:
            Mixed audio block (num_frames, num_channels) or (num_frames,) for mono
        """
        output = self.silence(num_frames)

        for voice in voices:
            frames = voice.read(num_frames)
            if frames is None:
                continue

            frames_to_add = self._match_channels(frames, voice.audio_data.num_channels)

            add_length = min(len(frames_to_add), num_frames)
            if self.num_channels == 1:
                output[:add_length] += frames_to_add[:add_length]
            else:
                output[:add_length, :] += frames_to_add[:add_length, :]

            voice.advance(add_length)

        if self._gain != 1.0:
            output *= self._gain
        np.clip(output, -1.0, 1.0, out=output)

        self._push_to_taps(output)
        return output

    def _push_to_taps(self, block: npt.NDArray[np.float32]) -> None:
        with self._lock:
            taps = list(self._taps)

        for tap in taps:
            try:
                tap(block)
            except Exception as e:
                logger.error(f"Mixing bus tap {tap} failed: {e}", exc_info=True)

    def _match_channels(
        self,
        frames: npt.NDArray[np.float32],
        source_channels: int
    ) -> npt.NDArray[np.float32]:
        """
        Convert audio frames to match output channel count.

        Args:
            frames: Input audio frames
            source_channels: Number of channels in source

        Returns:
            Audio frames with matching channel count
        """
        if source_channels == self.num_channels:
            return frames

        # Mono to N channels
        if source_channels == 1:
            return np.repeat(frames[:, np.newaxis], self.num_channels, axis=1)

        # Multi-channel to mono
        if self.num_channels == 1:
            return np.mean(frames, axis=1, dtype=np.float32)

        # Multi-channel down to fewer channels
        if source_channels > self.num_channels:
            return frames[:, :self.num_channels]

        # Fewer channels up to more: pad with silence
        padded = np.zeros((len(frames), self.num_channels), dtype=np.float32)
        padded[:, :source_channels] = frames
        return padded
