"""Audio data structures using dataclasses for performance.

These dataclasses store actual audio data (NumPy arrays) and runtime state.
They are NOT Pydantic models because:
- They contain non-serializable data (NumPy arrays)
- They need minimal overhead for real-time audio processing
- They are internal to the audio engine, not part of the API
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import numpy.typing as npt

from ..utils import format_bytes


@dataclass(slots=True)
class AudioData:
    """
    Decoded audio buffer.

    Samples are float32, shape (num_frames,) for mono or
    (num_frames, num_channels) for multi-channel audio.
    Treated as immutable once attached to a loaded sample.
    """

    data: npt.NDArray[np.float32]   # Audio samples as float32
    sample_rate: int                # Sample rate in Hz
    num_channels: int               # Number of channels (1=mono, 2=stereo)
    num_frames: int                 # Number of frames (samples per channel)
    format: Optional[str] = None    # Source container (e.g., 'WAV', 'FLAC')
    subtype: Optional[str] = None   # Source encoding (e.g., 'PCM_16', 'FLOAT')

    @classmethod
    def from_array(
        cls,
        data: npt.NDArray[np.float32],
        sample_rate: int
    ) -> "AudioData":
        """
        Create AudioData from a NumPy array.

        Args:
            data: Audio data, shape (num_frames,) for mono or
                  (num_frames, num_channels) for multi-channel
            sample_rate: Sample rate in Hz

        Returns:
            AudioData instance
        """
        if data.ndim == 1:
            num_channels = 1
            num_frames = len(data)
        elif data.ndim == 2:
            num_frames, num_channels = data.shape
        else:
            raise ValueError(f"Audio data must be 1D or 2D, got {data.ndim}D")

        if data.dtype != np.float32:
            data = data.astype(np.float32)

        return cls(
            data=data,
            sample_rate=sample_rate,
            num_channels=num_channels,
            num_frames=num_frames
        )

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[npt.ArrayLike],
        sample_rate: int
    ) -> "AudioData":
        """
        Create AudioData from one array per channel.

        Raises:
            ValueError: If no channels are given or their lengths differ
        """
        if len(channels) == 0:
            raise ValueError("At least one channel is required")

        arrays = [np.asarray(ch, dtype=np.float32) for ch in channels]
        lengths = {len(a) for a in arrays}
        if len(lengths) != 1:
            raise ValueError(f"Channel lengths differ: {[len(a) for a in arrays]}")

        if len(arrays) == 1:
            return cls.from_array(arrays[0], sample_rate)
        return cls.from_array(np.column_stack(arrays), sample_rate)

    @classmethod
    def silence(cls, num_frames: int, sample_rate: int, num_channels: int = 2) -> "AudioData":
        """Create a zero-filled buffer."""
        if num_channels == 1:
            return cls.from_array(np.zeros(num_frames, dtype=np.float32), sample_rate)
        return cls.from_array(np.zeros((num_frames, num_channels), dtype=np.float32), sample_rate)

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.num_frames / self.sample_rate

    @property
    def shape(self) -> tuple[int, ...]:
        """Shape of audio data array."""
        return self.data.shape

    def channels(self) -> list[npt.NDArray[np.float32]]:
        """Return one array per channel."""
        if self.num_channels == 1:
            return [self.data]
        return [self.data[:, ch] for ch in range(self.num_channels)]

    def frames(self, start: int, end: int) -> npt.NDArray[np.float32]:
        """Slice frames [start, end) across all channels."""
        if self.num_channels == 1:
            return self.data[start:end]
        return self.data[start:end, :]

    def get_info(self) -> dict:
        """
        Get audio buffer information.

        Returns:
            Dictionary with duration, sample rate, channels, frames and size
        """
        size_bytes = self.data.nbytes

        info = {
            'duration': self.duration,
            'sample_rate': self.sample_rate,
            'num_channels': self.num_channels,
            'num_frames': self.num_frames,
            'size_bytes': size_bytes,
            'size_str': format_bytes(size_bytes),
        }

        if self.format:
            info['format'] = self.format
        if self.subtype:
            info['subtype'] = self.subtype

        return info


@dataclass(slots=True, eq=False)
class Voice:
    """
    One active one-shot playback instance of a sample.

    The voice reads frames [start_frame, end_frame) of its audio buffer.
    It does not own the buffer; it keeps a reference only while playing.
    `on_complete` fires exactly once, when the voice reaches end_frame
    during mixing. A forced stop() never fires it.
    """

    voice_id: int
    slot: int
    audio_data: AudioData
    start_frame: int
    end_frame: int
    volume: float = 1.0
    started_at: float = field(default_factory=time.monotonic)
    on_complete: Optional[Callable[["Voice"], None]] = None

    position: int = field(default=0, init=False)
    is_playing: bool = field(default=True, init=False)

    def __post_init__(self) -> None:
        self.position = self.start_frame

    def stop(self) -> None:
        """Stop playback. Safe to call on a voice that already finished."""
        self.is_playing = False

    def read(self, num_frames: int) -> Optional[npt.NDArray[np.float32]]:
        """
        Get the next block of frames, truncated at end_frame.

        Returns:
            Audio frames as float32 array, or None if not playing
        """
        if not self.is_playing or self.position >= self.end_frame:
            return None

        end_pos = min(self.position + num_frames, self.end_frame)
        frames = self.audio_data.frames(self.position, end_pos)

        if self.volume != 1.0:
            frames = frames * self.volume

        return frames

    def advance(self, num_frames: int) -> None:
        """
        Advance playback position and complete the voice at end_frame.

        Args:
            num_frames: Number of frames consumed by the mixer
        """
        if not self.is_playing:
            return

        self.position += num_frames

        if self.position >= self.end_frame:
            self.position = self.end_frame
            self.is_playing = False
            if self.on_complete is not None:
                callback, self.on_complete = self.on_complete, None
                callback(self)

    @property
    def start_seconds(self) -> float:
        return self.start_frame / self.audio_data.sample_rate

    @property
    def end_seconds(self) -> float:
        return self.end_frame / self.audio_data.sample_rate

    @property
    def progress(self) -> float:
        """Playback progress as fraction (0.0 to 1.0)."""
        length = self.end_frame - self.start_frame
        if length <= 0:
            return 1.0
        return min((self.position - self.start_frame) / length, 1.0)

    @property
    def time_remaining(self) -> float:
        """Remaining playback time in seconds."""
        remaining_frames = max(0, self.end_frame - self.position)
        return remaining_frames / self.audio_data.sample_rate
