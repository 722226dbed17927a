"""Capture destination tapping the mixing bus output."""

import io
import logging
from collections.abc import Callable
from threading import Lock
from typing import Optional

import numpy as np
import numpy.typing as npt
import soundfile as sf

logger = logging.getLogger(__name__)

ChunkListener = Callable[[bytes], None]


class CaptureDestination:
    """
    Bus tap that turns the mixed output into a stream of raw chunks.

    While open, incoming blocks are buffered and every `flush_interval`
    seconds of audio one chunk is pushed to the listener. Chunks are
    headerless little-endian float32 interleaved frames, so concatenating
    them in order yields a valid capture stream.

    `write()` is called from the audio thread; open/close from the caller.
    """

    def __init__(self, sample_rate: int, num_channels: int = 2, flush_interval: float = 1.0):
        """
        Initialize capture destination.

        Args:
            sample_rate: Sample rate of the bus in Hz
            num_channels: Number of channels of the bus
            flush_interval: Seconds of audio per delivered chunk
        """
        if flush_interval <= 0:
            raise ValueError(f"flush_interval must be positive, got {flush_interval}")

        self.sample_rate = sample_rate
        self.num_channels = num_channels
        self.flush_interval = flush_interval
        self.frames_per_chunk = max(1, int(round(sample_rate * flush_interval)))

        self._lock = Lock()
        self._listener: Optional[ChunkListener] = None
        self._pending: list[npt.NDArray[np.float32]] = []
        self._pending_frames = 0

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._listener is not None

    def open(self, listener: ChunkListener) -> None:
        """Start delivering chunks to `listener`, dropping any stale buffer."""
        with self._lock:
            self._listener = listener
            self._pending = []
            self._pending_frames = 0
        logger.debug(f"Capture opened ({self.frames_per_chunk} frames per chunk)")

    def close(self) -> None:
        """Flush the remaining partial chunk and stop delivering."""
        with self._lock:
            listener = self._listener
            chunk = self._drain()
            self._listener = None

        if listener is not None and chunk:
            listener(chunk)
        logger.debug("Capture closed")

    def write(self, block: npt.NDArray[np.float32]) -> None:
        """Accept one mixed block. Ignored while closed."""
        chunks = []
        with self._lock:
            listener = self._listener
            if listener is None:
                return

            self._pending.append(np.array(block, dtype=np.float32, copy=True))
            self._pending_frames += len(block)

            while self._pending_frames >= self.frames_per_chunk:
                chunks.append(self._drain(self.frames_per_chunk))

        for chunk in chunks:
            listener(chunk)

    __call__ = write

    def _drain(self, max_frames: Optional[int] = None) -> bytes:
        """Remove up to max_frames buffered frames and encode them. Lock must be held."""
        if not self._pending:
            return b""

        frames = np.concatenate(self._pending, axis=0)
        if max_frames is None or max_frames >= len(frames):
            taken, rest = frames, frames[len(frames):]
        else:
            taken, rest = frames[:max_frames], frames[max_frames:]

        self._pending = [rest] if len(rest) else []
        self._pending_frames = len(rest)

        if len(taken) == 0:
            return b""
        return self._encode(taken)

    def _encode(self, frames: npt.NDArray[np.float32]) -> bytes:
        buffer = io.BytesIO()
        sf.write(
            buffer,
            frames,
            self.sample_rate,
            format='RAW',
            subtype='FLOAT',
            endian='LITTLE',
        )
        return buffer.getvalue()
