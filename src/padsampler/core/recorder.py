"""Session recorder: captures the mixing bus and exports 16-bit PCM WAV."""

import asyncio
import logging
import time
from pathlib import Path
from threading import Lock
from typing import Optional

from padsampler.audio import AudioDecoder, CaptureDestination, encode_wav
from padsampler.exceptions import (
    AlreadyRecordingError,
    EncodeError,
    NotRecordingError,
    RecordingFinalizeError,
    SampleDecodeError,
)
from padsampler.models import RecorderState
from padsampler.protocols import RecordingEvent, RecordingObserver
from padsampler.utils import ObserverManager, recording_filename

logger = logging.getLogger(__name__)


class SessionRecorder:
    """
    Records everything played through the mixing bus.

    State machine: IDLE -> RECORDING -> FINALIZING -> IDLE.

    While recording, the capture destination pushes one raw chunk per
    flush interval; the recorder only appends. stop() joins the chunks,
    decodes the capture stream back to float frames and encodes them as
    16-bit PCM WAV.
    """

    def __init__(self, capture: CaptureDestination, decoder: Optional[AudioDecoder] = None):
        """
        Initialize recorder.

        Args:
            capture: Capture destination already tapped on the mixing bus
            decoder: Decoder for the capture stream
        """
        self._capture = capture
        self._decoder = decoder or AudioDecoder()

        self._lock = Lock()
        self._state = RecorderState.IDLE
        self._chunks: list[bytes] = []
        self._started_at: Optional[float] = None

        self._observers = ObserverManager[RecordingObserver](observer_type_name="recording")

    # =================================================================
    # State
    # =================================================================

    @property
    def state(self) -> RecorderState:
        with self._lock:
            return self._state

    @property
    def is_recording(self) -> bool:
        return self.state is RecorderState.RECORDING

    @property
    def chunk_count(self) -> int:
        with self._lock:
            return len(self._chunks)

    def duration(self) -> float:
        """Seconds elapsed since start(), 0.0 when idle."""
        with self._lock:
            if self._state is RecorderState.IDLE or self._started_at is None:
                return 0.0
            return time.monotonic() - self._started_at

    # =================================================================
    # Recording
    # =================================================================

    def start(self) -> None:
        """
        Start capturing the mixing bus.

        Raises:
            AlreadyRecordingError: If not idle
        """
        with self._lock:
            if self._state is not RecorderState.IDLE:
                raise AlreadyRecordingError()
            self._chunks = []
            self._state = RecorderState.RECORDING
            self._started_at = time.monotonic()

        self._capture.open(self._on_chunk)
        logger.info("Recording started")
        self._observers.notify("on_recording_event", RecordingEvent.STARTED, None)

    def _on_chunk(self, chunk: bytes) -> None:
        """Capture listener, called from the audio thread."""
        with self._lock:
            if self._state is RecorderState.IDLE:
                return
            self._chunks.append(chunk)
            count = len(self._chunks)

        logger.debug(f"Recording chunk {count}: {len(chunk)} bytes")
        self._observers.notify("on_recording_event", RecordingEvent.CHUNK_RECEIVED, len(chunk))

    async def stop(self) -> bytes:
        """
        Stop recording and produce the WAV export.

        Returns:
            The encoded WAV bytes (a header-only file if nothing played)

        Raises:
            NotRecordingError: If not recording
            RecordingFinalizeError: If the capture cannot be decoded or encoded
        """
        with self._lock:
            if self._state is not RecorderState.RECORDING:
                raise NotRecordingError()
            self._state = RecorderState.FINALIZING

        # Flushes the partial chunk through _on_chunk
        self._capture.close()

        with self._lock:
            chunks, self._chunks = self._chunks, []
            elapsed = time.monotonic() - self._started_at

        logger.info(f"Recording stopped after {elapsed:.2f}s, finalizing {len(chunks)} chunk(s)")

        try:
            data = await asyncio.to_thread(self._finalize, chunks)
        except RecordingFinalizeError as e:
            logger.error(f"Recording finalize failed: {e.technical_message}")
            self._observers.notify("on_recording_event", RecordingEvent.FAILED, e)
            raise
        finally:
            with self._lock:
                self._state = RecorderState.IDLE
                self._started_at = None

        logger.info(f"Recording finalized: {len(data)} bytes")
        self._observers.notify("on_recording_event", RecordingEvent.FINISHED, len(data))
        return data

    def _finalize(self, chunks: list[bytes]) -> bytes:
        """Join, decode and encode the captured chunks."""
        stream = b"".join(chunks)
        try:
            audio = self._decoder.decode_raw(
                stream,
                self._capture.sample_rate,
                self._capture.num_channels,
            )
            return encode_wav(audio)
        except (SampleDecodeError, EncodeError) as e:
            raise RecordingFinalizeError(e.technical_message) from e
        except Exception as e:
            raise RecordingFinalizeError(str(e)) from e

    # =================================================================
    # Export
    # =================================================================

    @staticmethod
    def save(data: bytes, directory: Path, filename: Optional[str] = None) -> Path:
        """
        Write an export to disk.

        Args:
            data: Encoded WAV bytes from stop()
            directory: Target directory (created if missing)
            filename: File name (defaults to sampler-recording-<timestamp>.wav)

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / (filename or recording_filename())
        path.write_bytes(data)
        logger.info(f"Saved recording to {path}")
        return path

    # =================================================================
    # Observers
    # =================================================================

    def register_observer(self, observer: RecordingObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: RecordingObserver) -> None:
        self._observers.unregister(observer)
