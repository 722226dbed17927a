"""Pytest fixtures for tests."""

import asyncio
import io
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Callable, Optional

import numpy as np
import pytest
import soundfile as sf

from padsampler.audio import AudioDecoder, CaptureDestination, MixingBus
from padsampler.core import PlaybackEngine, SampleStore, SessionRecorder

SAMPLE_RATE = 8000


def make_wav_bytes(
    num_frames: int = 800,
    sample_rate: int = SAMPLE_RATE,
    channels: int = 1,
    value: Optional[float] = 0.5,
) -> bytes:
    """Encode a float WAV in memory: constant `value`, or a 440 Hz tone if None."""
    if value is None:
        t = np.arange(num_frames, dtype=np.float32) / sample_rate
        mono = (0.5 * np.sin(2 * np.pi * 440 * t)).astype(np.float32)
    else:
        mono = np.full(num_frames, value, dtype=np.float32)

    data = mono if channels == 1 else np.column_stack([mono] * channels)

    buffer = io.BytesIO()
    sf.write(buffer, data, sample_rate, format='WAV', subtype='FLOAT')
    return buffer.getvalue()


class FakeAudioDevice:
    """Stands in for AudioDevice: records lifecycle calls, pulls blocks on demand."""

    def __init__(self, sample_rate: int = SAMPLE_RATE, num_channels: int = 2):
        self.sample_rate = sample_rate
        self.num_channels = num_channels
        self.is_running = False
        self.callback: Optional[Callable[[np.ndarray, int], None]] = None

    def set_callback(self, callback):
        self.callback = callback

    def start(self):
        self.is_running = True

    def stop(self):
        self.is_running = False

    def pull(self, frames: int) -> np.ndarray:
        """Run the callback once like the PortAudio thread would."""
        outdata = np.zeros((frames, self.num_channels), dtype=np.float32)
        self.callback(outdata, frames)
        return outdata


def load(store: SampleStore, slot: int, data: bytes, source_ref: str = "<bytes>"):
    """Run a bytes load to completion from synchronous code, on a private loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(store.load_from_bytes(slot, data, source_ref=source_ref))
    finally:
        loop.close()


def render_all(engine: PlaybackEngine, total_frames: int, block: int = 64) -> int:
    """Render blocks until at least total_frames were produced. Returns frames rendered."""
    rendered = 0
    while rendered < total_frames:
        engine.render(block)
        rendered += block
    return rendered


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def wav_bytes():
    """100 ms of constant 0.5 at 8 kHz, mono."""
    return make_wav_bytes()


@pytest.fixture
def sample_audio_file(temp_dir):
    """Create a simple test audio file."""
    file_path = temp_dir / "kick.wav"
    file_path.write_bytes(make_wav_bytes(value=None))
    return file_path


@pytest.fixture
def sample_audio_array():
    """Generate sample audio data as NumPy array."""
    t = np.arange(800, dtype=np.float32) / SAMPLE_RATE
    return np.sin(2 * np.pi * 440 * t).astype(np.float32)


@pytest.fixture
def store():
    return SampleStore(decoder=AudioDecoder())


@pytest.fixture
def loaded_store(store):
    """Store with 100 ms samples in slots 0, 1 and 2."""
    for slot in range(3):
        load(store, slot, make_wav_bytes(), source_ref=f"pad{slot}.wav")
    return store


@pytest.fixture
def bus():
    return MixingBus(num_channels=2)


@pytest.fixture
def engine(loaded_store, bus):
    return PlaybackEngine(loaded_store, bus=bus)


@pytest.fixture
def capture(bus):
    """Capture tapped on the bus, 10 ms (80 frames) per chunk."""
    destination = CaptureDestination(SAMPLE_RATE, num_channels=2, flush_interval=0.01)
    bus.add_tap(destination.write)
    return destination


@pytest.fixture
def recorder(capture):
    return SessionRecorder(capture)


@pytest.fixture
def fake_device():
    return FakeAudioDevice()
