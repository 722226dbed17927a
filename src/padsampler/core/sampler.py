"""Composition root wiring the audio device, store, engine and recorder."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from padsampler.audio import AudioDecoder, CaptureDestination, MixingBus
from padsampler.exceptions import ErrorContext
from padsampler.models import AppConfig, LoadOutcome, Preset

from .playback import PlaybackEngine
from .recorder import SessionRecorder
from .sample_store import SampleStore, read_audio_file

logger = logging.getLogger(__name__)


class Sampler:
    """
    The sampler: one store, one engine and one recorder sharing one bus.

    Every component is created once here and handed its collaborators
    explicitly. The capture destination is tapped on the bus for the
    sampler's whole lifetime and only delivers while a recording is open.

    Example:
        ```python
        with Sampler(AppConfig.load_or_default()) as sampler:
            await sampler.load_preset(preset, client)
            sampler.engine.play(0)
        ```
    """

    def __init__(self, config: Optional[AppConfig] = None, audio_device=None):
        """
        Initialize sampler.

        Args:
            config: Application config (defaults if None)
            audio_device: Output device; an AudioDevice is opened from the
                          config when None
        """
        self.config = config or AppConfig()

        if audio_device is None:
            # Deferred: loading sounddevice requires PortAudio
            from padsampler.audio.device import AudioDevice

            with ErrorContext("open audio device", logger):
                audio_device = AudioDevice(
                    buffer_size=self.config.default_buffer_size,
                    num_channels=self.config.num_channels,
                    device=self.config.default_audio_device,
                    sample_rate=self.config.sample_rate,
                )

        self.audio_device = audio_device
        self.sample_rate: int = audio_device.sample_rate
        num_channels = audio_device.num_channels

        self.decoder = AudioDecoder(target_sample_rate=self.sample_rate)
        self.bus = MixingBus(num_channels=num_channels, gain=self.config.master_gain)
        self.capture = CaptureDestination(
            sample_rate=self.sample_rate,
            num_channels=num_channels,
            flush_interval=self.config.recording_flush_interval,
        )
        self.bus.add_tap(self.capture.write)

        self.store = SampleStore(decoder=self.decoder)
        self.engine = PlaybackEngine(
            self.store,
            audio_device=audio_device,
            bus=self.bus,
            max_polyphony=self.config.max_polyphony,
        )
        self.recorder = SessionRecorder(self.capture, decoder=AudioDecoder())

        logger.info(
            f"Sampler ready: {self.sample_rate} Hz, {num_channels} channel(s), "
            f"{self.store.capacity} pads"
        )

    # =================================================================
    # Lifecycle
    # =================================================================

    def start(self) -> None:
        """Start audio output."""
        with ErrorContext("start audio output", logger):
            self.engine.start()

    def stop(self) -> None:
        """Stop all voices and audio output."""
        self.engine.stop()

    @property
    def is_running(self) -> bool:
        return self.engine.is_running

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    # =================================================================
    # Loading
    # =================================================================

    async def load_preset(self, preset: Preset, client) -> list[LoadOutcome]:
        """
        Replace the store contents with a preset's samples.

        Samples go to slots 0..n-1 in preset order; samples beyond the
        store capacity are skipped.

        Args:
            preset: Preset to load
            client: PresetCatalogClient used to resolve and fetch samples
        """
        self.store.clear_all()

        urls = client.sample_urls(preset)
        items = [
            (slot, url, sample.name)
            for slot, (url, sample) in enumerate(zip(urls, preset.samples))
            if slot < self.store.capacity
        ]
        if len(urls) > self.store.capacity:
            logger.warning(
                f"Preset '{preset.name}' has {len(urls)} samples, "
                f"only the first {self.store.capacity} are loaded"
            )

        logger.info(f"Loading preset '{preset.name}' ({len(items)} samples)")
        return await self.store.load_many(items, client.fetch_bytes)

    async def upload_files(self, paths: Iterable[Path | str]) -> list[LoadOutcome]:
        """
        Load user files into the first free slots.

        Unsupported or unreadable files are reported per item; the rest load.
        """
        items = [(None, str(path)) for path in paths]
        return await self.store.load_many(items, read_audio_file)

    # =================================================================
    # Recording
    # =================================================================

    def save_recording(self, data: bytes, filename: Optional[str] = None) -> Path:
        """Save an export to the configured recordings directory."""
        return self.recorder.save(data, self.config.recordings_dir, filename)
