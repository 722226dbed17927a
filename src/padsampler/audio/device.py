"""Audio output device and stream management (PortAudio via sounddevice)."""

import logging
import sys
from typing import Callable, Optional

import numpy as np
import sounddevice as sd

from padsampler.exceptions import AudioDeviceNotFoundError, wrap_audio_device_error

logger = logging.getLogger(__name__)


class AudioDevice:
    """
    Low-latency audio output stream.

    Handles device querying, stream lifecycle and callback registration.
    No sampler logic: the registered callback fills each output block.
    """

    def __init__(
        self,
        buffer_size: int = 512,
        num_channels: int = 2,
        device: Optional[int] = None,
        sample_rate: Optional[int] = None,
    ):
        """
        Initialize audio device.

        Args:
            buffer_size: Audio buffer size in frames (lower = less latency)
            num_channels: Number of output channels (1=mono, 2=stereo)
            device: Output device ID (None for default)
            sample_rate: Stream sample rate in Hz (None for the device default)

        Raises:
            AudioDeviceNotFoundError: If the device ID does not exist
        """
        self.buffer_size = buffer_size
        self.num_channels = num_channels

        if device is not None:
            self._validate_device(device)
        self.device = device

        self._sample_rate = sample_rate or self._default_sample_rate(device)

        self._stream: Optional[sd.OutputStream] = None
        self._is_running = False
        self._callback: Optional[Callable[[np.ndarray, int], None]] = None

    @staticmethod
    def _get_platform_apis() -> tuple[list[str], str]:
        """
        Get platform-specific host APIs listed first.

        - Windows: ASIO, WASAPI
        - macOS: Core Audio
        - Linux: ALSA, JACK, PulseAudio
        """
        if sys.platform == 'win32':
            return ['ASIO', 'WASAPI'], "ASIO/WASAPI"
        elif sys.platform == 'darwin':
            return ['Core Audio'], "Core Audio"
        else:
            return ['ALSA', 'JACK', 'PulseAudio'], "ALSA/JACK/PulseAudio"

    @staticmethod
    def _validate_device(device_id: int) -> None:
        """Check that the device exists and has output channels."""
        try:
            device_info = sd.query_devices(device_id)
        except Exception as e:
            raise AudioDeviceNotFoundError(device_id) from e

        if device_info['max_output_channels'] <= 0:
            raise AudioDeviceNotFoundError(device_id)

        logger.info(f"Validated device: {device_info['name']}")

    @staticmethod
    def _default_sample_rate(device: Optional[int]) -> int:
        try:
            device_id = device if device is not None else sd.default.device[1]
            return int(sd.query_devices(device_id)['default_samplerate'])
        except Exception:
            logger.warning("Could not query device sample rate, using 44100 Hz")
            return 44100

    def set_callback(self, callback: Callable[[np.ndarray, int], None]) -> None:
        """
        Set audio callback function.

        The callback will be called with (outdata, frames) for each audio block.
        """
        self._callback = callback

    def start(self) -> None:
        """
        Start audio stream.

        Raises:
            RuntimeError: If no callback has been set
            AudioDeviceError: If PortAudio cannot open the stream
        """
        if self._is_running:
            return

        if self._callback is None:
            raise RuntimeError("No audio callback set. Call set_callback() first.")

        device_id = self.device if self.device is not None else sd.default.device[1]

        try:
            self._log_device_info(device_id)
            self._stream = sd.OutputStream(
                samplerate=self._sample_rate,
                blocksize=self.buffer_size,
                channels=self.num_channels,
                device=device_id,
                dtype=np.float32,
                callback=self._audio_callback,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            self._stream = None
            raise wrap_audio_device_error(e, device_id) from e

        self._is_running = True

        latency_ms = self._stream.latency * 1000
        buffer_ms = self.buffer_size / self._sample_rate * 1000
        logger.info("Audio stream started")
        logger.info(f"  Buffer size: {self.buffer_size} frames ({buffer_ms:.1f}ms)")
        logger.info(f"  Total latency: {latency_ms:.1f}ms")

    def stop(self) -> None:
        """Stop audio stream."""
        if not self._is_running:
            return

        if self._stream:
            self._stream.stop()
            self._stream.close()
            self._stream = None

        self._is_running = False
        logger.info("Audio stream stopped")

    def _log_device_info(self, device_id: int) -> None:
        """Log details about the chosen audio device."""
        device_info = sd.query_devices(device_id)
        hostapi_info = sd.query_hostapis(device_info['hostapi'])
        logger.info(f"Audio device: {device_info['name']}")
        logger.info(f"  Host API: {hostapi_info['name']}")
        logger.info(f"  Max output channels: {device_info['max_output_channels']}")
        logger.info(f"  Default sample rate: {device_info['default_samplerate']} Hz")

    def _audio_callback(
        self,
        outdata: np.ndarray,
        frames: int,
        time_info,
        status
    ) -> None:
        """
        Internal audio callback called by sounddevice.

        Delegates to the registered callback.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")

        if self._callback:
            self._callback(outdata, frames)
        else:
            outdata.fill(0)

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def latency(self) -> float:
        """Get current stream latency in seconds."""
        if self._stream:
            return self._stream.latency
        return 0.0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def device_name(self) -> str:
        """Get the name of the current audio device."""
        try:
            if self.device is not None:
                return sd.query_devices(self.device)['name']
            default_device = sd.default.device[1]
            if default_device is not None and default_device >= 0:
                return f"{sd.query_devices(default_device)['name']} (default)"
            return "Default Device"
        except Exception:
            return "Unknown Device"

    @staticmethod
    def list_output_devices():
        """
        List all audio output devices, preferred host APIs first.

        Returns:
            Tuple of (devices, api_names) where:
            - devices: List of tuples (device_id, device_name, host_api_name, device_info)
            - api_names: String describing the preferred platform APIs
        """
        devices = sd.query_devices()
        hostapis = sd.query_hostapis()

        preferred_apis, api_names = AudioDevice._get_platform_apis()
        preferred, others = [], []

        for i, device in enumerate(devices):
            if device['max_output_channels'] > 0:
                hostapi_name = hostapis[device['hostapi']]['name']
                entry = (i, device['name'], hostapi_name, device)
                if any(api in hostapi_name for api in preferred_apis):
                    preferred.append(entry)
                else:
                    others.append(entry)

        return preferred + others, api_names

    @staticmethod
    def get_default_device() -> int:
        """Get default output device ID."""
        return sd.default.device[1]

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
