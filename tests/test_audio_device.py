"""Tests for AudioDevice with sounddevice patched out."""

import sys
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from padsampler.exceptions import AudioDeviceError, AudioDeviceInUseError, AudioDeviceNotFoundError

try:
    from padsampler.audio.device import AudioDevice
except OSError:
    # sounddevice raises OSError when the PortAudio library is missing
    pytest.skip("PortAudio library not available", allow_module_level=True)


DEVICES = [
    {'name': 'Mic', 'hostapi': 0, 'max_output_channels': 0, 'default_samplerate': 48000.0},
    {'name': 'Speakers', 'hostapi': 1, 'max_output_channels': 2, 'default_samplerate': 48000.0},
    {'name': 'Interface', 'hostapi': 0, 'max_output_channels': 8, 'default_samplerate': 44100.0},
]
HOSTAPIS = [{'name': 'Preferred API'}, {'name': 'Other API'}]


@pytest.fixture
def sd():
    """Patch the sounddevice module used by AudioDevice."""
    with patch("padsampler.audio.device.sd") as mock_sd:
        mock_sd.PortAudioError = type("PortAudioError", (Exception,), {})
        mock_sd.default.device = [0, 1]
        mock_sd.query_devices.side_effect = lambda device=None: DEVICES if device is None else DEVICES[device]
        mock_sd.query_hostapis.side_effect = lambda index=None: HOSTAPIS if index is None else HOSTAPIS[index]
        yield mock_sd


@pytest.mark.unit
class TestAudioDevice:
    """Test AudioDevice class."""

    def test_get_platform_apis(self):
        """Test that platform APIs are correctly identified."""
        apis, api_names = AudioDevice._get_platform_apis()

        if sys.platform == 'win32':
            assert 'WASAPI' in apis
        elif sys.platform == 'darwin':
            assert api_names == 'Core Audio'
        else:
            assert 'ALSA' in apis
            assert api_names == 'ALSA/JACK/PulseAudio'

    def test_default_sample_rate_from_device(self, sd):
        device = AudioDevice()
        assert device.sample_rate == 48000

    def test_explicit_sample_rate(self, sd):
        assert AudioDevice(sample_rate=8000).sample_rate == 8000

    def test_invalid_device_id(self, sd):
        with pytest.raises(AudioDeviceNotFoundError):
            AudioDevice(device=0)  # input-only device

    def test_list_output_devices_prefers_platform_apis(self, sd):
        with patch.object(AudioDevice, "_get_platform_apis", return_value=(['Preferred'], 'Preferred')):
            devices, api_names = AudioDevice.list_output_devices()

        assert api_names == 'Preferred'
        assert [d[0] for d in devices] == [2, 1]
        assert devices[0][2] == 'Preferred API'

    def test_start_without_callback_raises(self, sd):
        device = AudioDevice(sample_rate=8000)
        with pytest.raises(RuntimeError):
            device.start()

    def test_start_opens_stream(self, sd):
        device = AudioDevice(buffer_size=256, sample_rate=8000)
        device.set_callback(lambda outdata, frames: None)
        sd.OutputStream.return_value.latency = 0.01

        with device:
            assert device.is_running
            kwargs = sd.OutputStream.call_args.kwargs
            assert kwargs['blocksize'] == 256
            assert kwargs['samplerate'] == 8000
            assert kwargs['device'] == 1

        assert not device.is_running
        sd.OutputStream.return_value.close.assert_called_once()

    def test_device_in_use_error(self, sd):
        sd.OutputStream.side_effect = sd.PortAudioError("Error opening OutputStream [PaErrorCode -9996]")
        device = AudioDevice(sample_rate=8000)
        device.set_callback(lambda outdata, frames: None)

        with pytest.raises(AudioDeviceInUseError):
            device.start()
        assert not device.is_running

    def test_generic_stream_error(self, sd):
        sd.OutputStream.side_effect = sd.PortAudioError("Unanticipated host error")
        device = AudioDevice(sample_rate=8000)
        device.set_callback(lambda outdata, frames: None)

        with pytest.raises(AudioDeviceError):
            device.start()

    def test_internal_callback_delegates(self, sd):
        device = AudioDevice(sample_rate=8000)
        callback = MagicMock()
        device.set_callback(callback)
        outdata = np.zeros((16, 2), dtype=np.float32)

        device._audio_callback(outdata, 16, None, None)

        callback.assert_called_once_with(outdata, 16)

    def test_device_name(self, sd):
        assert AudioDevice(sample_rate=8000).device_name == "Speakers (default)"
        assert AudioDevice(device=2, sample_rate=8000).device_name == "Interface"
